"""
Configuration for credential packaging.

Settings can come from a YAML file (LSC_CONFIG_PATH) or from environment
variables. Every setting has a default, so an empty environment yields a
usable configuration.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_DATA_DIR = Path("/usr/share/lsc-credentials")

# Maps config file keys to environment variables
ENV_VARS = {
    "scratch_root": "LSC_SCRATCH_ROOT",
    "keygen_command": "LSC_KEYGEN_COMMAND",
    "rpm_creator": "LSC_RPM_CREATOR",
    "deb_creator": "LSC_DEB_CREATOR",
    "makensis_command": "LSC_MAKENSIS_COMMAND",
    "key_comment": "LSC_KEY_COMMENT",
    "log_level": "LSC_LOG_LEVEL",
}


def _default_scratch_root() -> Path:
    return Path(tempfile.gettempdir())


@dataclass
class PackagerConfig:
    """Settings for the credential packaging pipeline.

    Attributes:
        scratch_root: Directory under which workspaces are created
        keygen_command: SSH keypair generator executable
        rpm_creator: RPM packaging script
        deb_creator: Debian packaging script
        makensis_command: NSIS installer compiler executable
        key_comment: Comment embedded in generated keys
        log_level: Logging level name for the command line entry point
    """
    scratch_root: Path = field(default_factory=_default_scratch_root)
    keygen_command: str = "ssh-keygen"
    rpm_creator: str = str(DEFAULT_DATA_DIR / "lsc-rpm-creator.sh")
    deb_creator: str = str(DEFAULT_DATA_DIR / "lsc-deb-creator.sh")
    makensis_command: str = "makensis"
    key_comment: str = "Key generated by LSC credentials"
    log_level: str = "INFO"

    def __post_init__(self):
        self.scratch_root = Path(self.scratch_root).expanduser()

    @classmethod
    def from_config_file(cls, config_path: str) -> "PackagerConfig":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PackagerConfig instance

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file contains unknown keys
        """
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        unknown = set(data) - set(ENV_VARS)
        if unknown:
            raise ValueError(
                f"Unknown configuration keys in {config_path}: {', '.join(sorted(unknown))}"
            )

        return cls(**{key: value for key, value in data.items() if value is not None})

    @classmethod
    def from_env(cls) -> "PackagerConfig":
        """Load configuration from environment variables.

        Unset variables fall back to the defaults.
        """
        values = {}
        for key, env_var in ENV_VARS.items():
            value = os.environ.get(env_var)
            if value:
                values[key] = value
        return cls(**values)

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If a tool command is empty or the scratch root is missing
        """
        for key in ("keygen_command", "rpm_creator", "deb_creator", "makensis_command"):
            if not getattr(self, key):
                raise ValueError(f"{key} is required")

        if not self.key_comment:
            raise ValueError("key_comment is required")

        if not self.scratch_root.is_dir():
            raise ValueError(f"Scratch root does not exist: {self.scratch_root}")


def load_config(config_path: Optional[str] = None) -> PackagerConfig:
    """Load configuration from the best available source.

    Priority:
    1. Explicit config_path argument
    2. LSC_CONFIG_PATH environment variable (YAML file)
    3. Individual LSC_* environment variables, with defaults

    Returns:
        A validated PackagerConfig
    """
    config_path = config_path or os.environ.get("LSC_CONFIG_PATH")
    if config_path:
        config = PackagerConfig.from_config_file(config_path)
    else:
        config = PackagerConfig.from_env()

    config.validate()
    return config
