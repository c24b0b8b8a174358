"""Shared pytest fixtures for lsc-credentials tests.

External tools are replaced by stub shell scripts written into tmp_path,
and every workspace is created under an isolated scratch root.
"""

import shutil
from pathlib import Path
from typing import Callable, Generator

import pytest

from lsc_credentials.config import ENV_VARS, PackagerConfig
from lsc_credentials.credentials import CredentialPackager
from tests.mocks import (
    DEB_STUB,
    KEYGEN_STUB,
    MAKENSIS_STUB,
    RPM_STUB,
    SpyRunner,
    write_stub,
)

SAMPLE_PUBLIC_KEY = b"ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQC7stubkey alice@example.com\n"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Requires real external tools")


def has_ssh_keygen() -> bool:
    """Check if ssh-keygen is available."""
    return shutil.which("ssh-keygen") is not None


skip_no_ssh_keygen = pytest.mark.skipif(
    not has_ssh_keygen(),
    reason="ssh-keygen not available"
)


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    """Provide an isolated scratch root for workspaces."""
    root = tmp_path / "scratch"
    root.mkdir()
    return root


@pytest.fixture
def record_dir(tmp_path: Path) -> Path:
    """Provide a directory where stub tools record their inputs."""
    record = tmp_path / "record"
    record.mkdir()
    return record


@pytest.fixture
def tools_dir(tmp_path: Path) -> Path:
    tools = tmp_path / "tools"
    tools.mkdir()
    return tools


@pytest.fixture
def make_stub(tools_dir: Path, record_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing a named stub tool.

    Returns:
        Function (name, body) -> script path
    """
    def _make(name: str, body: str) -> Path:
        return write_stub(tools_dir / name, body, record_dir)
    return _make


@pytest.fixture
def stub_config(scratch_root: Path, make_stub) -> PackagerConfig:
    """Configuration pointing every tool at a well-behaved stub."""
    return PackagerConfig(
        scratch_root=scratch_root,
        keygen_command=str(make_stub("keygen", KEYGEN_STUB)),
        rpm_creator=str(make_stub("rpm-creator.sh", RPM_STUB)),
        deb_creator=str(make_stub("deb-creator.sh", DEB_STUB)),
        makensis_command=str(make_stub("makensis", MAKENSIS_STUB)),
    )


@pytest.fixture
def spy_runner() -> SpyRunner:
    return SpyRunner()


@pytest.fixture
def packager(stub_config: PackagerConfig, spy_runner: SpyRunner) -> CredentialPackager:
    """Credential packager wired to stub tools and a spy runner."""
    return CredentialPackager(stub_config, runner=spy_runner)


# Autouse fixture for test isolation
@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch) -> Generator[None, None, None]:
    """Ensure LSC_* variables from the host do not leak into tests."""
    monkeypatch.delenv("LSC_CONFIG_PATH", raising=False)
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    yield
