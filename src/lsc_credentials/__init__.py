"""
LSC Credentials - local security check credential packaging.

This package generates SSH keypairs and builds RPM, Debian and Windows
installer packages that provision a scanning account on a remote host,
running the external generator tools inside private scratch directories.
"""

__version__ = "0.1.0"

from .credentials import (
    CredentialPackager,
    generate_keypair,
    recreate_rpm,
    recreate_deb,
    recreate_exe,
)
from .builders import public_key_from_private
from .config import PackagerConfig, load_config
from .error_handling import (
    LSCCredentialError,
    PreconditionViolation,
    WorkspaceError,
    ExternalToolError,
    ArtifactReadError,
)
from .pipeline import Artifact, ArtifactKind

__all__ = [
    "CredentialPackager",
    "generate_keypair",
    "recreate_rpm",
    "recreate_deb",
    "recreate_exe",
    "public_key_from_private",
    "PackagerConfig",
    "load_config",
    "LSCCredentialError",
    "PreconditionViolation",
    "WorkspaceError",
    "ExternalToolError",
    "ArtifactReadError",
    "Artifact",
    "ArtifactKind",
]
