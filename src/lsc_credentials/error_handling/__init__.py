"""
Error handling for credential packaging.

Provides the exception taxonomy and the input validators that run before
any external tool is invoked.
"""

from .exceptions import (
    LSCCredentialError,
    PreconditionViolation,
    WorkspaceError,
    ExternalToolError,
    ArtifactReadError,
)
from .validators import (
    MIN_PASSPHRASE_LENGTH,
    validate_username,
    validate_passphrase,
    validate_comment,
    validate_public_key,
    validate_maintainer,
)

__all__ = [
    # Exceptions
    "LSCCredentialError",
    "PreconditionViolation",
    "WorkspaceError",
    "ExternalToolError",
    "ArtifactReadError",
    # Validators
    "MIN_PASSPHRASE_LENGTH",
    "validate_username",
    "validate_passphrase",
    "validate_comment",
    "validate_public_key",
    "validate_maintainer",
]
