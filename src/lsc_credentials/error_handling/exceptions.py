"""
Exception taxonomy for credential packaging.

Every top-level operation either returns an artifact or raises exactly one
of these errors.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..pipeline.process import Invocation


class LSCCredentialError(Exception):
    """Base class for all credential packaging failures."""


class PreconditionViolation(LSCCredentialError, ValueError):
    """Input was rejected before any external tool was invoked."""


class WorkspaceError(LSCCredentialError):
    """A scratch directory could not be created, written or removed."""


class ExternalToolError(LSCCredentialError):
    """An external tool failed to spawn, was killed, or exited non-zero.

    Attributes:
        invocation: The failed invocation, with captured output for diagnostics
    """

    def __init__(self, message: str, invocation: Optional["Invocation"] = None):
        super().__init__(message)
        self.invocation = invocation


class ArtifactReadError(LSCCredentialError):
    """The expected output file was missing, empty or unreadable."""
