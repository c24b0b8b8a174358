"""
RPM and Debian package builders.

Each builder stages the caller's public key as ``<username>.pub`` in a
private directory and runs the matching packaging script, which creates a
package that adds the user and installs the key as an authorized key.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..error_handling import (
    WorkspaceError,
    validate_maintainer,
    validate_public_key,
    validate_username,
)
from ..pipeline import Artifact, ArtifactKind, ProcessRunner, WorkspaceManager, load_artifact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageRequest:
    """Input to a package builder.

    Attributes:
        username: Account the package creates
        public_key: Public key installed for the account
        maintainer: Package maintainer identity (Debian only)
    """
    username: str
    public_key: Union[str, bytes]
    maintainer: Optional[str] = None

    def __post_init__(self):
        validate_username(self.username)
        object.__setattr__(self, "public_key", validate_public_key(self.public_key))


class PackageBuilder(ABC):
    """Base class for builders that wrap an external packaging script."""

    kind: ArtifactKind
    PACKAGE_FILENAME: str

    def __init__(
        self,
        workspaces: WorkspaceManager,
        tool: str,
        runner: Optional[ProcessRunner] = None,
    ):
        """Initialize the builder.

        Args:
            workspaces: Manager for scratch directories
            tool: Path of the packaging script
            runner: Process runner used to invoke the script
        """
        self.workspaces = workspaces
        self.tool = tool
        self.runner = runner or ProcessRunner()

    @abstractmethod
    def _tool_args(
        self,
        request: PackageRequest,
        staged_key: Path,
        staging: Path,
        destination: Path,
    ) -> list:
        """Positional arguments for the packaging script."""

    def _check_request(self, request: PackageRequest) -> None:
        """Hook for format-specific request validation."""

    def build(
        self,
        request: PackageRequest,
        public_key_path: Union[str, Path],
        destination: Union[str, Path],
    ) -> None:
        """Build a package at the destination path.

        The staging directory is removed whether or not the build succeeds.
        Failing to remove it turns an otherwise successful build into a failure.

        Args:
            request: Package request
            public_key_path: File holding the public key to install
            destination: Where the script must write the package

        Raises:
            PreconditionViolation: If the request is incomplete for this format
            WorkspaceError: If staging fails or the staging directory cannot be removed
            ExternalToolError: If the packaging script fails
        """
        self._check_request(request)
        kind = self.kind.value

        staging = self.workspaces.create(prefix=f"lsc_{kind}_create_")
        try:
            staged_key = staging / f"{request.username}.pub"
            logger.debug("Copying key %s to %s", public_key_path, staged_key)
            try:
                shutil.copyfile(public_key_path, staged_key)
            except OSError as e:
                raise WorkspaceError(
                    f"Failed to copy key file {public_key_path} to {staged_key}: {e}"
                ) from e

            logger.debug("Attempting %s build", kind.upper())
            self.runner.run(
                self.tool,
                self._tool_args(request, staged_key, staging, Path(destination)),
                cwd=staging,
            ).check(f"create the {kind}")
        finally:
            removed = self.workspaces.destroy(staging)

        if not removed:
            raise WorkspaceError(f"Failed to remove temporary directory {staging}")

    def recreate(self, request: PackageRequest) -> Artifact:
        """Build a package and return its content.

        Uses one workspace for the public key and one for the package; both
        are removed before returning, after the package has been read.

        Args:
            request: Package request

        Returns:
            The package artifact
        """
        self._check_request(request)
        kind = self.kind.value

        with self.workspaces.workspace(prefix="lsc_pubkey_") as key_dir:
            public_key_path = key_dir / "key.pub"
            try:
                public_key_path.write_bytes(request.public_key)
            except OSError as e:
                raise WorkspaceError(f"Failed to write public key {public_key_path}: {e}") from e

            with self.workspaces.workspace(prefix=f"lsc_{kind}_") as package_dir:
                destination = package_dir / self.PACKAGE_FILENAME
                logger.debug("%s_path: %s", kind, destination)
                self.build(request, public_key_path, destination)
                return load_artifact(destination, self.kind)


class RPMBuilder(PackageBuilder):
    """Builds RPM packages: ``<tool> username key staging destination``."""

    kind = ArtifactKind.RPM
    PACKAGE_FILENAME = "p.rpm"

    def _tool_args(self, request, staged_key, staging, destination):
        return [request.username, staged_key, staging, destination]


class DebBuilder(PackageBuilder):
    """Builds Debian packages: ``<tool> username key staging destination maintainer``."""

    kind = ArtifactKind.DEB
    PACKAGE_FILENAME = "p.deb"

    def _check_request(self, request: PackageRequest) -> None:
        validate_maintainer(request.maintainer)

    def _tool_args(self, request, staged_key, staging, destination):
        return [request.username, staged_key, staging, destination, request.maintainer]
