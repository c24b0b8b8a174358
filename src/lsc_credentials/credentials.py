"""
Local security check credential operations.

Each operation returns an artifact or raises a single LSCCredentialError,
and leaves no scratch directories behind on either path.
"""

import logging
from typing import Optional, Union

from .builders import (
    DebBuilder,
    InstallerBuilder,
    KeyPairGenerator,
    PackageRequest,
    RPMBuilder,
)
from .config import PackagerConfig, load_config
from .pipeline import Artifact, ArtifactKind, ProcessRunner, WorkspaceManager

logger = logging.getLogger(__name__)


class CredentialPackager:
    """Produces LSC keypairs and user-provisioning packages."""

    def __init__(
        self,
        config: Optional[PackagerConfig] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """Initialize the packager.

        Args:
            config: Tool paths and scratch root (loaded from the environment if None)
            runner: Process runner shared by all builders
        """
        self.config = config or load_config()
        self.runner = runner or ProcessRunner()
        self.workspaces = WorkspaceManager(self.config.scratch_root)

        self.keypair_generator = KeyPairGenerator(
            self.workspaces, self.runner, self.config.keygen_command
        )
        self.rpm_builder = RPMBuilder(self.workspaces, self.config.rpm_creator, self.runner)
        self.deb_builder = DebBuilder(self.workspaces, self.config.deb_creator, self.runner)
        self.installer_builder = InstallerBuilder(
            self.workspaces, self.runner, self.config.makensis_command
        )

    def generate_keypair(self, password: str) -> Artifact:
        """Generate an SSH keypair and return the encrypted private key.

        Args:
            password: Passphrase for the key, at least five characters

        Returns:
            The private key artifact
        """
        material = self.keypair_generator.generate(self.config.key_comment, password)
        logger.info("Generated LSC keypair (%d byte private key)", len(material.private_key))
        return Artifact(kind=ArtifactKind.KEY, data=material.private_key)

    def recreate_rpm(self, name: str, public_key: Union[str, bytes]) -> Artifact:
        """Build an RPM that creates a user and installs their public key.

        Args:
            name: Account name
            public_key: OpenSSH public key line

        Returns:
            The RPM artifact
        """
        artifact = self.rpm_builder.recreate(PackageRequest(username=name, public_key=public_key))
        logger.info("Created RPM for user %s (%d bytes)", name, artifact.size)
        return artifact

    def recreate_deb(
        self,
        name: str,
        public_key: Union[str, bytes],
        maintainer: str,
    ) -> Artifact:
        """Build a Debian package that creates a user and installs their public key.

        Args:
            name: Account name
            public_key: OpenSSH public key line
            maintainer: Package maintainer identity

        Returns:
            The DEB artifact
        """
        request = PackageRequest(username=name, public_key=public_key, maintainer=maintainer)
        artifact = self.deb_builder.recreate(request)
        logger.info("Created DEB for user %s (%d bytes)", name, artifact.size)
        return artifact

    def recreate_exe(self, name: str, password: str) -> Artifact:
        """Build a Windows installer that creates a user with a password.

        Args:
            name: Account name
            password: Account password

        Returns:
            The EXE artifact
        """
        artifact = self.installer_builder.recreate(name, password)
        logger.info("Created EXE for user %s (%d bytes)", name, artifact.size)
        return artifact


def generate_keypair(password: str, config: Optional[PackagerConfig] = None) -> Artifact:
    """Generate an LSC keypair and return the private key."""
    return CredentialPackager(config).generate_keypair(password)


def recreate_rpm(
    name: str,
    public_key: Union[str, bytes],
    config: Optional[PackagerConfig] = None,
) -> Artifact:
    """Build an LSC user RPM."""
    return CredentialPackager(config).recreate_rpm(name, public_key)


def recreate_deb(
    name: str,
    public_key: Union[str, bytes],
    maintainer: str,
    config: Optional[PackagerConfig] = None,
) -> Artifact:
    """Build an LSC user Debian package."""
    return CredentialPackager(config).recreate_deb(name, public_key, maintainer)


def recreate_exe(
    name: str,
    password: str,
    config: Optional[PackagerConfig] = None,
) -> Artifact:
    """Build an LSC user Windows installer."""
    return CredentialPackager(config).recreate_exe(name, password)
