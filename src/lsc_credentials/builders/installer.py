"""
Windows installer generation.

Renders an NSIS script that creates a local administrator account with a
password, then compiles it with makensis.

The username and password are substituted into the script verbatim. Values
containing quotes, ``$`` or line breaks change the meaning of the generated
script; callers must only pass trusted values.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..error_handling import WorkspaceError, validate_passphrase, validate_username
from ..pipeline import Artifact, ArtifactKind, ProcessRunner, WorkspaceManager, load_artifact

logger = logging.getLogger(__name__)

SCRIPT_FILENAME = "p.nsis"
PACKAGE_FILENAME = "p.exe"

NSIS_TEMPLATE = r"""#Installer filename
outfile {package_name}

# Set desktop as install directory
installDir $DESKTOP

# Put some text
BrandingText "Local Security Checks User"

#
# Default (installer) section.
#
section

# Define output path
setOutPath $INSTDIR

# Uninstaller name
writeUninstaller $INSTDIR\lsc_remove_{username}.exe

# Create GetAdminGroupName.vbs script to find the localized Administrators group
ExecWait "cmd /C Echo Set objWMIService = GetObject($\"winmgmts:\\.\root\cimv2$\") > $\"%temp%\GetAdminGroupName.vbs$\" "
ExecWait "cmd /C Echo Set colAccounts = objWMIService.ExecQuery ($\"Select * From Win32_Group Where SID = 'S-1-5-32-544'$\")  >> $\"%temp%\GetAdminGroupName.vbs$\""
ExecWait "cmd /C Echo For Each objAccount in colAccounts >> $\"%temp%\GetAdminGroupName.vbs$\""
ExecWait "cmd /C Echo Wscript.Echo objAccount.Name >> $\"%temp%\GetAdminGroupName.vbs$\""
ExecWait "cmd /C Echo Next >> $\"%temp%\GetAdminGroupName.vbs$\""
ExecWait "cmd /C cscript //nologo $\"%temp%\GetAdminGroupName.vbs$\" > $\"%temp%\AdminGroupName.txt$\""

# Create batch script that installs the user
ExecWait "cmd /C Echo Set /P AdminGroupName= ^<$\"%temp%\AdminGroupName.txt$\" > $\"%temp%\AddUser.bat$\""
ExecWait "cmd /C Echo net user {username} {password} /add /active:yes >> $\"%temp%\AddUser.bat$\""
ExecWait "cmd /C Echo net localgroup %AdminGroupName% %COMPUTERNAME%\{username} /add >> $\"%temp%\AddUser.bat$\""

# Execute AddUser script
ExecWait "cmd /C $\"%temp%\AddUser.bat$\""

# Remove temporary files for localized admin group names
ExecWait "del $\"%temp%\AdminGroupName.txt$\""
ExecWait "del $\"%temp%\GetAdminGroupName.vbs$\""
ExecWait "del $\"%temp%\AddUser.bat$\""

# Display message that everything seems to be fine
messageBox MB_OK "A user has been added. An uninstaller is placed on your Desktop."

# Default (install) section end
sectionEnd

#
# Uninstaller section.
#
section "Uninstall"

# Run cmd to remove user
ExecWait "net user {username} /delete"

# Display message that everything seems to be fine
messageBox MB_OK "A user has been removed. You can now safely remove the uninstaller from your Desktop."

# Uninstaller section end
sectionEnd
"""


def render_nsis_script(package_name: str, username: str, password: str) -> str:
    """Render the NSIS installer script.

    Args:
        package_name: Output file the compiler writes (the ``outfile`` line)
        username: Account created by the installer
        password: Password for the account

    Returns:
        The script text
    """
    return NSIS_TEMPLATE.format(
        package_name=package_name,
        username=username,
        password=password,
    )


class InstallerBuilder:
    """Builds NSIS installers that add a password-authenticated user."""

    kind = ArtifactKind.EXE

    def __init__(
        self,
        workspaces: WorkspaceManager,
        runner: Optional[ProcessRunner] = None,
        makensis_command: str = "makensis",
    ):
        """Initialize the builder.

        Args:
            workspaces: Manager for scratch directories
            runner: Process runner used to invoke the compiler
            makensis_command: NSIS compiler executable
        """
        self.workspaces = workspaces
        self.runner = runner or ProcessRunner()
        self.makensis_command = makensis_command

    def write_script(self, script_path: Path, package_name: str, username: str, password: str) -> None:
        """Write the rendered script to a file.

        Raises:
            WorkspaceError: If the file cannot be written
        """
        try:
            script_path.write_text(
                render_nsis_script(package_name, username, password), encoding="utf-8"
            )
        except (OSError, UnicodeError) as e:
            raise WorkspaceError(f"Failed to create NSIS script {script_path}: {e}") from e

    def build(self, username: str, password: str, destination: Union[str, Path]) -> None:
        """Compile an installer to the destination path.

        The script is written next to the destination and the compiler runs
        in that directory.

        Args:
            username: Account created by the installer
            password: Password for the account
            destination: Where the compiler writes the installer

        Raises:
            WorkspaceError: If the script cannot be written
            ExternalToolError: If makensis fails
        """
        destination = Path(destination)
        script_path = destination.parent / SCRIPT_FILENAME

        self.write_script(script_path, str(destination), username, password)

        logger.debug("Executing makensis")
        self.runner.run(
            self.makensis_command,
            [script_path],
            cwd=script_path.parent,
            secrets=[password],
        ).check("create the exe")

    def recreate(self, username: str, password: str) -> Artifact:
        """Build an installer and return its content.

        Args:
            username: Account created by the installer
            password: Password for the account

        Returns:
            The installer artifact

        Raises:
            PreconditionViolation: If the username or password is rejected
        """
        validate_username(username)
        validate_passphrase(password)

        with self.workspaces.workspace(prefix="lsc_exe_") as workspace:
            destination = workspace / PACKAGE_FILENAME
            self.build(username, password, destination)
            return load_artifact(destination, self.kind)
