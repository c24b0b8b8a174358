"""
Ephemeral workspace management.

Every workspace is a uniquely named directory under an injected scratch
root. It is created immediately before use and removed, with all of its
contents, on every exit path of the operation that created it.
"""

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ..error_handling import WorkspaceError

logger = logging.getLogger(__name__)

WORKSPACE_MODE = 0o755


class WorkspaceManager:
    """Creates and destroys scratch directories under a scratch root."""

    def __init__(self, scratch_root: Optional[Union[str, Path]] = None):
        """Initialize the workspace manager.

        Args:
            scratch_root: Directory that holds workspaces (system temp dir if None)
        """
        self.scratch_root = Path(scratch_root) if scratch_root else Path(tempfile.gettempdir())

    def create(self, prefix: str = "lsc_") -> Path:
        """Create a new, uniquely named workspace.

        Args:
            prefix: Name prefix, useful for identifying leftovers

        Returns:
            Path to the new directory

        Raises:
            WorkspaceError: If the directory cannot be created
        """
        try:
            path = Path(tempfile.mkdtemp(prefix=prefix, dir=self.scratch_root))
        except OSError as e:
            raise WorkspaceError(
                f"Failed to create workspace under {self.scratch_root}: {e}"
            ) from e

        try:
            os.chmod(path, WORKSPACE_MODE)
        except OSError as e:
            self.destroy(path)
            raise WorkspaceError(f"Failed to set permissions on {path}: {e}") from e

        logger.debug("Created workspace %s", path)
        return path

    def destroy(self, path: Union[str, Path]) -> bool:
        """Remove a workspace and everything in it.

        Never raises; a failure is logged and reported through the return value.

        Args:
            path: Workspace to remove

        Returns:
            True if the workspace no longer exists
        """
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning("Failed to remove workspace %s: %s", path, e)
            return False

        logger.debug("Removed workspace %s", path)
        return True

    @contextmanager
    def workspace(self, prefix: str = "lsc_") -> Iterator[Path]:
        """Scoped workspace: created on entry, destroyed exactly once on exit.

        Args:
            prefix: Name prefix for the directory

        Yields:
            Path to the workspace
        """
        path = self.create(prefix)
        try:
            yield path
        finally:
            self.destroy(path)
