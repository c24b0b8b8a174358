"""
In-memory artifacts produced by the pipeline.
"""

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from ..error_handling import ArtifactReadError

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    """Kinds of artifact the pipeline produces."""
    KEY = "key"  # SSH private key
    RPM = "rpm"  # RedHat/CentOS package
    DEB = "deb"  # Debian/Ubuntu package
    EXE = "exe"  # Windows NSIS installer


@dataclass(frozen=True)
class Artifact:
    """Raw bytes returned to the caller.

    Attributes:
        kind: What the bytes are
        data: Full file content
    """
    kind: ArtifactKind
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def checksum(self) -> str:
        """SHA256 checksum of the data."""
        return hashlib.sha256(self.data).hexdigest()

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Artifact(kind={self.kind.value!r}, size={self.size})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (metadata only, no content)."""
        return {
            "kind": self.kind.value,
            "size": self.size,
            "checksum": self.checksum,
        }


def load_artifact(path: Union[str, Path], kind: ArtifactKind) -> Artifact:
    """Read a produced file fully into memory.

    Args:
        path: File written by an external tool
        kind: Kind of artifact the file holds

    Returns:
        The loaded artifact

    Raises:
        ArtifactReadError: If the file is missing, unreadable or empty
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ArtifactReadError(f"Failed to read {kind.value} artifact {path}: {e}") from e

    if not data:
        raise ArtifactReadError(f"Expected {kind.value} artifact {path} is empty")

    logger.debug("Loaded %s artifact %s (%d bytes)", kind.value, path, len(data))
    return Artifact(kind=kind, data=data)
