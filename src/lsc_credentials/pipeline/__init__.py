"""
Workspace, process and artifact primitives shared by all builders.
"""

from .artifacts import Artifact, ArtifactKind, load_artifact
from .process import ExitStatus, Invocation, ProcessRunner
from .workspace import WorkspaceManager

__all__ = [
    "Artifact",
    "ArtifactKind",
    "load_artifact",
    "ExitStatus",
    "Invocation",
    "ProcessRunner",
    "WorkspaceManager",
]
