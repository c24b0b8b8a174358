"""Mock implementations for lsc-credentials tests.

Provides:
- Stub shell scripts standing in for ssh-keygen, the packaging scripts and makensis
- A spy process runner that records invocations
"""

from .stub_tools import (
    KEYGEN_STUB,
    RPM_STUB,
    DEB_STUB,
    MAKENSIS_STUB,
    FAILING_STUB,
    SILENT_SUCCESS_STUB,
    KILLED_STUB,
    SpyRunner,
    write_stub,
)

__all__ = [
    "KEYGEN_STUB",
    "RPM_STUB",
    "DEB_STUB",
    "MAKENSIS_STUB",
    "FAILING_STUB",
    "SILENT_SUCCESS_STUB",
    "KILLED_STUB",
    "SpyRunner",
    "write_stub",
]
