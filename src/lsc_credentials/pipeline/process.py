"""
Synchronous external tool invocation.

Runs a program from an argument vector (never through a shell), waits for
it to terminate, and classifies the outcome. Captured output is kept for
diagnostics only and is never used to decide success.
"""

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Iterable, Optional, Sequence, Union

from ..error_handling import ExternalToolError

logger = logging.getLogger(__name__)

REDACTED = "********"

# Per-stream capture limit; the tail of longer output is kept
MAX_CAPTURE_BYTES = 64 * 1024


class ExitStatus(Enum):
    """How an external tool invocation ended."""
    EXITED = "exited"              # Terminated normally with an exit code
    SIGNALED = "signaled"          # Killed by a signal or otherwise abnormal
    SPAWN_FAILED = "spawn_failed"  # Could not be started at all


def _read_tail(stream: IO[bytes]) -> bytes:
    """Read at most MAX_CAPTURE_BYTES from the end of a spooled stream."""
    size = stream.seek(0, os.SEEK_END)
    stream.seek(max(0, size - MAX_CAPTURE_BYTES))
    return stream.read()


def redact(args: Iterable[str], secrets: Sequence[str]) -> list[str]:
    """Replace every secret value in an argument list with a placeholder.

    Args:
        args: Command line arguments
        secrets: Values that must not appear in logs

    Returns:
        The arguments with secrets masked
    """
    secrets = [secret for secret in secrets if secret]
    masked = []
    for arg in args:
        for secret in secrets:
            if secret in arg:
                arg = arg.replace(secret, REDACTED)
        masked.append(arg)
    return masked


@dataclass
class Invocation:
    """One external program execution and its classified outcome.

    Attributes:
        executable: Program that was run
        args: Arguments passed after the executable
        cwd: Working directory of the child
        status: How the process ended
        exit_code: Exit code when status is EXITED
        signal: Signal number when status is SIGNALED
        stdout: Captured standard output (bounded)
        stderr: Captured standard error (bounded)
        error: Spawn error message when status is SPAWN_FAILED
        secrets: Values masked in the printable command line

    Arguments and captured output may hold secrets and are left out of repr;
    use command_line for a printable form.
    """
    executable: str
    args: list[str] = field(repr=False)
    cwd: Optional[Path]
    status: ExitStatus
    exit_code: Optional[int] = None
    signal: Optional[int] = None
    stdout: bytes = field(default=b"", repr=False)
    stderr: bytes = field(default=b"", repr=False)
    error: Optional[str] = None
    secrets: tuple[str, ...] = field(default=(), repr=False)

    @property
    def succeeded(self) -> bool:
        """True only for a normal exit with code 0."""
        return self.status is ExitStatus.EXITED and self.exit_code == 0

    @property
    def command_line(self) -> str:
        """The command line with secrets redacted, for logging."""
        return " ".join(redact([self.executable, *self.args], self.secrets))

    def describe(self) -> str:
        """Short human-readable description of the outcome."""
        if self.status is ExitStatus.SPAWN_FAILED:
            return f"failed to start {self.executable}: {self.error}"
        if self.status is ExitStatus.SIGNALED:
            return f"{self.executable} terminated by signal {self.signal}"
        return f"{self.executable} exited with code {self.exit_code}"

    def check(self, what: str) -> "Invocation":
        """Raise if the invocation did not succeed.

        Args:
            what: Description of the operation, used in the error message

        Returns:
            This invocation, for chaining

        Raises:
            ExternalToolError: If the tool failed to spawn, was killed, or exited non-zero
        """
        if self.succeeded:
            return self

        stdout, stderr = redact(
            [self.stdout.decode(errors="replace"), self.stderr.decode(errors="replace")],
            self.secrets,
        )
        logger.debug("%s: %s", what, self.describe())
        logger.debug("%s: stdout: %s", what, stdout)
        logger.debug("%s: stderr: %s", what, stderr)
        raise ExternalToolError(f"Failed to {what}: {self.describe()}", self)


class ProcessRunner:
    """Runs external tools synchronously.

    There is no timeout: a hung tool blocks the caller until it exits.
    """

    def run(
        self,
        executable: str,
        args: Sequence[Union[str, Path]],
        cwd: Optional[Union[str, Path]] = None,
        secrets: Sequence[str] = (),
    ) -> Invocation:
        """Run a program and wait for it to finish.

        Args:
            executable: Program path or name (looked up on PATH)
            args: Arguments passed to the program
            cwd: Working directory for the child process
            secrets: Argument values to redact in logs

        Returns:
            The classified invocation; tool failures are not raised
        """
        str_args = [str(arg) for arg in args]
        cwd_path = Path(cwd) if cwd is not None else None
        secrets = tuple(secrets)

        logger.debug(
            "Spawning in %s: %s",
            cwd_path or ".",
            " ".join(redact([executable, *str_args], secrets)),
        )

        # Output is spooled to disk and only its tail is read back.
        # ValueError covers arguments subprocess refuses, such as embedded NULs.
        try:
            with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
                result = subprocess.run(
                    [executable, *str_args],
                    cwd=cwd_path,
                    stdin=subprocess.DEVNULL,
                    stdout=out,
                    stderr=err,
                )
                stdout, stderr = _read_tail(out), _read_tail(err)
        except (OSError, ValueError) as e:
            return Invocation(
                executable=executable,
                args=str_args,
                cwd=cwd_path,
                status=ExitStatus.SPAWN_FAILED,
                error=str(e),
                secrets=secrets,
            )

        invocation = Invocation(
            executable=executable,
            args=str_args,
            cwd=cwd_path,
            status=ExitStatus.EXITED,
            stdout=stdout,
            stderr=stderr,
            secrets=secrets,
        )
        if result.returncode < 0:
            invocation.status = ExitStatus.SIGNALED
            invocation.signal = -result.returncode
        else:
            invocation.exit_code = result.returncode
        return invocation
