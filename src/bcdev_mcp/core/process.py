"""
Thin subprocess boundary used by the compiler adapter.

The runner never raises for launch problems. A missing executable, a
permission error or an expired timeout are reported through
:class:`ProcessOutcome` so callers can tell them apart from a process that
ran and exited non-zero.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """
    Raw result of one external invocation.

    Attributes
    ----------
    returncode:
        Exit status, or ``None`` when the process never started or did not finish.
    stdout / stderr:
        Decoded output streams. Empty strings when nothing was captured.
    launch_error:
        OS-level failure message when the process could not be run to completion.
    missing_executable:
        ``True`` when the launch failed because the executable is not on ``PATH``.
    """

    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    launch_error: Optional[str] = None
    missing_executable: bool = False

    @property
    def launched(self) -> bool:
        return self.launch_error is None

    @property
    def succeeded(self) -> bool:
        return self.launched and self.returncode == 0


ProcessRunner = Callable[[str], ProcessOutcome]


def split_command(command: str) -> Sequence[str] | str:
    """
    Turn a command line into what :func:`subprocess.run` expects on this platform.

    Windows hands the string to ``CreateProcess`` untouched so the compiler's own
    parser sees the quoted ``/flag:"path"`` tokens. POSIX platforms tokenize with
    shell rules, which keeps quoted paths with spaces as single arguments.
    """

    if os.name == "nt":
        return command
    return shlex.split(command)


@dataclass(slots=True)
class SubprocessRunner:
    """Run command lines with :mod:`subprocess`, capturing both streams as text."""

    timeout: Optional[float] = None
    cwd: Optional[Path] = None

    def __call__(self, command: str) -> ProcessOutcome:
        LOGGER.debug("Launching process", extra={"command": command})
        if self.cwd is not None and not Path(self.cwd).is_dir():
            message = f"Working directory '{self.cwd}' does not exist"
            LOGGER.warning("Failed to launch process", extra={"command": command, "error": message})
            return ProcessOutcome(returncode=None, launch_error=message)
        try:
            completed = subprocess.run(
                split_command(command),
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout,
                cwd=self.cwd,
            )
        except FileNotFoundError as exc:
            # The same exception covers a working directory removed after the check above.
            if self.cwd is not None and exc.filename is not None and Path(exc.filename) == Path(self.cwd):
                LOGGER.warning("Failed to launch process", extra={"command": command, "error": str(exc)})
                return ProcessOutcome(returncode=None, launch_error=str(exc))
            LOGGER.debug("Executable not found", extra={"command": command, "error": str(exc)})
            return ProcessOutcome(returncode=None, launch_error=str(exc), missing_executable=True)
        except subprocess.TimeoutExpired as exc:
            LOGGER.warning("Process timed out", extra={"command": command, "timeout": self.timeout})
            return ProcessOutcome(
                returncode=None,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr),
                launch_error=f"Process did not finish within {self.timeout} seconds",
            )
        except (OSError, ValueError) as exc:
            LOGGER.warning("Failed to launch process", extra={"command": command, "error": str(exc)})
            return ProcessOutcome(returncode=None, launch_error=str(exc))

        LOGGER.debug("Process finished", extra={"command": command, "exit_code": completed.returncode})
        return ProcessOutcome(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


__all__ = ["ProcessOutcome", "ProcessRunner", "SubprocessRunner", "split_command"]
