"""
Adapter around the Business Central AL compiler.

One instance is built at process start and shared by every caller. It detects
the toolchain once, caches the result for its lifetime, and turns compile
requests into verdicts. No public method raises for toolchain problems:
missing installations, launch failures and compiler errors all come back as
:class:`CompileVerdict` or :class:`VerificationResult` data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Optional

from ...core.logging import get_logger, log_progress
from ...core.process import ProcessOutcome, ProcessRunner, SubprocessRunner
from ..base import ToolAdapter, VerificationResult
from .commands import build_command_line
from .detection import ToolchainDetector
from .models import CompileRequest, CompileVerdict, ToolchainCommand, ToolchainInfo
from .results import interpret_outcome, unavailable_verdict


@dataclass(slots=True)
class ALCompilerAdapter(ToolAdapter):
    """Detect-once, compile-many wrapper for ``al`` / ``alc``."""

    runner: ProcessRunner = field(default_factory=SubprocessRunner)
    modern_command: str = ToolchainCommand.MODERN.value
    legacy_command: str = ToolchainCommand.LEGACY.value
    tool_id: str = "al_compiler"
    logger: LoggerAdapter = field(init=False, repr=False)
    _info: Optional[ToolchainInfo] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__, extra={"tool": self.tool_id})

    # ------------------------------------------------------------------ lifecycle

    def initialize(self) -> ToolchainInfo:
        """Run toolchain detection unless a previous call already did, and return the cached result."""

        if self._info is None:
            detector = ToolchainDetector(
                runner=self.runner,
                modern_command=self.modern_command,
                legacy_command=self.legacy_command,
            )
            self._info = detector.detect()
        return self._info

    def get_toolchain_info(self) -> Optional[ToolchainInfo]:
        """Return the cached detection result, or ``None`` before :meth:`initialize`."""

        return self._info

    # ------------------------------------------------------------------ operations

    def executable(self) -> Optional[str]:
        """Executable name for the detected toolchain, ``None`` when nothing usable was found."""

        if self._info is None or not self._info.available:
            return None
        if self._info.command is ToolchainCommand.LEGACY:
            return self.legacy_command
        return self.modern_command

    def command_line(self, request: CompileRequest) -> Optional[str]:
        executable = self.executable()
        if executable is None:
            return None
        return build_command_line(executable, request)

    def compile(self, request: CompileRequest) -> CompileVerdict:
        command = self.command_line(request)
        if command is None:
            self.logger.warning("Compile requested without an available AL toolchain")
            return unavailable_verdict()

        log_progress(self.logger, "Executing AL compiler", phase="compile", status="started", extra={"command": command})
        try:
            outcome = self.runner(command)
        except Exception as exc:
            self.logger.error("Process runner raised", extra={"command": command, "error": str(exc)}, exc_info=True)
            outcome = ProcessOutcome(returncode=None, launch_error=str(exc))

        verdict = interpret_outcome(outcome, command)
        log_progress(
            self.logger,
            "AL compiler finished",
            phase="compile",
            status="succeeded" if verdict.success else "failed",
            extra={"exit_code": outcome.returncode, "diagnostics": len(verdict.errors or ())},
        )
        return verdict

    def verify(self) -> VerificationResult:
        """Report whether a usable toolchain was detected, running detection if needed."""

        info = self.initialize()
        if not info.available:
            return VerificationResult(
                success=False,
                message=(
                    f"Neither '{self.modern_command}' nor '{self.legacy_command}' is available on PATH. "
                    "Install the AL Language extension or Business Central Development Tools."
                ),
                details=info.to_dict(),
            )
        version = info.version or "version info not available"
        return VerificationResult(
            success=True,
            message=f"AL compiler '{self.executable()}' is available ({version}).",
            details=info.to_dict(),
        )


__all__ = ["ALCompilerAdapter"]
