"""
Discovery of the installed AL toolchain.

The modern ``al`` tool exits non-zero for ``--help`` on some releases while
still printing its ``altool`` banner to stderr, so a banner match counts as a
successful probe regardless of the exit status. The legacy ``alc`` compiler
is only tried when the modern probe fails.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Optional, Sequence

from ...core.logging import get_logger, log_progress
from ...core.process import ProcessOutcome, ProcessRunner
from .commands import format_executable
from .models import ToolchainCommand, ToolchainInfo

VERSION_PATTERN = re.compile(r"(\d+\.\d+\.\d+\.\d+)")


@dataclass(frozen=True, slots=True)
class ProbeSpec:
    """How to probe one toolchain generation."""

    command: ToolchainCommand
    probe_args: Sequence[str]
    version_args: Sequence[str]
    signature: str


MODERN_PROBE = ProbeSpec(ToolchainCommand.MODERN, probe_args=("--help",), version_args=("--version",), signature="altool")
LEGACY_PROBE = ProbeSpec(ToolchainCommand.LEGACY, probe_args=("/?",), version_args=("/?",), signature="AL Compiler")


def extract_version(text: str) -> Optional[str]:
    match = VERSION_PATTERN.search(text)
    return match.group(1) if match else None


@dataclass(slots=True)
class ToolchainDetector:
    """
    Probe for the modern executable, then the legacy one.

    Parameters
    ----------
    runner:
        Callable launching a command line and returning a :class:`ProcessOutcome`.
    modern_command / legacy_command:
        Executable names (or paths) for each generation.
    """

    runner: ProcessRunner
    modern_command: str = ToolchainCommand.MODERN.value
    legacy_command: str = ToolchainCommand.LEGACY.value
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__)

    def executable_for(self, command: ToolchainCommand) -> str:
        return self.modern_command if command is ToolchainCommand.MODERN else self.legacy_command

    def detect(self) -> ToolchainInfo:
        for probe in (MODERN_PROBE, LEGACY_PROBE):
            if self._probe(probe):
                version = self._query_version(probe)
                log_progress(
                    self.logger,
                    "AL toolchain detected",
                    phase="detect",
                    status="available",
                    extra={"toolchain": probe.command.value, "version": version},
                )
                return ToolchainInfo(command=probe.command, version=version, available=True)

        log_progress(self.logger, "No AL toolchain found", phase="detect", status="unavailable")
        return ToolchainInfo(command=ToolchainCommand.MODERN, available=False)

    def _probe(self, probe: ProbeSpec) -> bool:
        outcome = self._run(probe, probe.probe_args)
        if outcome.succeeded:
            return True
        if probe.signature in outcome.stderr:
            self.logger.debug(
                "Probe exited non-zero but printed the toolchain banner",
                extra={"toolchain": probe.command.value, "exit_code": outcome.returncode},
            )
            return True
        if not outcome.launched and not outcome.missing_executable:
            self.logger.warning(
                "Probe could not be launched",
                extra={"toolchain": probe.command.value, "error": outcome.launch_error},
            )
            return False
        self.logger.debug(
            "Probe failed",
            extra={"toolchain": probe.command.value, "exit_code": outcome.returncode, "error": outcome.launch_error},
        )
        return False

    def _query_version(self, probe: ProbeSpec) -> Optional[str]:
        outcome = self._run(probe, probe.version_args)
        if not outcome.launched:
            return None
        return extract_version(outcome.stdout or outcome.stderr)

    def _run(self, probe: ProbeSpec, args: Sequence[str]) -> ProcessOutcome:
        command = " ".join([format_executable(self.executable_for(probe.command)), *args])
        try:
            return self.runner(command)
        except Exception as exc:
            # Detection folds every failure into "unavailable".
            self.logger.warning("Probe runner raised", extra={"command": command, "error": str(exc)}, exc_info=True)
            return ProcessOutcome(returncode=None, launch_error=str(exc))


__all__ = ["LEGACY_PROBE", "MODERN_PROBE", "ProbeSpec", "ToolchainDetector", "VERSION_PATTERN", "extract_version"]
