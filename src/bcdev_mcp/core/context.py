"""
Execution context shared by the MCP server and CLI commands.

The context is built once at process start and passed to whoever needs the
compiler. It owns the single :class:`ALCompilerAdapter` instance, so the
detection result cached by that adapter is shared without module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import LoggerAdapter
from pathlib import Path
from typing import Mapping, Optional

from ..adapters.compiler import ALCompilerAdapter
from ..config import Settings, load_settings
from .logging import get_logger as _get_logger
from .process import ProcessRunner, SubprocessRunner


@dataclass(slots=True)
class ExecutionContext:
    """
    Shared runtime state.

    Attributes
    ----------
    settings:
        Parsed configuration. See :mod:`bcdev_mcp.config`.
    compiler:
        The process-wide AL compiler adapter.
    """

    settings: Settings
    compiler: ALCompilerAdapter

    @classmethod
    def build_default(
        cls,
        *,
        settings: Optional[Settings] = None,
        config_path: Optional[Path] = None,
        runner: Optional[ProcessRunner] = None,
    ) -> "ExecutionContext":
        """
        Construct a context from configuration.

        Parameters
        ----------
        settings:
            Preloaded settings. When omitted :func:`load_settings` is called
            with ``config_path``.
        config_path:
            Explicit configuration file used when ``settings`` is omitted.
        runner:
            Process runner override, mainly for tests. Defaults to a
            :class:`SubprocessRunner` honouring the configured timeout and
            working directory.
        """

        resolved = settings or load_settings(config_path)
        compiler_settings = resolved.compiler
        resolved_runner = runner or SubprocessRunner(
            timeout=compiler_settings.timeout,
            cwd=compiler_settings.working_directory,
        )
        compiler = ALCompilerAdapter(
            runner=resolved_runner,
            modern_command=compiler_settings.modern_command,
            legacy_command=compiler_settings.legacy_command,
        )
        return cls(settings=resolved, compiler=compiler)

    def get_logger(self, name: str, *, extra: Optional[Mapping[str, object]] = None) -> LoggerAdapter:
        """Return a logger honouring the configured log level."""

        return _get_logger(name, level=self.settings.log_level, extra=extra)
