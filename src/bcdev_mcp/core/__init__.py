"""
Core infrastructure shared by the adapters, the MCP server and the CLI.

Only logging and the subprocess boundary are re-exported here; import
:mod:`bcdev_mcp.core.context` directly for the execution context.
"""

from .logging import configure_logging, get_logger, log_progress
from .process import ProcessOutcome, ProcessRunner, SubprocessRunner

__all__ = [
    "ProcessOutcome",
    "ProcessRunner",
    "SubprocessRunner",
    "configure_logging",
    "get_logger",
    "log_progress",
]
