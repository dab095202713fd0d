"""
Automation bridge between MCP clients and the Business Central AL compiler.

:class:`~bcdev_mcp.adapters.compiler.ALCompilerAdapter` detects the installed
toolchain (``al`` or the legacy ``alc``), builds ``compile`` command lines and
turns the compiler's output into a :class:`CompileVerdict`. The
:mod:`bcdev_mcp.server` package exposes it over MCP and :mod:`bcdev_mcp.cli`
from the terminal.
"""

__version__ = "0.3.0"

from .adapters import (  # noqa: E402
    AdapterError,
    ALCompilerAdapter,
    CompileRequest,
    CompileVerdict,
    ToolchainCommand,
    ToolchainInfo,
    VerificationResult,
)

__all__ = [
    "AdapterError",
    "ALCompilerAdapter",
    "CompileRequest",
    "CompileVerdict",
    "ToolchainCommand",
    "ToolchainInfo",
    "VerificationResult",
    "__version__",
]
