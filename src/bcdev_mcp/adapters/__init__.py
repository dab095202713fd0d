"""
Adapter interfaces for external toolchains.

Each adapter wraps one executable family behind a small, deterministic surface
that the MCP server and the CLI compose.
"""

from .base import AdapterError, ToolAdapter, VerificationResult
from .compiler import ALCompilerAdapter, CompileRequest, CompileVerdict, ToolchainCommand, ToolchainInfo

__all__ = [
    "AdapterError",
    "ALCompilerAdapter",
    "CompileRequest",
    "CompileVerdict",
    "ToolAdapter",
    "ToolchainCommand",
    "ToolchainInfo",
    "VerificationResult",
]
