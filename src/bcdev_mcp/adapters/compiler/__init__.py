"""Adapter for the Business Central AL compiler (``al`` and the legacy ``alc``)."""

from .adapter import ALCompilerAdapter
from .commands import build_command_line, build_compile_arguments
from .detection import ToolchainDetector
from .models import CompileRequest, CompileVerdict, ToolchainCommand, ToolchainInfo
from .results import extract_diagnostics, interpret_outcome

__all__ = [
    "ALCompilerAdapter",
    "CompileRequest",
    "CompileVerdict",
    "ToolchainCommand",
    "ToolchainDetector",
    "ToolchainInfo",
    "build_command_line",
    "build_compile_arguments",
    "extract_diagnostics",
    "interpret_outcome",
]
