"""
Command-line construction for ``al compile`` / ``alc compile``.

Tokens follow the compiler's ``/flag:"value"`` syntax. Values are always
double-quoted so a path containing spaces stays one argument when the line
is tokenized again by a shell or by :func:`shlex.split`.
"""

from __future__ import annotations

import re
from typing import List

from .models import CompileRequest

COMPILE_ACTION = "compile"
PROBING_PATH_SEPARATOR = ";"


_QUOTE_RUN = re.compile(r'(\\*)"')
_TRAILING_BACKSLASHES = re.compile(r"(\\+)$")


def quote_value(value: str) -> str:
    """
    Wrap ``value`` in double quotes for the compiler command line.

    Embedded quotes become ``\\"`` and backslashes are doubled only where they
    precede a quote, including the closing one. Both :func:`shlex.split` and the
    Windows argument parser then recover ``value`` unchanged.
    """

    escaped = _QUOTE_RUN.sub(lambda match: match.group(1) * 2 + '\\"', value)
    escaped = _TRAILING_BACKSLASHES.sub(lambda match: match.group(1) * 2, escaped)
    return f'"{escaped}"'


def _flag(name: str, value: str) -> str:
    return f"/{name}:{quote_value(value)}"


def build_compile_arguments(request: CompileRequest) -> List[str]:
    """Return the argument tokens for ``request`` in the compiler's fixed flag order."""

    args = [_flag("project", request.project_path)]
    if request.package_cache_path:
        args.append(_flag("packagecachepath", request.package_cache_path))
    if request.output_path:
        args.append(_flag("out", request.output_path))
    probing_paths = [path for path in request.assembly_probing_paths if path]
    if probing_paths:
        args.append(_flag("assemblyprobingpaths", PROBING_PATH_SEPARATOR.join(probing_paths)))
    return args


def format_executable(executable: str) -> str:
    """Quote an executable path that contains whitespace."""

    if any(char.isspace() or char == '"' for char in executable):
        return quote_value(executable)
    return executable


def build_command_line(executable: str, request: CompileRequest) -> str:
    """Join the executable, the ``compile`` action and the argument tokens with single spaces."""

    return " ".join([format_executable(executable), COMPILE_ACTION, *build_compile_arguments(request)])


__all__ = [
    "COMPILE_ACTION",
    "PROBING_PATH_SEPARATOR",
    "build_command_line",
    "build_compile_arguments",
    "format_executable",
    "quote_value",
]
