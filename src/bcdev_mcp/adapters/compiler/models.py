"""
Value objects exchanged between the AL compiler adapter and its callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ToolchainCommand(str, Enum):
    """AL toolchain generations. The values are the default executable names."""

    MODERN = "al"
    LEGACY = "alc"


@dataclass(frozen=True, slots=True)
class ToolchainInfo:
    """
    Outcome of toolchain detection.

    ``command`` is only a label when ``available`` is ``False``; callers must
    check ``available`` before acting on it.
    """

    command: ToolchainCommand = ToolchainCommand.MODERN
    version: Optional[str] = None
    available: bool = False

    def __post_init__(self) -> None:
        if not self.available and self.version is not None:
            raise ValueError("An unavailable toolchain cannot carry a version.")

    def to_dict(self) -> Dict[str, Any]:
        return {"command": self.command.value, "version": self.version, "available": self.available}


@dataclass(frozen=True, slots=True)
class CompileRequest:
    """
    Parameters for one compilation.

    Attributes
    ----------
    project_path:
        Folder containing the app's ``app.json``. Required.
    package_cache_path:
        ``.alpackages`` folder holding dependency symbols.
    output_path:
        Destination of the produced ``.app`` file.
    assembly_probing_paths:
        Extra folders searched for .NET assemblies, in order.
    """

    project_path: str
    package_cache_path: Optional[str] = None
    output_path: Optional[str] = None
    assembly_probing_paths: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.project_path, str) or not self.project_path.strip():
            raise ValueError("project_path must be a non-empty string.")
        object.__setattr__(self, "assembly_probing_paths", tuple(self.assembly_probing_paths or ()))


@dataclass(slots=True)
class CompileVerdict:
    """Success flag, caller-facing output text and, for failures, diagnostic lines."""

    success: bool
    output: str
    errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success, "output": self.output}
        if self.errors is not None:
            payload["errors"] = list(self.errors)
        return payload


__all__ = ["CompileRequest", "CompileVerdict", "ToolchainCommand", "ToolchainInfo"]
