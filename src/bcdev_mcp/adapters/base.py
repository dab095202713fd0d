"""
Base protocols for toolchain adapters.

Adapters are intentionally narrow in scope: they wrap one external tool, offer
a lightweight health check, and report expected failures as data. Transport
concerns (MCP, CLI rendering) stay in the layers that call them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol


class AdapterError(RuntimeError):
    """Raised when an adapter encounters a non-recoverable error."""


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by adapter verification routines.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata such as the detected command and version.
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class ToolAdapter(Protocol):
    """Protocol implemented by adapters wrapping an external executable."""

    def verify(self) -> VerificationResult:
        """Perform a lightweight availability check."""

    @property
    def tool_id(self) -> str:
        """Stable identifier of the wrapped tool."""
