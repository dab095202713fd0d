"""
Mapping of raw compiler process outcomes to :class:`CompileVerdict` values.

The AL compiler writes diagnostics to stderr even on success and may write
nothing to stdout when it fails, so the stream precedence differs between the
success and failure branches.
"""

from __future__ import annotations

from typing import List

from ...core.process import ProcessOutcome
from .models import CompileVerdict

UNAVAILABLE_OUTPUT = "AL compiler is not available. Please install it via AL Language extension or Business Central Development Tools."
UNAVAILABLE_ERROR = "AL compiler not found"
MISSING_EXECUTABLE_OUTPUT = "AL compiler not found in PATH."
MISSING_EXECUTABLE_ERROR = "Compiler executable not found"
NO_OUTPUT_PLACEHOLDER = "Compilation completed (no output)"


def extract_diagnostics(text: str) -> List[str]:
    """
    Return the stripped lines of ``text`` that mention ``error`` or ``Error``.

    When no line qualifies the whole text is returned as the only entry, so a
    failed compilation always carries at least one diagnostic.
    """

    matches = [line.strip() for line in text.splitlines() if "error" in line or "Error" in line]
    return matches or [text]


def unavailable_verdict() -> CompileVerdict:
    return CompileVerdict(success=False, output=UNAVAILABLE_OUTPUT, errors=[UNAVAILABLE_ERROR])


def interpret_outcome(outcome: ProcessOutcome, command: str) -> CompileVerdict:
    """Build the verdict for one ``compile`` invocation of ``command``."""

    if not outcome.launched:
        if outcome.missing_executable:
            return CompileVerdict(success=False, output=MISSING_EXECUTABLE_OUTPUT, errors=[MISSING_EXECUTABLE_ERROR])
        message = outcome.launch_error or "unknown launch failure"
        return CompileVerdict(success=False, output=f"Failed to run AL compiler: {message}", errors=[message])

    if outcome.returncode != 0:
        text = outcome.stderr or outcome.stdout or f"Command failed with exit code {outcome.returncode}: {command}"
        return CompileVerdict(success=False, output=text, errors=extract_diagnostics(text))

    return CompileVerdict(success=True, output=outcome.stdout or outcome.stderr or NO_OUTPUT_PLACEHOLDER)


__all__ = [
    "MISSING_EXECUTABLE_ERROR",
    "MISSING_EXECUTABLE_OUTPUT",
    "NO_OUTPUT_PLACEHOLDER",
    "UNAVAILABLE_ERROR",
    "UNAVAILABLE_OUTPUT",
    "extract_diagnostics",
    "interpret_outcome",
    "unavailable_verdict",
]
