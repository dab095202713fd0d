"""
Centralised logging helpers for the bcdev toolchain bridge.

Everything logs to ``stderr`` because the MCP stdio transport owns ``stdout``.
Modules obtain loggers via :func:`get_logger` so records share one formatter
that renders structured extras (``phase``, ``command``, ``exit_code`` ...) as
trailing ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import copy
from logging import Logger, LoggerAdapter
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Sequence

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "INFO"
ENV_LEVEL = "BCDEV_LOG_LEVEL"
ENV_COLOR = "BCDEV_LOG_COLOR"
_EXTRA_FOCUS_ORDER: Sequence[str] = (
    "phase",
    "step",
    "status",
    "result",
    "toolchain",
    "command",
    "exit_code",
    "version",
    "available",
    "tool",
)

_LEVEL_STYLES = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[95m",
}
_RESET = "\033[0m"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_configured = False


def _resolve_level(level: Optional[int | str]) -> int:
    if isinstance(level, int):
        return level
    candidate = (level or os.getenv(ENV_LEVEL) or DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(candidate)
    return resolved if isinstance(resolved, int) else logging.INFO


def _supports_color(stream: Any) -> bool:
    preference = (os.getenv(ENV_COLOR) or "").strip().lower()
    if preference in {"1", "true", "yes", "on"}:
        return True
    if preference in {"0", "false", "no", "off"}:
        return False
    return hasattr(stream, "isatty") and bool(stream.isatty())


def _iter_extras(record: logging.LogRecord) -> Iterable[tuple[str, Any]]:
    payload = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS and not key.startswith("_") and value is not None}

    for key in _EXTRA_FOCUS_ORDER:
        if key in payload:
            yield key, payload.pop(key)

    for key in sorted(payload):
        yield key, payload[key]


def _format_extra_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(_format_extra_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except TypeError:
            return repr(dict(value))
    if isinstance(value, float):
        return f"{value:.4g}"
    return str(value)


class ContextLoggerAdapter(LoggerAdapter):
    """Adapter that merges per-call ``extra`` into the bound context instead of replacing it."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        merged = dict(self.extra or {})
        merged.update(kwargs.get("extra") or {})
        kwargs["extra"] = merged
        return msg, kwargs


class StructuredLogFormatter(logging.Formatter):
    """Formatter that appends structured extras and supports optional colour output."""

    def __init__(self, *, use_color: bool = False) -> None:
        super().__init__(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        working = copy(record)
        if self.use_color:
            style = _LEVEL_STYLES.get(working.levelname.upper())
            if style:
                working.levelname = f"{style}{working.levelname}{_RESET}"
        base = super().format(working)
        extras = " ".join(f"{key}={_format_extra_value(value)}" for key, value in _iter_extras(record))
        if extras:
            return f"{base} | {extras}"
        return base


def _build_handler(level: Optional[int | str]) -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(StructuredLogFormatter(use_color=_supports_color(handler.stream)))
    return handler


def configure_logging(level: Optional[int | str] = None, *, force: bool = False) -> None:
    """
    Configure the root logger unless already initialised.

    Parameters
    ----------
    level:
        Optional level override. Falls back to ``BCDEV_LOG_LEVEL`` or ``INFO``.
    force:
        Reapply the configuration even if a previous call already installed a handler.
    """

    global _configured
    if _configured and not force:
        return
    logging.basicConfig(level=_resolve_level(level), handlers=[_build_handler(level)], force=force)
    _configured = True


def get_logger(
    name: str,
    *,
    level: Optional[int | str] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> LoggerAdapter:
    """
    Return a :class:`logging.LoggerAdapter` carrying ``extra`` on every record.
    """

    configure_logging(level)
    base: Logger = logging.getLogger(name)
    if level is not None:
        base.setLevel(_resolve_level(level))
    payload = {key: value for key, value in (extra or {}).items() if value is not None}
    return ContextLoggerAdapter(base, payload)


def log_progress(
    logger: LoggerAdapter | Logger,
    message: str,
    *,
    phase: Optional[str] = None,
    step: Optional[str] = None,
    status: Optional[str] = None,
    result: Optional[str] = None,
    level: int = logging.INFO,
    extra: Optional[Mapping[str, object]] = None,
) -> None:
    """
    Emit a progress record tagged with the current phase, step and outcome.
    """

    payload: MutableMapping[str, object] = {}
    if isinstance(logger, LoggerAdapter) and isinstance(logger.extra, Mapping):
        payload.update({key: value for key, value in logger.extra.items() if value is not None})
    if extra:
        payload.update(extra)
    for key, value in (("phase", phase), ("step", step), ("status", status), ("result", result)):
        if value:
            payload[key] = value

    target = logger.logger if isinstance(logger, LoggerAdapter) else logger
    if payload:
        target.log(level, message, extra=dict(payload))
    else:
        target.log(level, message)
