"""
Settings for the AL toolchain bridge.

Settings are read from an optional TOML file. The lookup order is:

1. Explicit ``BCDEV_CONFIG_PATH`` environment variable.
2. ``.bcdev/config.toml`` relative to the current working directory.
3. ``.bcdev/config.example.toml`` for scaffolding values.

A file looks like::

    [compiler]
    modern_command = "al"
    legacy_command = "alc"
    timeout = 600
    working_directory = "C:/Projects"

    [logging]
    level = "DEBUG"

``BCDEV_AL_COMMAND``, ``BCDEV_ALC_COMMAND`` and ``BCDEV_COMPILE_TIMEOUT``
override the corresponding file values.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .adapters.base import AdapterError

DEFAULT_MODERN_COMMAND = "al"
DEFAULT_LEGACY_COMMAND = "alc"
ENV_CONFIG_PATH = "BCDEV_CONFIG_PATH"
ENV_MODERN_COMMAND = "BCDEV_AL_COMMAND"
ENV_LEGACY_COMMAND = "BCDEV_ALC_COMMAND"
ENV_TIMEOUT = "BCDEV_COMPILE_TIMEOUT"


class ConfigurationError(AdapterError):
    """Raised when a configuration file or override holds an unusable value."""


@dataclass(slots=True)
class CompilerSettings:
    """Executable names and launch options for the AL toolchain."""

    modern_command: str = DEFAULT_MODERN_COMMAND
    legacy_command: str = DEFAULT_LEGACY_COMMAND
    timeout: Optional[float] = None
    working_directory: Optional[Path] = None


@dataclass(slots=True)
class Settings:
    """Container for parsed settings."""

    source_path: Optional[Path] = None
    compiler: CompilerSettings = field(default_factory=CompilerSettings)
    log_level: Optional[str] = None


def _candidate_paths() -> Iterable[Path]:
    env_override = os.getenv(ENV_CONFIG_PATH)
    if env_override:
        yield Path(env_override).expanduser()
    config_dir = Path.cwd() / ".bcdev"
    yield config_dir / "config.toml"
    yield config_dir / "config.example.toml"


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Failed to parse configuration file '{path}': {exc}") from exc


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"Configuration section [{name}] must be a table.")
    return section


def _string_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_timeout(value: Any, origin: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"{origin} must be a number of seconds, got {value!r}.")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{origin} must be a number of seconds, got {value!r}.") from None
    if parsed <= 0:
        raise ConfigurationError(f"{origin} must be positive, got {value!r}.")
    return parsed


def parse_settings(
    raw: Mapping[str, Any],
    *,
    source_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build :class:`Settings` from a parsed TOML mapping plus environment overrides.
    """

    env_map: Mapping[str, str] = os.environ if env is None else env
    compiler_section = _section(raw, "compiler")
    logging_section = _section(raw, "logging")

    modern = _string_or_none(env_map.get(ENV_MODERN_COMMAND)) or _string_or_none(compiler_section.get("modern_command")) or DEFAULT_MODERN_COMMAND
    legacy = _string_or_none(env_map.get(ENV_LEGACY_COMMAND)) or _string_or_none(compiler_section.get("legacy_command")) or DEFAULT_LEGACY_COMMAND

    timeout = _parse_timeout(compiler_section.get("timeout"), "[compiler] timeout")
    env_timeout = env_map.get(ENV_TIMEOUT)
    if env_timeout:
        timeout = _parse_timeout(env_timeout, ENV_TIMEOUT)

    working_directory = _string_or_none(compiler_section.get("working_directory"))

    return Settings(
        source_path=source_path,
        compiler=CompilerSettings(
            modern_command=modern,
            legacy_command=legacy,
            timeout=timeout,
            working_directory=Path(working_directory).expanduser() if working_directory else None,
        ),
        log_level=_string_or_none(logging_section.get("level")),
    )


def load_settings(path: Optional[Path] = None, *, strict: bool = False) -> Settings:
    """
    Load settings from ``path`` or the first configuration file discovered.

    Parameters
    ----------
    path:
        Explicit configuration file. Must exist when given.
    strict:
        When ``True`` a missing configuration file raises ``FileNotFoundError``.
        Defaults to ``False`` so a bare installation runs on defaults.
    """

    if path is not None:
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file '{path}' does not exist.")
        return parse_settings(_load_toml(path), source_path=path)

    for candidate in _candidate_paths():
        if candidate.is_file():
            return parse_settings(_load_toml(candidate), source_path=candidate)

    if strict:
        raise FileNotFoundError(f"No configuration file found. Set {ENV_CONFIG_PATH} or create .bcdev/config.toml.")

    return parse_settings({})


__all__ = [
    "CompilerSettings",
    "ConfigurationError",
    "Settings",
    "load_settings",
    "parse_settings",
]
