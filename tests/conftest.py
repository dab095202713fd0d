from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

import pytest
from typer.testing import CliRunner

from bcdev_mcp.cli.main import app
from bcdev_mcp.core.process import ProcessOutcome

MISSING = ProcessOutcome(returncode=None, launch_error="[Errno 2] No such file or directory", missing_executable=True)


class FakeRunner:
    """Process runner returning canned outcomes keyed by command line or command prefix."""

    def __init__(self, responses: Optional[Mapping[str, ProcessOutcome]] = None, default: ProcessOutcome = MISSING) -> None:
        self.responses = dict(responses or {})
        self.default = default
        self.calls: list[str] = []

    def __call__(self, command: str) -> ProcessOutcome:
        self.calls.append(command)
        if command in self.responses:
            return self.responses[command]
        prefixes = sorted((key for key in self.responses if command.startswith(key)), key=len, reverse=True)
        if prefixes:
            return self.responses[prefixes[0]]
        return self.default


@pytest.fixture()
def make_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_app():
    return app


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep developer configuration files and overrides out of the tests."""

    monkeypatch.chdir(tmp_path)
    for name in ("BCDEV_CONFIG_PATH", "BCDEV_AL_COMMAND", "BCDEV_ALC_COMMAND", "BCDEV_COMPILE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
