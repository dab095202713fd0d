from __future__ import annotations

import logging

import pytest

from bcdev_mcp.adapters.compiler import ALCompilerAdapter
from bcdev_mcp.config import CompilerSettings, Settings
from bcdev_mcp.core.context import ExecutionContext
from bcdev_mcp.core.logging import StructuredLogFormatter, configure_logging, get_logger, log_progress
from bcdev_mcp.core.process import ProcessOutcome, SubprocessRunner


def test_execution_context_build_default_uses_settings():
    settings = Settings(compiler=CompilerSettings(modern_command="al-next", legacy_command="alc-old", timeout=42.0))

    context = ExecutionContext.build_default(settings=settings)

    assert isinstance(context.compiler, ALCompilerAdapter)
    assert context.compiler.modern_command == "al-next"
    assert context.compiler.legacy_command == "alc-old"
    assert isinstance(context.compiler.runner, SubprocessRunner)
    assert context.compiler.runner.timeout == 42.0


def test_execution_context_accepts_runner_override(make_runner):
    runner = make_runner({"al --help": ProcessOutcome(returncode=0, stdout="altool")})

    context = ExecutionContext.build_default(settings=Settings(), runner=runner)
    context.compiler.initialize()

    assert context.compiler.get_toolchain_info().available is True
    assert runner.calls[0] == "al --help"


@pytest.fixture
def reset_logging_handlers():
    root = logging.getLogger()
    existing_handlers = list(root.handlers)
    yield
    root.handlers = existing_handlers


class _ListHandler(logging.Handler):
    def __init__(self, formatter: logging.Formatter):
        super().__init__()
        self.records: list[logging.LogRecord] = []
        self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - trivial
        self.records.append(record)


def test_structured_formatter_appends_extras():
    formatter = StructuredLogFormatter(use_color=False)
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg="Executing AL compiler",
        args=(),
        exc_info=None,
    )
    record.phase = "compile"
    record.exit_code = 1
    record.command = "al compile"

    formatted = formatter.format(record)

    assert "Executing AL compiler" in formatted
    assert formatted.endswith("| phase=compile command=al compile exit_code=1")


def test_configure_logging_installs_structured_formatter(reset_logging_handlers):
    configure_logging(force=True)
    root = logging.getLogger()

    assert root.handlers, "expected at least one handler configured"
    assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)


def test_logger_merges_bound_and_call_extras(reset_logging_handlers):
    configure_logging(force=True)
    logger = get_logger("test.merge", extra={"tool": "al_compiler"})
    root = logging.getLogger()
    collector = _ListHandler(root.handlers[0].formatter)
    root.addHandler(collector)
    try:
        logger.info("Probe failed", extra={"exit_code": 1})
    finally:
        root.removeHandler(collector)

    record = collector.records[0]
    assert getattr(record, "tool") == "al_compiler"
    assert getattr(record, "exit_code") == 1


def test_log_progress_populates_record_extras(reset_logging_handlers):
    configure_logging(force=True)
    logger = get_logger("test.progress", extra={"tool": "al_compiler"})
    root = logging.getLogger()
    collector = _ListHandler(root.handlers[0].formatter)
    root.addHandler(collector)
    try:
        log_progress(logger, "Detecting", phase="detect", step="probe", status="started", result="pending")
    finally:
        root.removeHandler(collector)

    assert collector.records, "log_progress should emit a record"
    record = collector.records[0]
    assert getattr(record, "phase") == "detect"
    assert getattr(record, "step") == "probe"
    assert getattr(record, "status") == "started"
    assert getattr(record, "result") == "pending"
    assert getattr(record, "tool") == "al_compiler"
    formatted = collector.format(record)
    assert "phase=detect" in formatted
    assert "status=started" in formatted


def test_log_level_from_environment(monkeypatch, reset_logging_handlers):
    monkeypatch.setenv("BCDEV_LOG_LEVEL", "WARNING")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.WARNING
