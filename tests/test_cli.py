from __future__ import annotations

import json
from unittest.mock import patch

from typer.testing import CliRunner

from bcdev_mcp.cli.main import app
from bcdev_mcp.core.process import ProcessOutcome

MODERN_OK = {
    "al --help": ProcessOutcome(returncode=0, stdout="altool"),
    "al --version": ProcessOutcome(returncode=0, stdout="altool 16.0.24.41895"),
}


def invoke(cli_runner: CliRunner, runner, args: list[str]):
    with patch("bcdev_mcp.core.context.SubprocessRunner", side_effect=lambda **_: runner):
        return cli_runner.invoke(app, ["--log-level", "CRITICAL", *args])


def test_info_json(cli_runner, make_runner):
    result = invoke(cli_runner, make_runner(MODERN_OK), ["info", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"command": "al", "version": "16.0.24.41895", "available": True}


def test_info_reports_missing_toolchain(cli_runner, make_runner):
    result = invoke(cli_runner, make_runner(), ["info"])

    assert result.exit_code == 0
    assert "Available: no" in result.stdout


def test_verify_failure_sets_exit_code(cli_runner, make_runner):
    result = invoke(cli_runner, make_runner(), ["verify"])

    assert result.exit_code == 1
    assert "Neither 'al' nor 'alc'" in result.stdout


def test_verify_success(cli_runner, make_runner):
    result = invoke(cli_runner, make_runner(MODERN_OK), ["verify"])

    assert result.exit_code == 0
    assert "16.0.24.41895" in result.stdout


def test_compile_success(cli_runner, make_runner):
    runner = make_runner({**MODERN_OK, "al compile": ProcessOutcome(returncode=0, stdout="App compiled: MyApp.app")})

    result = invoke(cli_runner, runner, ["compile", "/src/My App", "--out", "/out/MyApp.app"])

    assert result.exit_code == 0
    assert "App compiled: MyApp.app" in result.stdout
    assert runner.calls[-1] == 'al compile /project:"/src/My App" /out:"/out/MyApp.app"'


def test_compile_failure_json(cli_runner, make_runner):
    runner = make_runner({**MODERN_OK, "al compile": ProcessOutcome(returncode=1, stderr="Error: Syntax error in line 10")})

    result = invoke(cli_runner, runner, ["compile", "/src/app", "--json"])

    assert result.exit_code == 1
    assert json.loads(result.stdout) == {
        "success": False,
        "output": "Error: Syntax error in line 10",
        "errors": ["Error: Syntax error in line 10"],
    }


def test_compile_dry_run_does_not_launch(cli_runner, make_runner):
    runner = make_runner(MODERN_OK)

    result = invoke(
        cli_runner,
        runner,
        ["compile", "/src/app", "--probe-path", "/a", "--probe-path", "/b", "--dry-run"],
    )

    assert result.exit_code == 0
    assert result.stdout.strip() == 'al compile /project:"/src/app" /assemblyprobingpaths:"/a;/b"'
    assert not any(" compile " in call for call in runner.calls)


def test_compile_without_toolchain(cli_runner, make_runner):
    result = invoke(cli_runner, make_runner(), ["compile", "/src/app"])

    assert result.exit_code == 1
    assert "AL compiler is not available" in result.stdout


def test_config_file_sets_executable_names(cli_runner, make_runner, tmp_path):
    config = tmp_path / "bcdev.toml"
    config.write_text('[compiler]\nmodern_command = "al-preview"\n', encoding="utf-8")
    runner = make_runner({"al-preview --help": ProcessOutcome(returncode=0, stdout="altool")})

    result = invoke(cli_runner, runner, ["--config", str(config), "info"])

    assert result.exit_code == 0
    assert "Command: al-preview" in result.stdout


def test_malformed_config_exits_with_usage_code(cli_runner, make_runner, tmp_path):
    config = tmp_path / "bcdev.toml"
    config.write_text("[compiler\n", encoding="utf-8")

    result = invoke(cli_runner, make_runner(), ["--config", str(config), "info"])

    assert result.exit_code == 2
