"""
Typer application for driving the AL compiler from a terminal.

The same :class:`ExecutionContext` used by the MCP server is built in the
callback and shared with every command, so the CLI exercises exactly the
detection and compile paths the server does.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from ..adapters.compiler import CompileRequest, CompileVerdict
from ..config import ConfigurationError, load_settings
from ..core.context import ExecutionContext
from ..core.logging import configure_logging

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Business Central development bridge for the AL compiler.\n\n"
        "Commands:\n"
        "- info / verify: inspect the detected AL toolchain.\n"
        "- compile: build an app project and report diagnostics.\n"
        "- serve: run the MCP stdio server."
    ),
)


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration TOML file. Defaults to BCDEV_CONFIG_PATH or .bcdev/config.toml.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
) -> None:
    """
    Configure logging and the shared execution context.

    The context is stored in Typer's state so child commands retrieve it via
    :class:`typer.Context`.
    """

    try:
        settings = load_settings(config_file)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    if log_level:
        settings.log_level = log_level
    configure_logging(settings.log_level, force=True)
    state = ctx.ensure_object(dict)
    state["context"] = ExecutionContext.build_default(settings=settings)


def _require_context(ctx: typer.Context) -> ExecutionContext:
    state = ctx.ensure_object(dict)
    context = state.get("context")
    if not isinstance(context, ExecutionContext):
        raise typer.Exit(code=2)
    return context


def _echo_verdict(verdict: CompileVerdict) -> None:
    heading = "Compilation result" if verdict.success else "Compilation failed"
    typer.echo(f"{heading}:\n")
    typer.echo(verdict.output)
    if verdict.errors:
        typer.echo("")
        typer.echo(f"Errors ({len(verdict.errors)}):")
        for line in verdict.errors:
            typer.echo(f"- {line}")


@app.command("info")
def info(
    ctx: typer.Context,
    output_json: bool = typer.Option(False, "--json", help="Emit the toolchain record in JSON format."),
) -> None:
    """Detect the AL toolchain and print what was found."""

    context = _require_context(ctx)
    record = context.compiler.initialize()

    if output_json:
        typer.echo(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
        return

    typer.echo(f"Available: {'yes' if record.available else 'no'}")
    if record.available:
        typer.echo(f"Command: {context.compiler.executable()}")
        typer.echo(f"Version: {record.version or '(version info not available)'}")


@app.command("verify")
def verify(ctx: typer.Context) -> None:
    """Check that a usable AL compiler is installed."""

    context = _require_context(ctx)
    result = context.compiler.verify()
    typer.echo(result.message)
    if result.details:
        typer.echo(json.dumps(dict(result.details), ensure_ascii=False, indent=2))
    if not result.success:
        raise typer.Exit(code=1)


@app.command("compile")
def compile_app(
    ctx: typer.Context,
    project_path: str = typer.Argument(..., help="App project folder containing app.json."),
    package_cache: Optional[str] = typer.Option(None, "--package-cache", help="Folder with dependency symbols (.alpackages)."),
    output: Optional[str] = typer.Option(None, "--out", "-o", help="Path of the produced .app file."),
    probe_path: Optional[List[str]] = typer.Option(
        None,
        "--probe-path",
        help="Additional .NET assembly probing path. Can be repeated.",
    ),
    output_json: bool = typer.Option(False, "--json", help="Emit the verdict in JSON format."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the compiler command line without running it."),
) -> None:
    """Compile an AL project and report the compiler's verdict."""

    context = _require_context(ctx)
    try:
        request = CompileRequest(
            project_path=project_path,
            package_cache_path=package_cache,
            output_path=output,
            assembly_probing_paths=tuple(probe_path or ()),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="PROJECT_PATH") from exc

    context.compiler.initialize()

    if dry_run:
        command = context.compiler.command_line(request)
        if command is None:
            typer.echo("AL compiler is not available; nothing to run.", err=True)
            raise typer.Exit(code=1)
        typer.echo(command)
        return

    verdict = context.compiler.compile(request)
    if output_json:
        typer.echo(json.dumps(verdict.to_dict(), ensure_ascii=False, indent=2))
    else:
        _echo_verdict(verdict)

    if not verdict.success:
        raise typer.Exit(code=1)


@app.command("serve")
def serve_command(ctx: typer.Context) -> None:
    """Run the MCP server over stdio."""

    from ..server import serve

    serve(_require_context(ctx))


if __name__ == "__main__":  # pragma: no cover
    app()
