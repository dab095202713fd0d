"""
Model Context Protocol server exposing the AL compiler adapter.

The server speaks MCP over stdio and publishes two tools:

``compile-app``
    Compile a Business Central app project and return the compiler output.
``toolchain-info``
    Report which AL toolchain was detected at startup.

Handlers live on :class:`CompilerToolHandlers` so they can be exercised
without a transport; :func:`build_server` only wires them into
``mcp.server.Server``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, List, Mapping, Optional

import anyio
from anyio import to_thread
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .. import __version__
from ..adapters.compiler import CompileRequest
from ..core.context import ExecutionContext
from ..core.logging import log_progress

SERVER_NAME = "bcdev-mcp"

INSTALL_GUIDANCE = (
    "Error: AL compiler is not available in PATH.\n\n"
    "To install it:\n"
    "1. Install the AL Language extension in VS Code\n"
    "2. Or install Business Central Development Tools:\n"
    "   dotnet tool install Microsoft.Dynamics.BusinessCentral.Development.Tools --interactive --prerelease --global\n"
    "3. Make sure 'al' command is in your system PATH"
)

COMPILE_APP_TOOL = types.Tool(
    name="compile-app",
    title="Compile Business Central App",
    description="Compile a Business Central app project using the AL compiler",
    inputSchema={
        "type": "object",
        "properties": {
            "projectPath": {
                "type": "string",
                "description": "Path to the app project folder containing app.json",
            },
            "packageCachePath": {
                "type": "string",
                "description": "Path to the .alpackages folder with dependencies",
            },
            "outputPath": {
                "type": "string",
                "description": "Path for the output .app file",
            },
            "assemblyProbingPaths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Additional paths to search for .NET assemblies",
            },
        },
        "required": ["projectPath"],
    },
)

TOOLCHAIN_INFO_TOOL = types.Tool(
    name="toolchain-info",
    title="AL Toolchain Info",
    description="Report which AL compiler executable was detected and its version",
    inputSchema={"type": "object", "properties": {}},
)


def _text_result(text: str, *, is_error: bool = False, structured: Optional[dict[str, Any]] = None) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=structured,
        isError=is_error,
    )


def _optional_string(arguments: Mapping[str, Any], key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string.")
    return value or None


def request_from_arguments(arguments: Mapping[str, Any]) -> CompileRequest:
    """
    Translate ``compile-app`` tool arguments (camelCase) into a :class:`CompileRequest`.

    Raises ``ValueError`` when ``projectPath`` is missing or a field has the wrong type.
    """

    project_path = arguments.get("projectPath")
    if not isinstance(project_path, str) or not project_path.strip():
        raise ValueError("'projectPath' is required and must be a non-empty string.")

    probing_raw = arguments.get("assemblyProbingPaths") or []
    if not isinstance(probing_raw, list) or not all(isinstance(item, str) for item in probing_raw):
        raise ValueError("'assemblyProbingPaths' must be an array of strings.")

    return CompileRequest(
        project_path=project_path,
        package_cache_path=_optional_string(arguments, "packageCachePath"),
        output_path=_optional_string(arguments, "outputPath"),
        assembly_probing_paths=tuple(probing_raw),
    )


@dataclass(slots=True)
class CompilerToolHandlers:
    """Transport-independent implementations of the MCP tools."""

    context: ExecutionContext
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = self.context.get_logger(self.__class__.__name__)

    def list_tools(self) -> List[types.Tool]:
        return [COMPILE_APP_TOOL, TOOLCHAIN_INFO_TOOL]

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]]) -> types.CallToolResult:
        self.logger.debug("Tool invoked", extra={"tool": name})
        if name == COMPILE_APP_TOOL.name:
            return await self.compile_app(arguments or {})
        if name == TOOLCHAIN_INFO_TOOL.name:
            return self.toolchain_info()
        return _text_result(f"Unknown tool: {name}", is_error=True)

    async def compile_app(self, arguments: Mapping[str, Any]) -> types.CallToolResult:
        compiler = self.context.compiler
        info = compiler.get_toolchain_info()
        if info is None or not info.available:
            return _text_result(INSTALL_GUIDANCE, is_error=True)

        try:
            request = request_from_arguments(arguments)
        except ValueError as exc:
            return _text_result(f"Invalid arguments: {exc}", is_error=True)

        verdict = await to_thread.run_sync(compiler.compile, request)
        heading = "Compilation result" if verdict.success else "Compilation failed"
        return _text_result(
            f"{heading}:\n\n{verdict.output}",
            is_error=not verdict.success,
            structured=verdict.to_dict(),
        )

    def toolchain_info(self) -> types.CallToolResult:
        info = self.context.compiler.get_toolchain_info()
        if info is None:
            return _text_result("AL toolchain detection has not run.", is_error=True)
        payload = info.to_dict()
        return _text_result(json.dumps(payload, indent=2), structured=payload)


def build_server(context: ExecutionContext) -> Server:
    """Create an MCP server whose tools delegate to ``context.compiler``."""

    server: Server = Server(SERVER_NAME, version=__version__)
    handlers = CompilerToolHandlers(context)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return handlers.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await handlers.call_tool(name, arguments)

    return server


def report_toolchain(context: ExecutionContext) -> None:
    """Log the detection outcome with installation hints when nothing was found."""

    logger = context.get_logger("bcdev_mcp.server")
    info = context.compiler.get_toolchain_info()
    if info is not None and info.available:
        log_progress(
            logger,
            "AL compiler found",
            phase="startup",
            status="available",
            extra={"toolchain": info.command.value, "version": info.version or "version info not available"},
        )
        return
    logger.warning(
        "AL compiler not found in PATH; the compile-app tool will not work without it. "
        "Install the AL Language extension in VS Code or Business Central Development Tools."
    )


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def serve(context: ExecutionContext) -> None:
    """Detect the toolchain, then serve MCP requests over stdio until the client disconnects."""

    logger = context.get_logger("bcdev_mcp.server")
    log_progress(logger, "Starting Business Central Development MCP server", phase="startup", status="started")
    context.compiler.initialize()
    report_toolchain(context)
    server = build_server(context)
    log_progress(logger, "Server is ready to accept connections", phase="startup", status="ready")
    anyio.run(run_stdio, server)


__all__ = [
    "COMPILE_APP_TOOL",
    "CompilerToolHandlers",
    "INSTALL_GUIDANCE",
    "SERVER_NAME",
    "TOOLCHAIN_INFO_TOOL",
    "build_server",
    "report_toolchain",
    "request_from_arguments",
    "serve",
]
