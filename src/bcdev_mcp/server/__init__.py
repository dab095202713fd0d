"""MCP stdio server publishing the AL compiler tools."""

from .app import CompilerToolHandlers, build_server, request_from_arguments, serve

__all__ = ["CompilerToolHandlers", "build_server", "request_from_arguments", "serve"]
