"""Transports serving the MCP server over stdio or streamable HTTP."""

from slack_mcp.transports.http import (
    BearerAuthMiddleware,
    build_http_app,
    run_http_server,
)
from slack_mcp.transports.stdio import run_stdio_server

__all__ = [
    "BearerAuthMiddleware",
    "build_http_app",
    "run_http_server",
    "run_stdio_server",
]
