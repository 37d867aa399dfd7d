"""Streamable HTTP transport with bearer-token authentication.

The MCP endpoint (``/mcp``) and its session handling come from the MCP SDK's
``streamable_http_app``. This module adds a ``/health`` route and an ASGI
middleware that rejects unauthenticated requests to ``/mcp`` with a
JSON-RPC error body.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from slack_mcp.config import ServerConfig
from slack_mcp.core.observability import get_audit_logger

logger = logging.getLogger(__name__)

JSONRPC_SERVER_ERROR = -32000

MISSING_HEADER_MESSAGE = "Unauthorized: Missing or invalid Authorization header"
INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid token"


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "error": {"code": JSONRPC_SERVER_ERROR, "message": message}, "id": None},
        status_code=401,
    )


class BearerAuthMiddleware:
    """Pure ASGI middleware requiring ``Authorization: Bearer <token>`` on a path prefix.

    Requests outside *protected_path* (such as ``/health``) and non-HTTP
    scopes pass straight through. With no token configured every request is
    allowed.
    """

    def __init__(self, app: ASGIApp, token: Optional[str], protected_path: str = "/mcp"):
        self.app = app
        self._token = token
        self._protected_path = protected_path.rstrip("/")

    def _is_protected(self, path: str) -> bool:
        return path == self._protected_path or path.startswith(self._protected_path + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._token or not self._is_protected(scope["path"]):
            await self.app(scope, receive, send)
            return

        audit = get_audit_logger()
        client = scope.get("client")
        ip_address = client[0] if client else None
        authorization = Headers(scope=scope).get("authorization")

        if not authorization or not authorization.startswith("Bearer "):
            audit.auth_failure(reason="missing_header", ip_address=ip_address, path=scope["path"])
            await _unauthorized(MISSING_HEADER_MESSAGE)(scope, receive, send)
            return

        presented = authorization[len("Bearer "):]
        if not secrets.compare_digest(presented.encode(), self._token.encode()):
            audit.auth_failure(reason="invalid_token", ip_address=ip_address, path=scope["path"])
            await _unauthorized(INVALID_TOKEN_MESSAGE)(scope, receive, send)
            return

        audit.auth_success(ip_address=ip_address, path=scope["path"])
        await self.app(scope, receive, send)


def health_payload(version: str) -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "service": "Slack MCP Server",
        "version": version,
    }


def build_http_app(mcp: FastMCP, auth_token: Optional[str], version: str) -> ASGIApp:
    """Build the ASGI application: health route, MCP endpoint, bearer auth."""

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse(health_payload(version))

    app = mcp.streamable_http_app()
    return BearerAuthMiddleware(app, auth_token, protected_path=mcp.settings.streamable_http_path)


def run_http_server(mcp: FastMCP, config: ServerConfig, auth_token: Optional[str]) -> None:
    """Serve *mcp* over streamable HTTP on ``config.host:config.port``."""
    logger.info("Starting Slack MCP Server with Streamable HTTP transport on port %d", config.port)
    app = build_http_app(mcp, auth_token, config.server_version)
    logger.info("Slack MCP Server running at http://%s:%d/mcp", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
