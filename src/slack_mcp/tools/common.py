"""Shared helpers for Slack MCP tools."""

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from slack_mcp.config import ServerConfig
from slack_mcp.core.errors import error_to_response
from slack_mcp.core.observability import redact_for_logging
from slack_mcp.core.responses import (
    ErrorCode,
    ErrorType,
    error_response,
    success_response,
)

logger = logging.getLogger(__name__)


def tool_enabled(config: ServerConfig, name: str) -> bool:
    return name not in set(config.disabled_tools)


def ts_to_iso(ts: Any) -> Optional[str]:
    """Convert a Slack timestamp (``"1712345678.000200"`` or epoch int) to ISO-8601 UTC.

    Returns None for missing or unparseable values.
    """
    if ts is None or ts == "":
        return None
    try:
        seconds = float(ts)
    except (TypeError, ValueError):
        return None
    return (
        datetime.fromtimestamp(seconds, tz=timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _slack_warnings(payload: Mapping[str, Any]) -> List[str]:
    if payload.get("ok") is False:
        return [f"Slack API returned ok=false: {payload.get('error', 'unknown_error')}"]
    return []


def _pagination(payload: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    metadata = payload.get("response_metadata") or {}
    next_cursor = metadata.get("next_cursor") if isinstance(metadata, Mapping) else None
    if next_cursor:
        return {"next_cursor": next_cursor, "has_more": True}
    return None


async def run_slack_tool(
    tool_name: str,
    operation: Callable[[], Awaitable[Mapping[str, Any]]],
) -> dict:
    """Await *operation* and wrap its payload in the standard response envelope.

    Slack failures are mapped through ``error_to_response``; argument
    validation errors become VALIDATION_ERROR; anything else is reported as
    INTERNAL_ERROR. Errors never propagate to the MCP layer.
    """
    try:
        payload = await operation()
    except ValidationError as e:
        logger.warning("Invalid tool arguments", extra={"tool": tool_name})
        return asdict(
            error_response(
                f"Invalid arguments for {tool_name}: {e.error_count()} validation error(s)",
                error_code=ErrorCode.VALIDATION_ERROR,
                error_type=ErrorType.VALIDATION,
                details={"tool": tool_name, "errors": e.errors(include_url=False, include_context=False)},
            )
        )
    except Exception as e:
        logger.error(
            "Tool execution failed",
            extra={
                "tool": tool_name,
                "error_name": type(e).__name__,
                "error_message": redact_for_logging(str(e)),
            },
        )
        mapped = error_to_response(e, details={"tool": tool_name})
        if mapped is not None:
            return mapped
        return asdict(
            error_response(
                str(e) or type(e).__name__,
                error_code=ErrorCode.INTERNAL_ERROR,
                error_type=ErrorType.INTERNAL,
                details={"tool": tool_name, "error_name": type(e).__name__},
            )
        )

    return asdict(
        success_response(
            data=payload,
            warnings=_slack_warnings(payload),
            pagination=_pagination(payload),
        )
    )
