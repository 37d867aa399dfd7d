"""MCP tool decorator with observability.

Provides @mcp_tool, which adds correlation IDs, debug logging and audit
trails to tool handlers.
"""

import functools
import logging
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from slack_mcp.core.context import (
    generate_correlation_id,
    get_correlation_id,
    sync_request_context,
)
from slack_mcp.core.observability.audit import _audit

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _finish(name: str, corr_id: str, start: float, error_msg: Optional[str], audit: bool) -> None:
    duration_ms = (time.perf_counter() - start) * 1000
    success = error_msg is None
    logger.debug(
        "Tool %s finished",
        name,
        extra={"tool": name, "success": success, "duration_ms": round(duration_ms, 2)},
    )
    if audit:
        _audit.tool_invocation(
            tool_name=name,
            success=success,
            duration_ms=round(duration_ms, 2),
            error=error_msg,
            correlation_id=corr_id,
        )


def mcp_tool(
    tool_name: Optional[str] = None, audit: bool = True
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for async MCP tool handlers with observability.

    Automatically:
    - Establishes a correlation ID when none is active
    - Logs tool completion and duration
    - Creates audit log entries

    Args:
        tool_name: Override tool name (defaults to function name)
        audit: Whether to create audit log entries
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        name = tool_name or func.__name__

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            existing_corr_id = get_correlation_id()
            corr_id = existing_corr_id or generate_correlation_id(prefix="tool")

            if not existing_corr_id:
                with sync_request_context(correlation_id=corr_id):
                    return await _async_tool_impl(corr_id, *args, **kwargs)
            return await _async_tool_impl(corr_id, *args, **kwargs)

        async def _async_tool_impl(_corr_id: str, *args: Any, **kwargs: Any) -> T:
            start = time.perf_counter()
            error_msg = None
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                error_msg = str(e) or type(e).__name__
                raise
            finally:
                _finish(name, _corr_id, start, error_msg, audit)

        return async_wrapper

    return decorator
