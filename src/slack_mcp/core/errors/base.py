"""Error-to-ErrorCode mapping registry.

Maps Slack failure types (and, for transport failures, their HTTP status)
to ``(ErrorCode, ErrorType)`` tuples so every tool reports errors the same
way.

Usage:
    from slack_mcp.core.errors.base import error_to_response

    try:
        payload = await client.get_users()
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Type

from slack_mcp.core.errors.slack import (
    SlackNetworkError,
    SlackRateLimitError,
    SlackTransportError,
)
from slack_mcp.core.responses.types import ErrorCode, ErrorType

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[ErrorCode, ErrorType]] = {
    SlackRateLimitError: (ErrorCode.RATE_LIMIT_EXCEEDED, ErrorType.RATE_LIMIT),
    SlackNetworkError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
    SlackTransportError: (ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
}

# Status-specific refinements for SlackTransportError
STATUS_MAPPINGS: Dict[int, Tuple[ErrorCode, ErrorType]] = {
    400: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
    401: (ErrorCode.UNAUTHORIZED, ErrorType.AUTHENTICATION),
    403: (ErrorCode.FORBIDDEN, ErrorType.AUTHORIZATION),
    404: (ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
}


def classify_error_code(exc: Exception) -> Optional[Tuple[ErrorCode, ErrorType]]:
    """Return the ``(ErrorCode, ErrorType)`` pair for *exc*, or None if unknown.

    Looks up the exception's exact type. Transport failures are refined by
    status: known 4xx codes map individually, other 4xx to validation, and
    5xx or unknown status to unavailable.
    """
    mapping = ERROR_MAPPINGS.get(type(exc))
    if mapping is None:
        return None

    if type(exc) is SlackTransportError:
        status = exc.status
        if status is not None and status in STATUS_MAPPINGS:
            return STATUS_MAPPINGS[status]
        if status is not None and 400 <= status < 500:
            return (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION)
    return mapping


def error_to_response(
    exc: Exception,
    *,
    details: Optional[Mapping[str, Any]] = None,
) -> Optional[dict]:
    """Convert a known exception to a standard error_response dict, or None if unknown.

    Args:
        exc: The exception to convert.
        details: Extra context merged over the exception's own details.

    Returns:
        A dict suitable for MCP tool response, or None if the exception type
        is not registered in ERROR_MAPPINGS.
    """
    mapping = classify_error_code(exc)
    if mapping is None:
        return None

    from dataclasses import asdict

    from slack_mcp.core.responses.builders import error_response

    code, error_type = mapping
    merged: Dict[str, Any] = dict(getattr(exc, "details", {}) or {})
    status = getattr(exc, "status", None)
    if status is not None:
        merged["status"] = status
    retry_after = getattr(exc, "retry_after_seconds", None)
    if retry_after is not None:
        merged["retry_after_seconds"] = retry_after
    if details:
        merged.update(details)

    return asdict(
        error_response(
            str(exc),
            error_code=code,
            error_type=error_type,
            details=merged or None,
        )
    )
