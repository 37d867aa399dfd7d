"""
Response builder functions for MCP tool operations.

Provides success_response() and error_response(), the two constructors for
standardized ToolResponse objects.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from slack_mcp.core.responses.types import (
    ErrorCode,
    ErrorType,
    ToolResponse,
    _build_meta,
)


def success_response(
    data: Optional[Mapping[str, Any]] = None,
    *,
    warnings: Optional[Sequence[str]] = None,
    pagination: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create a standardized success response.

    Args:
        data: Optional mapping used as the payload.
        warnings: Non-fatal issues to surface in ``meta.warnings``.
        pagination: Cursor metadata for list results.

    Example:
        >>> success_response(
        ...     data={"ok": True, "channels": [...]},
        ...     pagination={"next_cursor": "dGVhbTpD..."},
        ... )
    """
    payload: Dict[str, Any] = dict(data) if data else {}
    meta_payload = _build_meta(warnings=warnings, pagination=pagination)
    return ToolResponse(success=True, data=payload, error=None, meta=meta_payload)


def error_response(
    message: str,
    *,
    error_code: Union[ErrorCode, str] = ErrorCode.INTERNAL_ERROR,
    error_type: Union[ErrorType, str] = ErrorType.INTERNAL,
    details: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create a standardized error response.

    Args:
        message: Human-readable description of the failure.
        error_code: Canonical error code (``ErrorCode`` enum or string).
        error_type: Error category for routing (``ErrorType`` enum or string).
        details: Nested structure describing the failure (status, url, ...).

    Example:
        >>> error_response(
        ...     "Slack API HTTP error: 404 Not Found",
        ...     error_code=ErrorCode.NOT_FOUND,
        ...     error_type=ErrorType.NOT_FOUND,
        ...     details={"status": 404, "url": "https://slack.com/api/files.info"},
        ... )
    """
    payload: Dict[str, Any] = {
        "error_code": error_code.value if isinstance(error_code, Enum) else error_code,
        "error_type": error_type.value if isinstance(error_type, Enum) else error_type,
    }
    if details:
        payload["details"] = dict(details)

    return ToolResponse(success=False, data=payload, error=message, meta=_build_meta())
