"""Unified error hierarchy for slack-mcp.

Exception classes live in domain modules within this package; this
__init__.py re-exports them for convenient access.

Usage:
    from slack_mcp.core.errors import SlackRateLimitError, error_to_response
"""

from slack_mcp.core.errors.base import (
    ERROR_MAPPINGS,
    STATUS_MAPPINGS,
    classify_error_code,
    error_to_response,
)
from slack_mcp.core.errors.slack import (
    SlackError,
    SlackNetworkError,
    SlackRateLimitError,
    SlackTransportError,
)

__all__ = [
    # Base / Registry
    "ERROR_MAPPINGS",
    "STATUS_MAPPINGS",
    "classify_error_code",
    "error_to_response",
    # Slack errors
    "SlackError",
    "SlackTransportError",
    "SlackRateLimitError",
    "SlackNetworkError",
]
