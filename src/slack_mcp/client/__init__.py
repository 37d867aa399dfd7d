"""Slack Web API client."""

from slack_mcp.client.models import CanvasChange, CanvasOperation, DocumentContent, TokenType
from slack_mcp.client.slack import DEFAULT_BASE_URL, SlackClient

__all__ = [
    "CanvasChange",
    "CanvasOperation",
    "DEFAULT_BASE_URL",
    "DocumentContent",
    "SlackClient",
    "TokenType",
]
