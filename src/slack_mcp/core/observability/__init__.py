"""
Observability utilities for slack-mcp.

Provides the tool decorator, audit logging and log redaction used by the
MCP tools and the Slack client.

    from slack_mcp.core.observability import mcp_tool, audit_log

    @mcp.tool()
    @mcp_tool(tool_name="slack_list_channels")
    async def slack_list_channels(limit: int = 100) -> dict:
        ...
"""

from slack_mcp.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)
from slack_mcp.core.observability.decorators import mcp_tool
from slack_mcp.core.observability.redaction import (
    SENSITIVE_PATTERNS,
    redact_for_logging,
    redact_sensitive_data,
)

__all__ = [
    # Audit
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
    # Decorators
    "mcp_tool",
    # Redaction
    "SENSITIVE_PATTERNS",
    "redact_for_logging",
    "redact_sensitive_data",
]
