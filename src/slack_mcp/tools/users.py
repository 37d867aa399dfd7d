"""User directory tools."""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from slack_mcp.client import SlackClient
from slack_mcp.config import ServerConfig
from slack_mcp.core.naming import canonical_tool
from slack_mcp.tools.common import run_slack_tool, tool_enabled


def register_user_tools(mcp: FastMCP, config: ServerConfig, client: SlackClient) -> None:
    """Register user tools with the FastMCP server."""

    if tool_enabled(config, "slack_get_users"):

        @canonical_tool(mcp, canonical_name="slack_get_users")
        async def slack_get_users(cursor: Optional[str] = None, limit: int = 100) -> dict:
            """
            Get users in the workspace with their basic profile information.

            Use this to resolve user IDs (like 'U0123ABC') from messages to names.

            Args:
                cursor: Pagination cursor for next page of results
                limit: Maximum number of users to return (default 100, max 200)
            """
            return await run_slack_tool("slack_get_users", lambda: client.get_users(limit, cursor))

    if tool_enabled(config, "slack_get_user_profile"):

        @canonical_tool(mcp, canonical_name="slack_get_user_profile")
        async def slack_get_user_profile(user_id: str) -> dict:
            """Get detailed profile information for a specific user."""
            return await run_slack_tool(
                "slack_get_user_profile", lambda: client.get_user_profile(user_id)
            )
