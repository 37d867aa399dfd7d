"""Channel tools: listing channels, reading history and threads."""

import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from slack_mcp.client import SlackClient
from slack_mcp.config import ServerConfig
from slack_mcp.core.naming import canonical_tool
from slack_mcp.tools.common import run_slack_tool, tool_enabled, ts_to_iso

logger = logging.getLogger(__name__)


def history_time_range(messages: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Summarise the span of a newest-first message page."""
    if not messages:
        return None
    oldest_ts = messages[-1].get("ts")
    newest_ts = messages[0].get("ts")
    return {
        "oldest_message_ts": oldest_ts,
        "newest_message_ts": newest_ts,
        "oldest_message_time": ts_to_iso(oldest_ts),
        "newest_message_time": ts_to_iso(newest_ts),
    }


def thread_info(messages: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Summarise a thread page whose first message is the parent."""
    if not messages:
        return None
    latest_ts = messages[-1].get("ts")
    return {
        "reply_count": len(messages) - 1,
        "parent_ts": messages[0].get("ts"),
        "latest_reply_ts": latest_ts,
        "latest_reply_time": ts_to_iso(latest_ts),
    }


def register_channel_tools(mcp: FastMCP, config: ServerConfig, client: SlackClient) -> None:
    """Register channel tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
        client: Slack API client shared by all tools
    """

    if tool_enabled(config, "slack_list_channels"):

        @canonical_tool(mcp, canonical_name="slack_list_channels")
        async def slack_list_channels(limit: int = 100, cursor: Optional[str] = None) -> dict:
            """
            List public and private channels accessible to the authenticated token,
            or the pre-defined channels when an allow-list is configured.

            Use this to discover channel IDs before calling slack_get_channel_history.

            Args:
                limit: Maximum number of channels to return (default 100, max 200)
                cursor: Pagination cursor for next page of results

            Returns:
                Slack conversations.list payload with channel id, name and metadata
            """
            return await run_slack_tool(
                "slack_list_channels", lambda: client.get_channels(limit, cursor)
            )

    if tool_enabled(config, "slack_get_channel_history"):

        @canonical_tool(mcp, canonical_name="slack_get_channel_history")
        async def slack_get_channel_history(
            channel_id: str,
            limit: int = 50,
            oldest: Optional[str] = None,
            latest: Optional[str] = None,
            cursor: Optional[str] = None,
            inclusive: Optional[bool] = None,
        ) -> dict:
            """
            Get messages from a channel with optional time range and pagination.

            Messages with reply_count > 0 or thread_ts are thread parents; use
            slack_get_thread_replies to fetch their replies. User IDs can be
            resolved via slack_get_users.

            Args:
                channel_id: The ID of the channel
                limit: Number of messages to retrieve (default 50, max 200)
                oldest: Unix timestamp (seconds, can be fractional); only messages AFTER this time
                latest: Unix timestamp (seconds, can be fractional); only messages BEFORE this time
                cursor: Pagination cursor from response_metadata.next_cursor
                inclusive: Include messages with oldest/latest timestamps (default false)

            Returns:
                Slack conversations.history payload plus _request_context and,
                when messages were returned, _time_range
            """

            async def _fetch() -> dict:
                response = await client.get_channel_history(
                    channel_id, limit, oldest, latest, cursor, inclusive
                )
                result = {
                    **response,
                    "_request_context": {
                        "channel_id": channel_id,
                        "oldest": oldest,
                        "latest": latest,
                        "limit": limit,
                        "cursor_used": cursor,
                    },
                }
                time_range = history_time_range(response.get("messages") or [])
                if time_range:
                    result["_time_range"] = time_range
                return result

            return await run_slack_tool("slack_get_channel_history", _fetch)

    if tool_enabled(config, "slack_get_thread_replies"):

        @canonical_tool(mcp, canonical_name="slack_get_thread_replies")
        async def slack_get_thread_replies(
            channel_id: str,
            thread_ts: str,
            cursor: Optional[str] = None,
            limit: int = 100,
        ) -> dict:
            """
            Get replies in a message thread with pagination support.

            Args:
                channel_id: The ID of the channel containing the thread
                thread_ts: Timestamp of the parent message, e.g. '1234567890.123456'
                cursor: Pagination cursor from response_metadata.next_cursor
                limit: Number of replies to retrieve (default 100, max 200)
            """

            async def _fetch() -> dict:
                response = await client.get_thread_replies(channel_id, thread_ts, cursor, limit)
                result = {
                    **response,
                    "_request_context": {
                        "channel_id": channel_id,
                        "thread_ts": thread_ts,
                        "thread_time": ts_to_iso(thread_ts),
                        "limit": limit,
                        "cursor_used": cursor,
                    },
                }
                info = thread_info(response.get("messages") or [])
                if info:
                    result["_thread_info"] = info
                return result

            return await run_slack_tool("slack_get_thread_replies", _fetch)
