"""Message tools: posting, replying, reacting and searching."""

from typing import Any, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP

from slack_mcp.client import SlackClient
from slack_mcp.config import ServerConfig
from slack_mcp.core.naming import canonical_tool
from slack_mcp.tools.common import run_slack_tool, tool_enabled, ts_to_iso


def search_summary(messages: Dict[str, Any]) -> Dict[str, Any]:
    matches: List[Dict[str, Any]] = messages.get("matches") or []
    channels: List[str] = []
    for match in matches:
        name = (match.get("channel") or {}).get("name")
        if name and name not in channels:
            channels.append(name)

    summary: Dict[str, Any] = {
        "total_matches": messages.get("total") or 0,
        "returned_count": len(matches),
        "channels_in_results": channels,
    }
    if matches:
        summary["oldest_result_time"] = ts_to_iso(matches[-1].get("ts"))
        summary["newest_result_time"] = ts_to_iso(matches[0].get("ts"))
    return summary


def register_message_tools(mcp: FastMCP, config: ServerConfig, client: SlackClient) -> None:
    """Register message tools with the FastMCP server."""

    if tool_enabled(config, "slack_post_message"):

        @canonical_tool(mcp, canonical_name="slack_post_message")
        async def slack_post_message(channel_id: str, text: str) -> dict:
            """
            Post a new message to a Slack channel, or a direct message to a user.

            For DMs, use the user's ID (U0123ABC) as the channel_id.

            Args:
                channel_id: The ID of the channel or user to post to
                text: The message text to post
            """
            return await run_slack_tool(
                "slack_post_message", lambda: client.post_message(channel_id, text)
            )

    if tool_enabled(config, "slack_reply_to_thread"):

        @canonical_tool(mcp, canonical_name="slack_reply_to_thread")
        async def slack_reply_to_thread(channel_id: str, thread_ts: str, text: str) -> dict:
            """
            Reply to a specific message thread in Slack.

            Args:
                channel_id: The ID of the channel containing the thread
                thread_ts: Timestamp of the parent message, e.g. '1234567890.123456'
                text: The reply text
            """
            return await run_slack_tool(
                "slack_reply_to_thread",
                lambda: client.post_reply(channel_id, thread_ts, text),
            )

    if tool_enabled(config, "slack_add_reaction"):

        @canonical_tool(mcp, canonical_name="slack_add_reaction")
        async def slack_add_reaction(channel_id: str, timestamp: str, reaction: str) -> dict:
            """
            Add a reaction emoji to a message.

            Args:
                channel_id: The ID of the channel containing the message
                timestamp: The timestamp of the message to react to
                reaction: The name of the emoji reaction (without ::)
            """
            return await run_slack_tool(
                "slack_add_reaction",
                lambda: client.add_reaction(channel_id, timestamp, reaction),
            )

    if tool_enabled(config, "slack_search_messages"):

        @canonical_tool(mcp, canonical_name="slack_search_messages")
        async def slack_search_messages(
            query: str,
            count: int = 20,
            cursor: Optional[str] = None,
            sort: Literal["score", "timestamp"] = "timestamp",
            sort_dir: Literal["asc", "desc"] = "desc",
        ) -> dict:
            """
            Search for messages across the workspace using Slack's search syntax.

            Supports modifiers like 'in:#channel', 'from:@user',
            'before:YYYY-MM-DD', 'after:YYYY-MM-DD', 'has:reaction', 'is:thread'.

            NOTE: only works with user tokens (xoxp-), not bot tokens.

            Args:
                query: Search query with optional Slack search modifiers
                count: Number of results to return (default 20, max 100)
                cursor: Pagination cursor for next page of results
                sort: 'score' for relevance, 'timestamp' for recency
                sort_dir: 'asc' or 'desc'
            """

            async def _search() -> dict:
                response = await client.search_messages(query, count, cursor, sort, sort_dir)
                return {
                    **response,
                    "_request_context": {
                        "query": query,
                        "count": count,
                        "sort": sort,
                        "sort_dir": sort_dir,
                        "cursor_used": cursor,
                    },
                    "_search_summary": search_summary(response.get("messages") or {}),
                }

            return await run_slack_tool("slack_search_messages", _search)
