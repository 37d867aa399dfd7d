"""MCP tools exposing the Slack client.

Each sub-module provides a ``register_*_tools(mcp, config, client)`` function.
"""

from slack_mcp.tools.canvases import register_canvas_tools
from slack_mcp.tools.channels import register_channel_tools
from slack_mcp.tools.messages import register_message_tools
from slack_mcp.tools.users import register_user_tools

TOOL_NAMES = (
    "slack_list_channels",
    "slack_post_message",
    "slack_reply_to_thread",
    "slack_add_reaction",
    "slack_get_channel_history",
    "slack_get_thread_replies",
    "slack_search_messages",
    "slack_get_users",
    "slack_get_user_profile",
    "slack_list_canvases",
    "slack_read_canvas",
    "slack_edit_canvas",
    "slack_create_canvas",
)

__all__ = [
    "TOOL_NAMES",
    "register_canvas_tools",
    "register_channel_tools",
    "register_message_tools",
    "register_user_tools",
]
