"""FastMCP server factory for slack-mcp."""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from slack_mcp.client import SlackClient
from slack_mcp.config import ServerConfig, get_config
from slack_mcp.tools import (
    register_canvas_tools,
    register_channel_tools,
    register_message_tools,
    register_user_tools,
)

logger = logging.getLogger(__name__)

SERVER_DISPLAY_NAME = "Slack MCP Server"

_INSTRUCTIONS = (
    "Tools for reading and writing Slack: list channels, read channel history "
    "and threads, post messages and replies, add reactions, search messages "
    "(user token only), look up users, and read or edit canvases."
)


def build_client(config: ServerConfig) -> SlackClient:
    """Create the Slack client from configuration.

    Raises:
        ValueError: If neither a user nor a bot token is configured.
    """
    token, token_type = config.active_token()
    if not token:
        raise ValueError("No Slack token configured (set SLACK_USER_TOKEN or SLACK_BOT_TOKEN)")
    return SlackClient(
        token,
        token_type,
        team_id=config.team_id,
        channel_ids=config.channel_ids,
        retry_config=config.retry_config(),
        timeout=config.timeout,
    )


def create_server(
    config: Optional[ServerConfig] = None,
    client: Optional[SlackClient] = None,
) -> FastMCP:
    """Create the FastMCP server with every enabled Slack tool registered.

    Args:
        config: Server configuration (defaults to the global config)
        client: Slack client (built from *config* when omitted)
    """
    config = config or get_config()
    client = client or build_client(config)

    mcp = FastMCP(SERVER_DISPLAY_NAME, instructions=_INSTRUCTIONS)

    register_channel_tools(mcp, config, client)
    register_message_tools(mcp, config, client)
    register_user_tools(mcp, config, client)
    register_canvas_tools(mcp, config, client)

    if config.disabled_tools:
        logger.info("Disabled tools: %s", ", ".join(sorted(config.disabled_tools)))

    return mcp
