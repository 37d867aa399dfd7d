"""stdio transport."""

import logging

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


def run_stdio_server(mcp: FastMCP) -> None:
    """Serve *mcp* over stdin/stdout until the client disconnects."""
    logger.info("Starting Slack MCP Server with stdio transport")
    mcp.run(transport="stdio")
