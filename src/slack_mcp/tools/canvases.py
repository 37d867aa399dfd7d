"""Canvas tools: listing, reading, editing and creating canvases."""

from typing import Any, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP

from slack_mcp.client import CanvasChange, SlackClient
from slack_mcp.config import ServerConfig
from slack_mcp.core.naming import canonical_tool
from slack_mcp.tools.common import run_slack_tool, tool_enabled, ts_to_iso

_CONTENT_OPERATIONS = {"insert_at_start", "insert_at_end", "replace"}


def canvas_summary(files: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "returned_count": len(files),
        "canvases": [
            {
                "canvas_id": f.get("id"),
                "title": f.get("title") or f.get("name"),
                "created": ts_to_iso(f.get("created")) if f.get("created") else None,
                "updated": ts_to_iso(f.get("updated")) if f.get("updated") else None,
                "permalink": f.get("permalink"),
            }
            for f in files
        ],
    }


def build_canvas_change(
    operation: str,
    markdown: Optional[str] = None,
    section_id: Optional[str] = None,
) -> CanvasChange:
    """Build the single change sent by ``slack_edit_canvas``.

    Markdown is only attached for operations that write content.
    """
    change: Dict[str, Any] = {"operation": operation}
    if section_id:
        change["section_id"] = section_id
    if markdown and operation in _CONTENT_OPERATIONS:
        change["document_content"] = {"type": "markdown", "markdown": markdown}
    return CanvasChange.model_validate(change)


def register_canvas_tools(mcp: FastMCP, config: ServerConfig, client: SlackClient) -> None:
    """Register canvas tools with the FastMCP server."""

    if tool_enabled(config, "slack_list_canvases"):

        @canonical_tool(mcp, canonical_name="slack_list_canvases")
        async def slack_list_canvases(limit: int = 100, cursor: Optional[str] = None) -> dict:
            """
            List canvases accessible to the authenticated token.

            Use the canvas_id (file ID starting with 'F') with the other canvas tools.

            Args:
                limit: Maximum number of canvases to return (default 100, max 100)
                cursor: Pagination cursor for next page of results
            """

            async def _list() -> dict:
                response = await client.list_canvases(limit, cursor)
                return {**response, "_summary": canvas_summary(response.get("files") or [])}

            return await run_slack_tool("slack_list_canvases", _list)

    if tool_enabled(config, "slack_read_canvas"):

        @canonical_tool(mcp, canonical_name="slack_read_canvas")
        async def slack_read_canvas(canvas_id: str) -> dict:
            """
            Read the full content of a canvas as HTML.

            Args:
                canvas_id: The canvas/file ID (starts with 'F', e.g. 'F0123CANVAS')
            """
            return await run_slack_tool("slack_read_canvas", lambda: client.read_canvas(canvas_id))

    if tool_enabled(config, "slack_edit_canvas"):

        @canonical_tool(mcp, canonical_name="slack_edit_canvas")
        async def slack_edit_canvas(
            canvas_id: str,
            operation: Literal["insert_at_start", "insert_at_end", "replace", "delete"],
            markdown: Optional[str] = None,
            section_id: Optional[str] = None,
        ) -> dict:
            """
            Edit a canvas by inserting, replacing, or deleting content.

            Content uses Slack's markdown format. Mentions use '![](#C123ABC)'
            for channels and '![](@U123ABC)' for users. Standalone canvases
            require a paid Slack plan.

            Args:
                canvas_id: The canvas/file ID (starts with 'F')
                operation: The edit operation to perform
                markdown: Markdown content for insert/replace operations
                section_id: Target section ID for replace/delete operations
            """

            async def _edit() -> dict:
                change = build_canvas_change(operation, markdown, section_id)
                return await client.edit_canvas(canvas_id, [change])

            return await run_slack_tool("slack_edit_canvas", _edit)

    if tool_enabled(config, "slack_create_canvas"):

        @canonical_tool(mcp, canonical_name="slack_create_canvas")
        async def slack_create_canvas(title: str, markdown: Optional[str] = None) -> dict:
            """
            Create a new standalone canvas (requires a paid Slack plan).

            Args:
                title: Title of the new canvas
                markdown: Initial content in Slack markdown format
            """
            return await run_slack_tool(
                "slack_create_canvas", lambda: client.create_canvas(title, markdown)
            )
