"""Tests for tool registration and the response envelope produced by tools."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from slack_mcp.client import SlackClient
from slack_mcp.config import ServerConfig
from slack_mcp.core.errors import SlackRateLimitError, SlackTransportError
from slack_mcp.server import create_server
from slack_mcp.tools import TOOL_NAMES
from slack_mcp.tools.canvases import build_canvas_change, canvas_summary
from slack_mcp.tools.channels import history_time_range, thread_info
from slack_mcp.tools.common import run_slack_tool, ts_to_iso
from slack_mcp.tools.messages import search_summary


@pytest.fixture
def test_config():
    return ServerConfig(team_id="T123", bot_token="xoxb-test", log_level="WARNING")


@pytest.fixture
def slack_client():
    return MagicMock(spec=SlackClient)


@pytest.fixture
def mcp_server(test_config, slack_client):
    return create_server(test_config, slack_client)


async def call_tool(server, name, **arguments):
    return await server._tool_manager._tools[name].fn(**arguments)


class TestToolRegistration:
    """Tests for tool registration on the FastMCP server."""

    def test_all_tools_registered(self, mcp_server):
        """Every slack_* tool is registered under its canonical name."""
        assert set(mcp_server._tool_manager._tools) == set(TOOL_NAMES)

    def test_server_name(self, mcp_server):
        assert mcp_server.name == "Slack MCP Server"

    def test_disabled_tools_are_skipped(self, slack_client):
        """Tools listed in disabled_tools are never registered."""
        config = ServerConfig(
            team_id="T123",
            bot_token="xoxb-test",
            disabled_tools=["slack_post_message", "slack_create_canvas"],
        )

        server = create_server(config, slack_client)

        tools = server._tool_manager._tools
        assert "slack_post_message" not in tools
        assert "slack_create_canvas" not in tools
        assert len(tools) == len(TOOL_NAMES) - 2

    def test_server_requires_token(self):
        with pytest.raises(ValueError):
            create_server(ServerConfig(team_id="T123"))


class TestToolResponses:
    """Tests for envelopes returned by the registered tools."""

    @pytest.mark.asyncio
    async def test_history_adds_context_and_time_range(self, mcp_server, slack_client):
        slack_client.get_channel_history = AsyncMock(
            return_value={
                "ok": True,
                "messages": [{"ts": "1700000100.000000"}, {"ts": "1700000000.000000"}],
                "has_more": True,
                "response_metadata": {"next_cursor": "bmV4dA=="},
            }
        )

        result = await call_tool(mcp_server, "slack_get_channel_history", channel_id="C1")

        assert result["success"] is True
        slack_client.get_channel_history.assert_awaited_once_with("C1", 50, None, None, None, None)
        data = result["data"]
        assert data["_request_context"]["channel_id"] == "C1"
        assert data["_request_context"]["limit"] == 50
        assert data["_time_range"] == {
            "oldest_message_ts": "1700000000.000000",
            "newest_message_ts": "1700000100.000000",
            "oldest_message_time": "2023-11-14T22:13:20.000Z",
            "newest_message_time": "2023-11-14T22:15:00.000Z",
        }
        assert result["meta"]["pagination"] == {"next_cursor": "bmV4dA==", "has_more": True}

    @pytest.mark.asyncio
    async def test_slack_ok_false_becomes_warning(self, mcp_server, slack_client):
        slack_client.post_message = AsyncMock(return_value={"ok": False, "error": "not_in_channel"})

        result = await call_tool(mcp_server, "slack_post_message", channel_id="C1", text="hi")

        assert result["success"] is True
        assert result["data"]["error"] == "not_in_channel"
        assert result["meta"]["warnings"] == ["Slack API returned ok=false: not_in_channel"]

    @pytest.mark.asyncio
    async def test_rate_limit_maps_to_error_envelope(self, mcp_server, slack_client):
        slack_client.get_users = AsyncMock(side_effect=SlackRateLimitError(retry_after_seconds=10))

        result = await call_tool(mcp_server, "slack_get_users")

        assert result["success"] is False
        assert result["data"]["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert result["data"]["details"]["tool"] == "slack_get_users"
        assert result["data"]["details"]["retry_after_seconds"] == 10

    @pytest.mark.asyncio
    async def test_not_found_maps_to_error_envelope(self, mcp_server, slack_client):
        slack_client.get_user_profile = AsyncMock(side_effect=SlackTransportError("missing", status=404))

        result = await call_tool(mcp_server, "slack_get_user_profile", user_id="U1")

        assert result["data"]["error_code"] == "NOT_FOUND"
        assert result["error"] == "missing"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, mcp_server, slack_client):
        slack_client.list_canvases = AsyncMock(side_effect=KeyError("files"))

        result = await call_tool(mcp_server, "slack_list_canvases")

        assert result["success"] is False
        assert result["data"]["error_code"] == "INTERNAL_ERROR"
        assert result["data"]["details"]["error_name"] == "KeyError"

    @pytest.mark.asyncio
    async def test_edit_canvas_sends_single_change(self, mcp_server, slack_client):
        slack_client.edit_canvas = AsyncMock(return_value={"ok": True})

        result = await call_tool(
            mcp_server,
            "slack_edit_canvas",
            canvas_id="F1",
            operation="insert_at_end",
            markdown="- item",
        )

        assert result["success"] is True
        canvas_id, changes = slack_client.edit_canvas.await_args.args
        assert canvas_id == "F1"
        assert changes[0].model_dump(mode="json", exclude_none=True) == {
            "operation": "insert_at_end",
            "document_content": {"type": "markdown", "markdown": "- item"},
        }

    @pytest.mark.asyncio
    async def test_edit_canvas_without_markdown_is_validation_error(self, mcp_server, slack_client):
        slack_client.edit_canvas = AsyncMock(return_value={"ok": True})

        result = await call_tool(mcp_server, "slack_edit_canvas", canvas_id="F1", operation="replace")

        assert result["success"] is False
        assert result["data"]["error_code"] == "VALIDATION_ERROR"
        slack_client.edit_canvas.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_adds_summary(self, mcp_server, slack_client):
        slack_client.search_messages = AsyncMock(
            return_value={
                "ok": True,
                "messages": {
                    "total": 12,
                    "matches": [
                        {"ts": "1700000100.0", "channel": {"name": "general"}},
                        {"ts": "1700000000.0", "channel": {"name": "random"}},
                        {"ts": "1699999900.0", "channel": {"name": "general"}},
                    ],
                },
            }
        )

        result = await call_tool(mcp_server, "slack_search_messages", query="deploy in:#general")

        summary = result["data"]["_search_summary"]
        assert summary["total_matches"] == 12
        assert summary["returned_count"] == 3
        assert summary["channels_in_results"] == ["general", "random"]
        assert result["data"]["_request_context"]["sort"] == "timestamp"


class TestToolHelpers:
    def test_ts_to_iso(self):
        assert ts_to_iso("1700000000.123456") == "2023-11-14T22:13:20.123Z"
        assert ts_to_iso(0) == "1970-01-01T00:00:00.000Z"
        assert ts_to_iso(None) is None
        assert ts_to_iso("not-a-ts") is None

    def test_history_time_range_empty(self):
        assert history_time_range([]) is None

    def test_thread_info(self):
        messages = [{"ts": "1.0"}, {"ts": "2.0"}, {"ts": "3.0"}]
        info = thread_info(messages)
        assert info["reply_count"] == 2
        assert info["parent_ts"] == "1.0"
        assert info["latest_reply_ts"] == "3.0"

    def test_search_summary_without_matches(self):
        assert search_summary({}) == {"total_matches": 0, "returned_count": 0, "channels_in_results": []}

    def test_canvas_summary_falls_back_to_name(self):
        summary = canvas_summary([{"id": "F1", "name": "notes"}])
        assert summary["canvases"][0]["title"] == "notes"
        assert summary["canvases"][0]["created"] is None

    def test_build_canvas_change_drops_markdown_for_delete(self):
        change = build_canvas_change("delete", markdown="ignored", section_id="temp:C:1")
        assert change.document_content is None
        assert change.section_id == "temp:C:1"

    @pytest.mark.asyncio
    async def test_run_slack_tool_success_envelope(self):
        async def op():
            return {"ok": True, "members": []}

        result = await run_slack_tool("slack_get_users", op)

        assert result["success"] is True
        assert result["data"] == {"ok": True, "members": []}
        assert result["error"] is None
        assert result["meta"]["version"] == "response-v2"
