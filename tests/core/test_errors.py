"""Tests for Slack error classes and their mapping to tool error responses."""

import pytest

from slack_mcp.core.errors import (
    SlackError,
    SlackNetworkError,
    SlackRateLimitError,
    SlackTransportError,
)
from slack_mcp.core.errors.base import classify_error_code, error_to_response
from slack_mcp.core.responses.types import ErrorCode, ErrorType


class TestSlackErrors:
    """The failure taxonomy itself."""

    def test_rate_limit_is_a_transport_failure(self):
        error = SlackRateLimitError(retry_after_seconds=7)
        assert isinstance(error, SlackTransportError)
        assert isinstance(error, SlackError)
        assert error.status == 429
        assert error.retry_after_seconds == 7

    def test_network_error_keeps_original(self):
        cause = OSError("connection reset")
        error = SlackNetworkError("Slack API request failed", original_error=cause)
        assert error.status is None
        assert error.original_error is cause

    def test_url_comes_from_details(self):
        error = SlackTransportError("x", status=500, details={"url": "https://slack.com/api/users.list"})
        assert error.url == "https://slack.com/api/users.list"
        assert SlackTransportError("x").url is None


class TestErrorToResponse:
    """Mapping of Slack failures to response-v2 error envelopes."""

    @pytest.mark.parametrize(
        "status,code,error_type",
        [
            (400, ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
            (401, ErrorCode.UNAUTHORIZED, ErrorType.AUTHENTICATION),
            (403, ErrorCode.FORBIDDEN, ErrorType.AUTHORIZATION),
            (404, ErrorCode.NOT_FOUND, ErrorType.NOT_FOUND),
            (410, ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION),
            (502, ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
            (None, ErrorCode.UNAVAILABLE, ErrorType.UNAVAILABLE),
        ],
    )
    def test_transport_status_mapping(self, status, code, error_type):
        assert classify_error_code(SlackTransportError("x", status=status)) == (code, error_type)

    def test_rate_limit_response(self):
        response = error_to_response(
            SlackRateLimitError(retry_after_seconds=30, details={"url": "https://slack.com/api/chat.postMessage"})
        )

        assert response["success"] is False
        assert response["error"] == "Slack API rate limited"
        assert response["data"]["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert response["data"]["error_type"] == "rate_limit"
        details = response["data"]["details"]
        assert details["status"] == 429
        assert details["retry_after_seconds"] == 30
        assert details["url"] == "https://slack.com/api/chat.postMessage"

    def test_network_error_is_unavailable(self):
        response = error_to_response(SlackNetworkError("timed out"))
        assert response["data"]["error_code"] == "UNAVAILABLE"
        assert "status" not in response["data"].get("details", {})

    def test_caller_details_are_merged(self):
        response = error_to_response(
            SlackTransportError("gone", status=404, details={"url": "u"}),
            details={"tool": "slack_read_canvas"},
        )
        assert response["data"]["details"] == {"url": "u", "status": 404, "tool": "slack_read_canvas"}

    def test_unknown_exception_returns_none(self):
        assert error_to_response(ValueError("nope")) is None
        assert classify_error_code(RuntimeError("nope")) is None
