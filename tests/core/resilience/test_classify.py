"""Tests for Slack failure classification."""

import httpx
import pytest

from slack_mcp.core.errors import (
    SlackNetworkError,
    SlackRateLimitError,
    SlackTransportError,
)
from slack_mcp.core.resilience import (
    FailureKind,
    classify_failure,
    failure_status,
    parse_retry_after,
    raise_for_slack_status,
    retry_after_hint,
)


class TestParseRetryAfter:
    """Retry-After parsing normalizes bad hints to None."""

    def test_integer_seconds(self):
        assert parse_retry_after({"Retry-After": "30"}) == 30.0

    def test_header_name_is_case_insensitive(self):
        assert parse_retry_after({"retry-after": "2"}) == 2.0
        assert parse_retry_after(httpx.Headers({"RETRY-AFTER": "3"})) == 3.0

    def test_fractional_seconds(self):
        assert parse_retry_after({"Retry-After": "1.5"}) == 1.5

    def test_zero_is_a_valid_hint(self):
        assert parse_retry_after({"Retry-After": "0"}) == 0.0

    @pytest.mark.parametrize("value", ["", "   ", "soon", "-1", "nan", "inf", "Wed, 21 Oct 2015 07:28:00 GMT"])
    def test_unusable_values_yield_none(self, value):
        assert parse_retry_after({"Retry-After": value}) is None

    def test_missing_header(self):
        assert parse_retry_after({}) is None


class TestRaiseForSlackStatus:
    """Non-2xx responses become classified failures."""

    def test_success_does_not_raise(self, make_response):
        raise_for_slack_status(make_response(200, json={"ok": True}), "https://slack.com/api/x")

    def test_429_with_hint(self, make_response):
        response = make_response(429, headers={"Retry-After": "2"})
        with pytest.raises(SlackRateLimitError) as exc_info:
            raise_for_slack_status(response, "https://slack.com/api/chat.postMessage")

        error = exc_info.value
        assert error.status == 429
        assert error.retry_after_seconds == 2.0
        assert error.url == "https://slack.com/api/chat.postMessage"

    def test_429_without_hint(self, make_response):
        with pytest.raises(SlackRateLimitError) as exc_info:
            raise_for_slack_status(make_response(429), "https://slack.com/api/x")
        assert exc_info.value.retry_after_seconds is None

    def test_server_error(self, make_response):
        with pytest.raises(SlackTransportError) as exc_info:
            raise_for_slack_status(make_response(503), "https://slack.com/api/x", method="GET")

        error = exc_info.value
        assert not isinstance(error, SlackRateLimitError)
        assert error.status == 503
        assert "503" in str(error)
        assert error.details == {"url": "https://slack.com/api/x", "method": "GET"}

    def test_custom_messages(self, make_response):
        with pytest.raises(SlackTransportError) as exc_info:
            raise_for_slack_status(
                make_response(404),
                "https://files.slack.com/x",
                error_message="Failed to download canvas: {status}",
            )
        assert str(exc_info.value) == "Failed to download canvas: 404"

        with pytest.raises(SlackRateLimitError) as exc_info:
            raise_for_slack_status(
                make_response(429),
                "https://files.slack.com/x",
                rate_limit_message="Slack file download rate limited",
            )
        assert str(exc_info.value) == "Slack file download rate limited"


class TestClassifyFailure:
    """Each failure maps to exactly one kind."""

    def test_rate_limit(self):
        assert classify_failure(SlackRateLimitError(retry_after_seconds=1)) is FailureKind.RATE_LIMITED

    def test_transport(self):
        assert classify_failure(SlackTransportError("boom", status=500)) is FailureKind.TRANSPORT

    def test_network(self):
        assert classify_failure(SlackNetworkError("no route")) is FailureKind.NETWORK

    def test_raw_httpx_request_error_is_network(self):
        assert classify_failure(httpx.ConnectError("refused")) is FailureKind.NETWORK

    def test_httpx_status_error(self, make_response):
        response = make_response(429, headers={"Retry-After": "4"})
        error = httpx.HTTPStatusError("429", request=response.request, response=response)
        assert classify_failure(error) is FailureKind.RATE_LIMITED
        assert retry_after_hint(error) == 4.0

        response = make_response(502)
        error = httpx.HTTPStatusError("502", request=response.request, response=response)
        assert classify_failure(error) is FailureKind.TRANSPORT
        assert failure_status(error) == 502

    def test_unrelated_exception_is_unclassified(self):
        assert classify_failure(KeyError("ts")) is None
        assert classify_failure(ValueError("bad json")) is None
