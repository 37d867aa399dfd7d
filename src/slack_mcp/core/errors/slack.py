"""Slack API failure classes.

The three concrete classes form a closed taxonomy consumed by the retry
policy:

- ``SlackRateLimitError``: HTTP 429, optionally with a ``Retry-After`` hint
- ``SlackTransportError``: a response arrived but was not 2xx (or the status
  is unknown)
- ``SlackNetworkError``: no response at all (DNS, connect, read failures)
"""

from typing import Any, Mapping, Optional


class SlackError(Exception):
    """Base exception for Slack API failures.

    Attributes:
        message: Human-readable error description
        status: HTTP status code, when a response was received
        details: Request context (url, Slack method, resource identifiers)
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        self.message = message
        self.status = status
        self.details: dict[str, Any] = dict(details or {})
        super().__init__(message)

    @property
    def url(self) -> Optional[str]:
        return self.details.get("url")


class SlackTransportError(SlackError):
    """Raised when Slack answers with a non-2xx HTTP status."""


class SlackRateLimitError(SlackTransportError):
    """Raised when Slack answers 429 Too Many Requests.

    Always retryable. ``retry_after_seconds`` holds the parsed
    ``Retry-After`` header, or None when it was absent or unparseable.
    """

    def __init__(
        self,
        message: str = "Slack API rate limited",
        *,
        retry_after_seconds: Optional[float] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(message, status=429, details=details)


class SlackNetworkError(SlackError):
    """Raised when no HTTP response could be obtained."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Mapping[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        super().__init__(message, status=None, details=details)
