"""Turn raw HTTP outcomes into classified Slack failures.

``raise_for_slack_status`` is the single place a non-2xx response becomes a
``SlackRateLimitError`` or ``SlackTransportError``; ``classify_failure``
maps any raised exception back to a ``FailureKind`` (or None when it is not
a Slack failure at all).
"""

import math
from typing import Any, Mapping, Optional, Union

import httpx

from slack_mcp.core.errors import (
    SlackNetworkError,
    SlackRateLimitError,
    SlackTransportError,
)
from slack_mcp.core.resilience.models import FailureKind

HeadersLike = Union[httpx.Headers, Mapping[str, str]]

DEFAULT_ERROR_MESSAGE = "Slack API HTTP error: {status} {reason}"
DEFAULT_RATE_LIMIT_MESSAGE = "Slack API rate limited"


def parse_retry_after(headers: HeadersLike) -> Optional[float]:
    """Parse a ``Retry-After`` header into seconds.

    Only the delta-seconds form is understood. Missing, empty, negative or
    non-numeric values yield None.
    """
    raw = httpx.Headers(headers).get("retry-after")
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def raise_for_slack_status(
    response: httpx.Response,
    url: str,
    *,
    error_message: str = DEFAULT_ERROR_MESSAGE,
    rate_limit_message: str = DEFAULT_RATE_LIMIT_MESSAGE,
    **details: Any,
) -> None:
    """Raise the classified failure for a non-2xx *response*.

    Args:
        response: The HTTP response received from Slack.
        url: Request URL, recorded in the failure details.
        error_message: Template for non-429 failures; may use ``{status}``
            and ``{reason}``.
        rate_limit_message: Message for 429 failures.
        **details: Extra request context (Slack method, resource ids).

    Raises:
        SlackRateLimitError: For 429, carrying the parsed Retry-After hint.
        SlackTransportError: For any other non-2xx status.
    """
    if response.is_success:
        return

    context = {"url": url, **details}
    if response.status_code == 429:
        raise SlackRateLimitError(
            rate_limit_message,
            retry_after_seconds=parse_retry_after(response.headers),
            details=context,
        )
    raise SlackTransportError(
        error_message.format(status=response.status_code, reason=response.reason_phrase).rstrip(),
        status=response.status_code,
        details=context,
    )


def classify_failure(error: BaseException) -> Optional[FailureKind]:
    """Return the failure kind of *error*, or None if it is not classified."""
    if isinstance(error, SlackRateLimitError):
        return FailureKind.RATE_LIMITED
    if isinstance(error, SlackTransportError):
        return FailureKind.TRANSPORT
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 429:
            return FailureKind.RATE_LIMITED
        return FailureKind.TRANSPORT
    if isinstance(error, (SlackNetworkError, httpx.RequestError)):
        return FailureKind.NETWORK
    return None


def failure_status(error: BaseException) -> Optional[int]:
    """HTTP status carried by a transport failure, if any."""
    if isinstance(error, SlackTransportError):
        return error.status
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def retry_after_hint(error: BaseException) -> Optional[float]:
    """Server-provided wait for a rate-limited failure, if one was sent."""
    if isinstance(error, SlackRateLimitError):
        return error.retry_after_seconds
    if isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 429:
        return parse_retry_after(error.response.headers)
    return None


def failure_url(error: BaseException) -> Optional[str]:
    if isinstance(error, (SlackTransportError, SlackNetworkError)):
        return error.url
    if isinstance(error, (httpx.HTTPStatusError, httpx.RequestError)):
        try:
            return str(error.request.url)
        except RuntimeError:
            return None
    return None
