"""Request-scoped context for correlation and client identifiers.

Values live in ``contextvars`` so each asyncio task (one per MCP tool call)
sees its own identifiers without any shared mutable state.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_client_id: ContextVar[str] = ContextVar("client_id", default="anonymous")


def get_correlation_id() -> str:
    """Return the correlation id of the current request, or ``""``."""
    return _correlation_id.get()


def get_client_id() -> str:
    return _client_id.get()


def generate_correlation_id(prefix: str = "req") -> str:
    """Generate a new correlation id like ``tool_1a2b3c4d5e6f``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@contextmanager
def sync_request_context(
    correlation_id: Optional[str] = None,
    client_id: Optional[str] = None,
) -> Iterator[str]:
    """Bind correlation/client ids for the duration of the block.

    Args:
        correlation_id: Id to bind (generated when omitted)
        client_id: Optional client identifier

    Yields:
        The bound correlation id
    """
    corr_id = correlation_id or generate_correlation_id()
    corr_token = _correlation_id.set(corr_id)
    client_token = _client_id.set(client_id) if client_id else None
    try:
        yield corr_id
    finally:
        _correlation_id.reset(corr_token)
        if client_token is not None:
            _client_id.reset(client_token)
