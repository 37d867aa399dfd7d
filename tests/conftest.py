"""Shared fixtures for slack-mcp tests.

Provides a recording fake sleep, a seeded RNG, an httpx response builder
and a patched ``httpx.AsyncClient`` whose ``get``/``post`` can be scripted.
"""

import random
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, patch

import httpx
import pytest


class FakeSleep:
    """Async sleep replacement that records requested durations."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def make_response():
    """Factory for real ``httpx.Response`` objects bound to a request."""

    def _make(
        status_code: int = 200,
        *,
        json: Optional[Any] = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        url: str = "https://slack.com/api/test.method",
        method: str = "GET",
    ) -> httpx.Response:
        request = httpx.Request(method, url)
        if json is not None:
            return httpx.Response(status_code, json=json, headers=headers, request=request)
        return httpx.Response(status_code, text=text or "", headers=headers, request=request)

    return _make


@pytest.fixture
def mock_http():
    """Patch ``httpx.AsyncClient`` and yield the client mock used inside ``async with``."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock()
        mock_client.post = AsyncMock()
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=None)
        mock_client_class.return_value = mock_client
        mock_client.client_class = mock_client_class
        yield mock_client
