"""Shared pytest fixtures for the Actor Runner test suite."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from actor_runner.platforms.apify import ApifyAdapter
from actor_runner.platforms.base import PlatformAdapter
from actor_runner.platforms.transport import HttpTransport

API_BASE = "https://api.test/v2"
TOKEN = "apify_api_test_token"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is awaited."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------


@pytest.fixture()
def platform() -> MagicMock:
    """A ``PlatformAdapter`` mock whose async methods are ``AsyncMock``s."""
    mock = MagicMock(spec=PlatformAdapter)
    mock.name = "mock"
    return mock


@pytest.fixture()
def make_apify() -> Callable[[Handler], ApifyAdapter]:
    """Return a builder for ``ApifyAdapter``s answered by an ``httpx.MockTransport``."""

    def _build(handler: Handler) -> ApifyAdapter:
        transport = HttpTransport(API_BASE, TOKEN, transport=httpx.MockTransport(handler))
        return ApifyAdapter(transport)

    return _build
