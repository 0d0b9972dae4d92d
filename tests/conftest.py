"""Shared test fixtures for chatrelay backend tests.

Every test gets its own app built by ``create_app``: a freshly seeded
registry and an empty connection set, so tests are fully isolated.
"""

import asyncio
from collections.abc import AsyncGenerator, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient
from starlette.websockets import WebSocketState

from backend.app.config import Settings
from backend.app.main import create_app
from backend.app.services.channel_registry import ChannelNamePolicy, ChannelRegistry

# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def registry() -> ChannelRegistry:
    """Strict registry seeded like the running app: general=1, random=2."""
    return ChannelRegistry(policy=ChannelNamePolicy(), seed=["general", "random"])


@pytest.fixture
def empty_registry() -> ChannelRegistry:
    return ChannelRegistry()


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to a fresh app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def ws_client(app: FastAPI) -> Iterator[TestClient]:
    """Synchronous test client with WebSocket support."""
    with TestClient(app) as tc:
        yield tc


# ---------------------------------------------------------------------------
# Fake sockets
# ---------------------------------------------------------------------------


class FakeWebSocket:
    """Minimal stand-in for starlette's WebSocket."""

    def __init__(self, *, fail: bool = False, delay: float = 0.0) -> None:
        self.client_state = WebSocketState.CONNECTING
        self.sent: list[str] = []
        self.closed_with: int | None = None
        self._fail = fail
        self._delay = delay

    async def accept(self) -> None:
        self.client_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = code
        self.client_state = WebSocketState.DISCONNECTED


@pytest.fixture
def make_ws() -> type[FakeWebSocket]:
    """Factory for fake sockets: ``make_ws()``, ``make_ws(fail=True)``."""
    return FakeWebSocket
