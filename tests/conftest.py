"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest

from radarcord.core.client import RadarcordClient
from radarcord.types.models import StatsPostBody, StatsPostResult
from radarcord.utils.logging import clear_correlation_id
from tests.fixtures.fakes import FakeConnection, FakeHTTPClient, FakeMessaging


@pytest.fixture
def connection() -> FakeConnection:
    """Ready bot connection with id 1234567890 in 42 guilds."""
    return FakeConnection()


@pytest.fixture
def http_client() -> FakeHTTPClient:
    """HTTP client answering 200 ``{"message": "ok"}``."""
    return FakeHTTPClient()


@pytest.fixture
async def client(connection: FakeConnection, http_client: FakeHTTPClient) -> AsyncGenerator[RadarcordClient]:
    """Stats client wired to the fake connection and HTTP client."""
    radar = RadarcordClient(connection, "test-token", http_client=http_client)
    yield radar
    await radar.close()


@pytest.fixture
def messaging() -> FakeMessaging:
    """Messaging backend without any known channel."""
    return FakeMessaging()


@pytest.fixture
def post_result() -> StatsPostResult:
    """A successful stats post result."""
    return StatsPostResult(
        status_code=200,
        body=StatsPostBody(message="ok"),
        message="Stats posted successfully!",
    )


@pytest.fixture(autouse=True)
def reset_correlation_id() -> Generator[None]:
    """Keep correlation ids from leaking between tests."""
    yield
    clear_correlation_id()
