"""Unit tests for the Radarcord stats client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from radarcord.config import RadarcordConfig, ReviewsEndpoint
from radarcord.core.client import NOT_READY_MESSAGE, STATS_POSTED_MESSAGE, RadarcordClient
from radarcord.exceptions import RadarcordError
from radarcord.types.models import Review, StatsPostBody, StatsPostResult
from radarcord.utils.http_client import AIOHTTPClient
from radarcord.utils.intervals import IntervalPreset, OverlapPolicy
from tests.fixtures.fakes import FakeConnection, FakeHTTPClient


class TestConstruction:
    """Test client construction and configuration."""

    def test_requires_bot_connection(self, http_client: FakeHTTPClient) -> None:
        with pytest.raises(TypeError, match="BotConnection"):
            _ = RadarcordClient(object(), "token", http_client=http_client)  # pyright: ignore[reportArgumentType]

    def test_requires_token(self, connection: FakeConnection) -> None:
        with pytest.raises(ValueError, match="token"):
            _ = RadarcordClient(connection)

    def test_token_from_config(self, connection: FakeConnection) -> None:
        config = RadarcordConfig.model_validate({"token": "from-config"})
        radar = RadarcordClient(connection, config=config)
        assert radar.authorization == "from-config"

    def test_explicit_token_wins(self, connection: FakeConnection) -> None:
        config = RadarcordConfig.model_validate({"token": "from-config"})
        radar = RadarcordClient(connection, "explicit", config=config)
        assert radar.authorization == "explicit"

    def test_repr_hides_token(self, client: RadarcordClient) -> None:
        assert "test-token" not in repr(client)

    def test_urls(self, client: RadarcordClient) -> None:
        assert client.stats_url("99") == "https://radarcord.net/api/bot/99/stats"
        assert client.reviews_url("99") == "https://radarcord.net/api/bot/99"

    def test_reviews_endpoint_override(self, connection: FakeConnection, http_client: FakeHTTPClient) -> None:
        config = RadarcordConfig(reviews_endpoint=ReviewsEndpoint.REVIEWS, api_root="http://localhost:8080/api/")
        radar = RadarcordClient(connection, "t", config=config, http_client=http_client)
        assert radar.reviews_url("5") == "http://localhost:8080/api/bot/5/reviews"

    async def test_lazy_aiohttp_client(self, connection: FakeConnection) -> None:
        radar = RadarcordClient(connection, "t", config=RadarcordConfig(request_timeout=3))
        http = radar.http
        assert isinstance(http, AIOHTTPClient)
        assert radar.http is http
        await radar.close()

    async def test_close_leaves_injected_client_open(self, connection: FakeConnection) -> None:
        http_client = FakeHTTPClient()
        async with RadarcordClient(connection, "t", http_client=http_client):
            pass
        assert http_client.closed is False

    async def test_close_releases_owned_client(self, connection: FakeConnection) -> None:
        radar = RadarcordClient(connection, "t")
        owned = AsyncMock(spec=AIOHTTPClient)
        radar._http = owned  # pyright: ignore[reportPrivateUsage]  # simulate lazily created client
        await radar.close()
        owned.close.assert_awaited_once()


class TestReadiness:
    """Nothing is sent before the bot is ready and has an id."""

    @pytest.mark.parametrize(
        "connection",
        [FakeConnection(ready=False), FakeConnection(ready=True, bot_id=None)],
        ids=["not-ready", "no-id"],
    )
    async def test_not_ready_sends_nothing(self, connection: FakeConnection, http_client: FakeHTTPClient) -> None:
        radar = RadarcordClient(connection, "t", http_client=http_client)

        with pytest.raises(RadarcordError, match="not ready"):
            _ = await radar.post_stats()
        with pytest.raises(RadarcordError) as exc_info:
            _ = await radar.get_reviews()

        assert exc_info.value.message == NOT_READY_MESSAGE
        assert http_client.requests == []
        assert radar.is_ready() is False

    async def test_autopost_not_ready_schedules_nothing(
        self, connection: FakeConnection, http_client: FakeHTTPClient
    ) -> None:
        connection.ready = False
        radar = RadarcordClient(connection, "t", http_client=http_client)

        with pytest.raises(RadarcordError):
            _ = await radar.autopost_stats(interval=1)
        assert http_client.requests == []


class TestPostStats:
    """Test one-shot posting."""

    async def test_success(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        result = await client.post_stats()

        assert result == StatsPostResult(
            status_code=200,
            body=StatsPostBody(message="ok"),
            message=STATS_POSTED_MESSAGE,
        )
        [request] = http_client.requests
        assert request.method == "POST"
        assert request.url == "https://radarcord.net/api/bot/1234567890/stats"
        assert request.payload == {"guilds": 42, "shards": 1}
        assert request.headers == {"Authorization": "test-token"}

    async def test_shard_count_and_live_guild_count(
        self, client: RadarcordClient, connection: FakeConnection, http_client: FakeHTTPClient
    ) -> None:
        connection.guilds = 7
        _ = await client.post_stats(shard_count=4)
        assert http_client.requests[-1].payload == {"guilds": 7, "shards": 4}

    async def test_extra_body_keys_preserved(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.body = {"message": "ok", "rank": 3}
        result = await client.post_stats()
        assert result.body.extra == {"rank": 3}
        assert result.body.to_dict() == {"message": "ok", "rank": 3}

    async def test_server_error(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.status = 500
        http_client.body = {"error": "boom"}

        with pytest.raises(RadarcordError, match="500") as exc_info:
            _ = await client.post_stats()

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == '{"error": "boom"}'
        assert str(exc_info.value) == 'Request code 500: {"error": "boom"}'
        assert len(http_client.requests) == 1

    @pytest.mark.parametrize(
        "error",
        [aiohttp.ClientConnectionError("refused"), TimeoutError(), ValueError("Malformed URL")],
        ids=["connection", "timeout", "url"],
    )
    async def test_transport_errors_are_wrapped(
        self, client: RadarcordClient, http_client: FakeHTTPClient, error: BaseException
    ) -> None:
        http_client.error = error

        with pytest.raises(RadarcordError, match="Request failed") as exc_info:
            _ = await client.post_stats()

        assert exc_info.value.__cause__ is error


class TestPostWithCallback:
    """Test posting followed by a user callback."""

    async def test_sync_callback(self, client: RadarcordClient) -> None:
        seen: list[StatsPostResult] = []
        result = await client.post_with_callback(seen.append)
        assert seen == [result]

    async def test_async_callback_is_awaited(self, client: RadarcordClient) -> None:
        callback = AsyncMock(return_value=None)
        result = await client.post_with_callback(callback, shard_count=2)
        callback.assert_awaited_once_with(result)

    async def test_non_callable_is_ignored(self, client: RadarcordClient) -> None:
        result = await client.post_with_callback(None)
        assert result.status_code == 200

    async def test_callback_errors_propagate(self, client: RadarcordClient) -> None:
        def explode(_: StatsPostResult) -> None:
            raise RuntimeError("callback failed")

        with pytest.raises(RuntimeError, match="callback failed"):
            _ = await client.post_with_callback(explode)

    async def test_callback_not_called_on_failed_post(
        self, client: RadarcordClient, http_client: FakeHTTPClient
    ) -> None:
        http_client.status = 401
        callback = AsyncMock()
        with pytest.raises(RadarcordError):
            _ = await client.post_with_callback(callback)
        callback.assert_not_awaited()


class TestAutopost:
    """Test repeating posts."""

    async def test_first_post_is_immediate(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        handle = await client.autopost_stats(interval=IntervalPreset.SUPER_OMEGA_SAFE)
        try:
            assert len(http_client.requests) == 1
            assert handle.running
            assert handle.interval == 600.0
        finally:
            await handle.stop()
        assert not handle.running

    async def test_first_failure_propagates_and_nothing_is_scheduled(
        self, client: RadarcordClient, http_client: FakeHTTPClient
    ) -> None:
        http_client.status = 503
        with pytest.raises(RadarcordError, match="503"):
            _ = await client.autopost_stats(interval=0.01)
        await asyncio.sleep(0.05)
        assert len(http_client.requests) == 1

    async def test_invalid_interval_rejected_before_posting(
        self, client: RadarcordClient, http_client: FakeHTTPClient
    ) -> None:
        with pytest.raises(ValueError):
            _ = await client.autopost_stats(interval=0)
        with pytest.raises(TypeError):
            _ = await client.autopost_stats(interval="fast")  # pyright: ignore[reportArgumentType]
        assert http_client.requests == []

    async def test_configured_interval_is_default(self, connection: FakeConnection) -> None:
        config = RadarcordConfig.model_validate({"autopost_interval": "extra_safe"})
        radar = RadarcordClient(connection, "t", config=config, http_client=FakeHTTPClient())
        handle = await radar.autopost_stats()
        await handle.stop()
        assert handle.interval == 300.0

    async def test_repeats_and_stops(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        handle = await client.autopost_stats(shard_count=2, interval=0.02)
        await asyncio.sleep(0.11)
        await handle.stop()
        posted = len(http_client.requests)

        assert posted >= 3
        assert all(request.payload == {"guilds": 42, "shards": 2} for request in http_client.requests)
        await asyncio.sleep(0.05)
        assert len(http_client.requests) == posted

    async def test_tick_failures_do_not_stop_the_loop(
        self, client: RadarcordClient, http_client: FakeHTTPClient
    ) -> None:
        errors: list[BaseException] = []
        handle = await client.autopost_stats(interval=0.02, on_error=errors.append)
        http_client.status = 500
        await asyncio.sleep(0.09)
        await handle.stop()

        assert len(errors) >= 2
        assert all(isinstance(error, RadarcordError) for error in errors)

    async def test_autopost_with_callback_runs_callback_each_tick(self, client: RadarcordClient) -> None:
        seen: list[StatsPostResult] = []
        handle = await client.autopost_with_callback(seen.append, interval=0.02)
        await asyncio.sleep(0.09)
        await handle.stop()
        assert len(seen) >= 3

    async def test_skip_if_busy(self, connection: FakeConnection) -> None:
        http_client = FakeHTTPClient(delay=0.1)
        radar = RadarcordClient(connection, "t", http_client=http_client)

        handle = await radar.autopost_stats(interval=0.02, overlap=OverlapPolicy.SKIP_IF_BUSY)
        await asyncio.sleep(0.15)
        await handle.stop()

        assert handle.ticks >= 1
        assert handle.skipped >= 1

    @pytest.mark.slow
    async def test_posts_at_least_three_times_in_three_and_a_half_seconds(
        self, client: RadarcordClient, http_client: FakeHTTPClient
    ) -> None:
        handle = await client.autopost_stats(1, 1)
        await asyncio.sleep(3.5)
        await handle.stop()
        assert len(http_client.requests) >= 3


class TestGetReviews:
    """Test review fetching."""

    async def test_parses_reviews(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.body = {"reviews": [{"content": "nice", "stars": "5", "botid": "1", "userid": "2"}]}

        reviews = await client.get_reviews()

        assert reviews == [Review(content="nice", stars=5, bot_id="1", user_id="2")]
        [request] = http_client.requests
        assert request.method == "GET"
        assert request.url == "https://radarcord.net/api/bot/1234567890"
        assert request.headers == {"Authorization": "test-token"}

    async def test_numeric_ids_become_text(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.body = {"reviews": [{"content": 1, "stars": 4.0, "botid": 10, "userid": 20}]}
        [review] = await client.get_reviews()
        assert review == Review(content="1", stars=4, bot_id="10", user_id="20")

    async def test_no_reviews(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.body = {"reviews": []}
        assert await client.get_reviews() == []

    async def test_missing_reviews_key(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.body = {}
        with pytest.raises(RadarcordError, match="missing 'reviews'"):
            _ = await client.get_reviews()

    async def test_html_page_with_success_status(self, connection: FakeConnection) -> None:
        response = MagicMock()
        response.status = 200
        response.text = AsyncMock(return_value="<html>maintenance</html>")
        response.headers = {"Content-Type": "text/html"}
        request = MagicMock()
        request.__aenter__ = AsyncMock(return_value=response)
        request.__aexit__ = AsyncMock(return_value=False)
        session = MagicMock(spec=aiohttp.ClientSession)
        session.closed = False
        session.get.return_value = request

        radar = RadarcordClient(connection, "t", http_client=AIOHTTPClient(session=session))

        with pytest.raises(RadarcordError, match="Malformed reviews payload"):
            _ = await radar.get_reviews()

    async def test_not_found(self, client: RadarcordClient, http_client: FakeHTTPClient) -> None:
        http_client.status = 404
        with pytest.raises(RadarcordError, match="Request code 404"):
            _ = await client.get_reviews()

    @pytest.mark.parametrize(
        "body",
        [
            {"reviews": "none"},
            {"reviews": ["text"]},
            {"reviews": [{"content": "x", "stars": "five", "botid": "1", "userid": "2"}]},
            {"reviews": [{"content": "x", "botid": "1", "userid": "2"}]},
        ],
        ids=["not-a-list", "not-an-object", "bad-stars", "missing-stars"],
    )
    async def test_malformed_payload(
        self, client: RadarcordClient, http_client: FakeHTTPClient, body: dict[str, object]
    ) -> None:
        http_client.body = body
        with pytest.raises(RadarcordError, match="Malformed"):
            _ = await client.get_reviews()
