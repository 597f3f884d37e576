"""Radarcord stats client.

The client is framework agnostic: it reads the bot id, readiness and guild
count through a BotConnection, so the discord.py and hikari bindings are
thin adapters around this one implementation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Final, Self

import aiohttp

from radarcord.config import RadarcordConfig, ReviewsEndpoint
from radarcord.core.scheduler import AutopostHandle, IntervalScheduler
from radarcord.exceptions import RadarcordError
from radarcord.types.aliases import StatsPostCallback, TickErrorHook
from radarcord.types.models import Response, Review, StatsPostBody, StatsPostResult
from radarcord.types.protocols import BotConnection, HTTPClient
from radarcord.utils.http_client import AIOHTTPClient
from radarcord.utils.intervals import IntervalPreset, OverlapPolicy, resolve_interval
from radarcord.utils.sanitization import sanitize_exception
from radarcord.utils.status import is_ok

logger = logging.getLogger(__name__)

STATS_POSTED_MESSAGE: Final[str] = "Stats posted successfully!"
NOT_READY_MESSAGE: Final[str] = "The client is not ready, please try this again in your ready event!"


class RadarcordClient:
    """Posts guild/shard statistics to Radarcord and fetches reviews.

    The connection object is owned by the caller; the client never starts
    or closes it. The HTTP client is closed by ``close()`` only when this
    client created it.

    Example:
        >>> radar = RadarcordClient(connection, "my-radarcord-token")
        >>> result = await radar.post_stats()
        >>> handle = await radar.autopost_stats(interval=IntervalPreset.SAFE)
    """

    default_reviews_endpoint: ReviewsEndpoint = ReviewsEndpoint.BOT

    def __init__(
        self,
        connection: BotConnection,
        authorization: str | None = None,
        *,
        config: RadarcordConfig | None = None,
        http_client: HTTPClient | None = None,
    ) -> None:
        """Initialize the stats client.

        Args:
            connection: Connected bot, adapted to the BotConnection protocol
            authorization: Radarcord API token, falls back to ``config.token``
            config: Client settings, defaults are used when omitted
            http_client: HTTP implementation, an aiohttp client is created lazily when omitted

        Raises:
            TypeError: If connection does not implement BotConnection
            ValueError: If no token is given either directly or through config
        """
        if not isinstance(connection, BotConnection):
            raise TypeError(f"Expected a BotConnection, got {type(connection).__name__} instead.")
        self.config: RadarcordConfig = config or RadarcordConfig()
        token = authorization if authorization is not None else self.config.token_value()
        if not token:
            raise ValueError("A Radarcord API token is required")

        self.connection: BotConnection = connection
        self.authorization: str = token
        self._http: HTTPClient | None = http_client
        self._owns_http: bool = http_client is None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} api_root={self.config.api_root!r}>"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    @property
    def http(self) -> HTTPClient:
        """HTTP client used for API calls."""
        if self._http is None:
            self._http = AIOHTTPClient(timeout_seconds=self.config.request_timeout)
        return self._http

    @property
    def reviews_endpoint(self) -> ReviewsEndpoint:
        """Reviews path shape: configured value or the binding default."""
        return self.config.reviews_endpoint or self.default_reviews_endpoint

    async def close(self) -> None:
        """Release the HTTP client if this client created it."""
        if self._http is not None and self._owns_http:
            await self._http.close()
            self._http = None

    def is_ready(self) -> bool:
        """Whether the bot is ready and exposes its id."""
        return self.connection.is_ready() and self.connection.bot_id() is not None

    def _require_bot_id(self) -> str:
        if not self.connection.is_ready():
            raise RadarcordError(NOT_READY_MESSAGE)
        bot_id = self.connection.bot_id()
        if bot_id is None:
            raise RadarcordError(NOT_READY_MESSAGE)
        return str(bot_id)

    def stats_url(self, bot_id: str) -> str:
        """URL stats are posted to."""
        return f"{self.config.api_root}/bot/{bot_id}/stats"

    def reviews_url(self, bot_id: str) -> str:
        """URL reviews are fetched from."""
        return f"{self.config.api_root}{self.reviews_endpoint.path(bot_id)}"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": self.authorization}

    async def _send(self, method: str, url: str, payload: Mapping[str, object] | None = None) -> Response:
        try:
            if method == "POST":
                response = await self.http.post(url, payload or {}, headers=self._headers())
            else:
                response = await self.http.get(url, headers=self._headers())
        except (aiohttp.ClientError, TimeoutError, asyncio.TimeoutError, ValueError, OSError) as exc:
            raise RadarcordError(f"Request failed: {sanitize_exception(exc)}", context={"url": url}) from exc

        if not is_ok(response.status):
            logger.warning("%s %s answered %d", method, url, response.status)
            raise RadarcordError.from_status(response.status, response.text)
        return response

    async def post_stats(self, shard_count: int = 1) -> StatsPostResult:
        """Post stats to Radarcord once.

        Use ``autopost_stats`` to have the posts sent automatically over an interval.

        Args:
            shard_count: How many shards the bot has. Defaults to 1.

        Returns:
            Result of the post

        Raises:
            RadarcordError: If the bot is not ready, the request fails or the API answers non-2xx
        """
        bot_id = self._require_bot_id()
        guild_count = self.connection.guild_count()
        payload = {"guilds": guild_count, "shards": shard_count}

        response = await self._send("POST", self.stats_url(bot_id), payload)
        logger.info("Posted stats for %s (guilds=%d, shards=%d)", bot_id, guild_count, shard_count)

        return StatsPostResult(
            status_code=response.status,
            body=StatsPostBody.from_payload(response.body),
            message=STATS_POSTED_MESSAGE,
        )

    async def post_with_callback(self, callback: StatsPostCallback | None, shard_count: int = 1) -> StatsPostResult:
        """Post stats, then run a callback with the result.

        Failures raised by the callback are not caught.

        Args:
            callback: Sync or async callable receiving the post result
            shard_count: How many shards the bot has. Defaults to 1.

        Returns:
            Result of the post
        """
        result = await self.post_stats(shard_count)

        if callable(callback):
            outcome = callback(result)
            if inspect.isawaitable(outcome):
                await outcome

        return result

    async def autopost_stats(
        self,
        shard_count: int = 1,
        interval: IntervalPreset | float | None = None,
        *,
        overlap: OverlapPolicy | None = None,
        on_error: TickErrorHook | None = None,
    ) -> AutopostHandle:
        """Post stats now, then keep posting every ``interval`` seconds.

        The first post is awaited and its failure propagates; later posts
        run in the background and their failures are logged (and handed
        to ``on_error``).

        Args:
            shard_count: How many shards the bot has. Defaults to 1.
            interval: Preset or seconds between posts, defaults to the configured interval
            overlap: Tick overlap policy, defaults to the configured policy
            on_error: Hook receiving failures of background posts

        Returns:
            Handle used to stop the repeating poster
        """
        seconds = self._interval_seconds(interval)
        _ = await self.post_stats(shard_count)
        return self._schedule(lambda: self.post_stats(shard_count), seconds, overlap, on_error, "autopost_stats")

    async def autopost_with_callback(
        self,
        callback: StatsPostCallback | None,
        shard_count: int = 1,
        interval: IntervalPreset | float | None = None,
        *,
        overlap: OverlapPolicy | None = None,
        on_error: TickErrorHook | None = None,
    ) -> AutopostHandle:
        """Autopost stats and run a callback every time a post completes.

        Args:
            callback: Sync or async callable receiving each post result
            shard_count: How many shards the bot has. Defaults to 1.
            interval: Preset or seconds between posts, defaults to the configured interval
            overlap: Tick overlap policy, defaults to the configured policy
            on_error: Hook receiving failures of background posts or callbacks

        Returns:
            Handle used to stop the repeating poster
        """
        seconds = self._interval_seconds(interval)
        _ = await self.post_with_callback(callback, shard_count)
        return self._schedule(
            lambda: self.post_with_callback(callback, shard_count),
            seconds,
            overlap,
            on_error,
            "autopost_with_callback",
        )

    def _interval_seconds(self, interval: IntervalPreset | float | None) -> float:
        if interval is None:
            return self.config.interval_seconds
        return resolve_interval(interval)

    def _schedule(
        self,
        action: Callable[[], Awaitable[object]],
        seconds: float,
        overlap: OverlapPolicy | None,
        on_error: TickErrorHook | None,
        name: str,
    ) -> AutopostHandle:
        scheduler = IntervalScheduler(
            action,
            seconds,
            overlap=overlap or self.config.overlap_policy,
            on_error=on_error,
            name=name,
        )
        return scheduler.start()

    async def get_reviews(self) -> list[Review]:
        """Get all reviews the bot has, if any.

        Returns:
            Parsed reviews, in the order the API returned them

        Raises:
            RadarcordError: If the bot is not ready, the request fails, the API
                answers non-2xx, or the payload has no ``reviews`` list or a
                malformed review
        """
        bot_id = self._require_bot_id()
        response = await self._send("GET", self.reviews_url(bot_id))

        if "reviews" not in response.body:
            raise RadarcordError("Malformed reviews payload: missing 'reviews'")
        raw_reviews = response.body["reviews"]
        if not isinstance(raw_reviews, list):
            raise RadarcordError(f"Malformed reviews payload: expected a list, got {type(raw_reviews).__name__}")

        reviews: list[Review] = []
        for raw in raw_reviews:  # pyright: ignore[reportUnknownVariableType]
            if not isinstance(raw, Mapping):
                raise RadarcordError(f"Malformed review payload: expected an object, got {raw!r}")
            reviews.append(Review.from_payload(raw))  # pyright: ignore[reportUnknownArgumentType]

        logger.debug("Fetched %d reviews for %s", len(reviews), bot_id)
        return reviews
