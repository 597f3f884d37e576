"""Unit tests for the discord.py binding."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from radarcord.config import ReviewsEndpoint
from radarcord.core.callbacks import default_embed
from radarcord.core.webhook import DiscordWebhookClient
from radarcord.exceptions import RadarcordError
from radarcord.ext.discordpy import (
    DiscordPyCallbacks,
    DiscordPyConnection,
    DiscordPyMessaging,
    RadarcordDiscordPyClient,
    to_discord_embed,
    to_send_kwargs,
)
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.models import StatsPostResult, WebhookData
from radarcord.types.protocols import BotConnection, MessagingBackend
from tests.fixtures.fakes import FakeHTTPClient


@pytest.fixture
def discord_client() -> MagicMock:
    """Ready discord.Client mock in three guilds."""
    client = MagicMock(spec=discord.Client)
    client.is_ready.return_value = True
    client.user = MagicMock(id=987654321012345678)
    client.application_id = 987654321012345678
    client.guilds = [MagicMock(), MagicMock(), MagicMock()]
    client.get_channel.return_value = None
    return client


def _not_found() -> discord.NotFound:
    return discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Channel")


class TestConnection:
    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError, match="discord.Client"):
            _ = DiscordPyConnection(object())  # pyright: ignore[reportArgumentType]

    def test_reads_client_state(self, discord_client: MagicMock) -> None:
        connection = DiscordPyConnection(discord_client)
        assert isinstance(connection, BotConnection)
        assert connection.is_ready()
        assert connection.bot_id() == "987654321012345678"
        assert connection.guild_count() == 3

    def test_falls_back_to_application_id(self, discord_client: MagicMock) -> None:
        discord_client.user = None
        discord_client.application_id = 42
        assert DiscordPyConnection(discord_client).bot_id() == "42"

    def test_no_id_yet(self, discord_client: MagicMock) -> None:
        discord_client.user = None
        discord_client.application_id = None
        assert DiscordPyConnection(discord_client).bot_id() is None


class TestMessaging:
    async def test_resolves_from_cache(self, discord_client: MagicMock) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        discord_client.get_channel.return_value = channel
        messaging = DiscordPyMessaging(discord_client)

        assert isinstance(messaging, MessagingBackend)
        assert await messaging.resolve_channel("1111") is channel
        discord_client.get_channel.assert_called_once_with(1111)

    async def test_falls_back_to_fetch(self, discord_client: MagicMock) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        discord_client.fetch_channel = AsyncMock(return_value=channel)

        assert await DiscordPyMessaging(discord_client).resolve_channel(1111) is channel
        discord_client.fetch_channel.assert_awaited_once_with(1111)

    async def test_unresolvable_channels(self, discord_client: MagicMock) -> None:
        discord_client.fetch_channel = AsyncMock(side_effect=_not_found())
        messaging = DiscordPyMessaging(discord_client)

        assert await messaging.resolve_channel("1111") is None
        assert await messaging.resolve_channel("bad-id") is None

    async def test_out_of_range_id_is_not_fetched(self, discord_client: MagicMock) -> None:
        discord_client.fetch_channel = AsyncMock()
        messaging = DiscordPyMessaging(discord_client)

        assert await messaging.resolve_channel("99999999999999999999999") is None
        discord_client.get_channel.assert_not_called()
        discord_client.fetch_channel.assert_not_awaited()

    def test_text_capability(self, discord_client: MagicMock) -> None:
        messaging = DiscordPyMessaging(discord_client)
        assert messaging.is_text_channel(MagicMock(spec=discord.TextChannel))
        assert not messaging.is_text_channel(MagicMock(spec=discord.CategoryChannel))

    async def test_send_message(self, discord_client: MagicMock) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()

        await DiscordPyMessaging(discord_client).send_message(channel, "hello")

        channel.send.assert_awaited_once_with(content="hello")

    async def test_send_message_to_non_text_channel(self, discord_client: MagicMock) -> None:
        with pytest.raises(TypeError):
            await DiscordPyMessaging(discord_client).send_message(MagicMock(spec=discord.CategoryChannel), "x")


class TestConversion:
    def test_radarcord_embed(self) -> None:
        embed = to_discord_embed(
            RadarcordEmbed(title="Stats", color=0x5865F2).add_field("Status Code", "200", inline=True)
        )
        assert isinstance(embed, discord.Embed)
        assert embed.title == "Stats"
        assert embed.fields[0].name == "Status Code"
        assert embed.fields[0].value == "200"
        assert embed.fields[0].inline is True

    def test_native_embed_passes_through(self) -> None:
        native = discord.Embed(title="native")
        assert to_discord_embed(native) is native

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError):
            _ = to_discord_embed(42)

    def test_send_kwargs(self) -> None:
        assert to_send_kwargs("hi") == {"content": "hi"}
        kwargs = to_send_kwargs({"content": "hi", "embed": {"title": "one"}})
        assert kwargs["content"] == "hi"
        [embed] = kwargs["embeds"]  # pyright: ignore[reportGeneralTypeIssues]
        assert isinstance(embed, discord.Embed)
        assert embed.title == "one"
        with pytest.raises(TypeError):
            _ = to_send_kwargs(3.14)


class TestRadarcordDiscordPyClient:
    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError, match="discord.Client"):
            _ = RadarcordDiscordPyClient(object(), "t")  # pyright: ignore[reportArgumentType]

    async def test_posts_stats_for_the_bot(self, discord_client: MagicMock) -> None:
        http_client = FakeHTTPClient()
        radar = RadarcordDiscordPyClient(discord_client, "token", http_client=http_client)

        result = await radar.post_stats(shard_count=2)

        assert result.status_code == 200
        [request] = http_client.requests
        assert request.url == "https://radarcord.net/api/bot/987654321012345678/stats"
        assert request.payload == {"guilds": 3, "shards": 2}

    async def test_not_ready(self, discord_client: MagicMock) -> None:
        discord_client.is_ready.return_value = False
        http_client = FakeHTTPClient()
        radar = RadarcordDiscordPyClient(discord_client, "token", http_client=http_client)

        with pytest.raises(RadarcordError, match="not ready"):
            _ = await radar.post_stats()
        assert http_client.requests == []

    def test_reviews_endpoint_defaults_to_bot(self, discord_client: MagicMock) -> None:
        radar = RadarcordDiscordPyClient(discord_client, "token", http_client=FakeHTTPClient())
        assert radar.reviews_endpoint is ReviewsEndpoint.BOT
        assert radar.reviews_url("1") == "https://radarcord.net/api/bot/1"


class TestDiscordPyCallbacks:
    async def test_send_embed_to_channel(self, discord_client: MagicMock, post_result: StatsPostResult) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()
        discord_client.get_channel.return_value = channel

        await DiscordPyCallbacks(discord_client).send_embed(1111)(post_result)

        channel.send.assert_awaited_once()
        [embed] = channel.send.await_args.kwargs["embeds"]
        assert embed.title == "Message from Radarcord API"

    async def test_bad_channel_id(self, discord_client: MagicMock, post_result: StatsPostResult) -> None:
        discord_client.fetch_channel = AsyncMock(side_effect=_not_found())
        with pytest.raises(RadarcordError, match="Invalid channel ID: bad-id"):
            await DiscordPyCallbacks(discord_client).send_embed("bad-id")(post_result)

    @pytest.mark.parametrize("status", [400, 500])
    async def test_http_errors_while_resolving(
        self, discord_client: MagicMock, post_result: StatsPostResult, status: int
    ) -> None:
        failure = discord.HTTPException(MagicMock(status=status, reason="Error"), "Invalid Form Body")
        discord_client.fetch_channel = AsyncMock(side_effect=failure)

        with pytest.raises(RadarcordError, match="Could not resolve channel ID 1111") as exc_info:
            await DiscordPyCallbacks(discord_client).send_embed("1111")(post_result)

        assert exc_info.value.__cause__ is failure

    async def test_webhook_goes_over_http(self, discord_client: MagicMock, post_result: StatsPostResult) -> None:
        webhook = WebhookData(id="1", token="t")
        with patch.object(DiscordWebhookClient, "send", new=AsyncMock()) as send:
            await DiscordPyCallbacks(discord_client).send_message_with_webhook(webhook)(post_result)
        send.assert_awaited_once_with({"embeds": [default_embed(post_result)]})
