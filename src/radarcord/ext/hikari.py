"""hikari binding.

Adapts a ``hikari.GatewayBot`` to the capability protocols and provides
ready-made client and callback classes. Reviews default to the
``/bot/{id}/reviews`` endpoint shape.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Mapping

import hikari

from radarcord.config import RadarcordConfig, ReviewsEndpoint
from radarcord.core.callbacks import CallbackFactory, parse_snowflake
from radarcord.core.client import RadarcordClient
from radarcord.core.webhook import HTTPWebhookSender
from radarcord.types.aliases import SendErrorHook, Snowflake
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.protocols import HTTPClient

logger = logging.getLogger(__name__)


def _require_bot(bot: object) -> hikari.GatewayBot:
    if not isinstance(bot, hikari.GatewayBot):
        raise TypeError(f'Expected a "hikari.GatewayBot" or an extending type, got {type(bot).__name__} instead.')
    return bot


def to_hikari_embed(embed: object) -> hikari.Embed:
    """Convert a RadarcordEmbed (or embed dict) into a ``hikari.Embed``."""
    if isinstance(embed, hikari.Embed):
        return embed
    if isinstance(embed, Mapping):
        embed = RadarcordEmbed.model_validate(embed)
    if not isinstance(embed, RadarcordEmbed):
        raise TypeError(f"Cannot convert {type(embed).__name__} into a hikari.Embed")

    timestamp = datetime.datetime.fromisoformat(embed.timestamp) if embed.timestamp else None
    native = hikari.Embed(
        title=embed.title,
        description=embed.description,
        url=embed.url,
        color=embed.color,
        timestamp=timestamp,
    )
    for field in embed.fields:
        _ = native.add_field(str(field["name"]), str(field["value"]), inline=bool(field.get("inline", False)))
    if embed.footer:
        _ = native.set_footer(embed.footer.get("text"), icon=embed.footer.get("icon_url"))
    if embed.author:
        _ = native.set_author(
            name=embed.author.get("name"),
            url=embed.author.get("url"),
            icon=embed.author.get("icon_url"),
        )
    if embed.image and embed.image.get("url"):
        _ = native.set_image(embed.image["url"])
    if embed.thumbnail and embed.thumbnail.get("url"):
        _ = native.set_thumbnail(embed.thumbnail["url"])
    return native


def to_message_kwargs(content: object) -> dict[str, object]:
    """Convert message content into keyword arguments for hikari's REST message calls."""
    if isinstance(content, str):
        return {"content": content}
    if isinstance(content, (hikari.Embed, RadarcordEmbed)):
        return {"embeds": [to_hikari_embed(content)]}
    if isinstance(content, Mapping):
        kwargs: dict[str, object] = {str(key): value for key, value in content.items()}  # pyright: ignore[reportUnknownVariableType]
        embeds = list(kwargs.pop("embeds", None) or [])  # pyright: ignore[reportArgumentType]
        embed = kwargs.pop("embed", None)
        if embed is not None:
            embeds.append(embed)
        if embeds:
            kwargs["embeds"] = [to_hikari_embed(item) for item in embeds]  # pyright: ignore[reportUnknownVariableType]
        return kwargs
    raise TypeError(f"Cannot send {type(content).__name__} through hikari")


class HikariConnection:
    """BotConnection backed by a hikari gateway bot."""

    def __init__(self, bot: hikari.GatewayBot) -> None:
        self.bot: hikari.GatewayBot = _require_bot(bot)

    def is_ready(self) -> bool:
        return bool(self.bot.is_alive) and self.bot.get_me() is not None

    def bot_id(self) -> str | None:
        me = self.bot.get_me()
        return str(me.id) if me is not None else None

    def guild_count(self) -> int:
        return len(self.bot.cache.get_guilds_view())


class HikariMessaging(HTTPWebhookSender):
    """MessagingBackend backed by a hikari gateway bot."""

    def __init__(self, bot: hikari.GatewayBot) -> None:
        self.bot: hikari.GatewayBot = _require_bot(bot)

    async def resolve_channel(self, channel_id: Snowflake) -> object | None:
        parsed = parse_snowflake(channel_id)
        if parsed is None:
            return None
        snowflake = hikari.Snowflake(parsed)

        channel = self.bot.cache.get_guild_channel(snowflake)
        if channel is not None:
            return channel
        try:
            return await self.bot.rest.fetch_channel(snowflake)
        except (hikari.NotFoundError, hikari.ForbiddenError):
            logger.debug("Channel %s could not be fetched", snowflake)
            return None

    def is_text_channel(self, channel: object) -> bool:
        return isinstance(channel, hikari.TextableChannel)

    async def send_message(self, channel: object, content: object) -> None:
        if not isinstance(channel, hikari.TextableChannel):
            raise TypeError(f"Cannot send messages to {type(channel).__name__}")
        _ = await self.bot.rest.create_message(channel, **to_message_kwargs(content))  # pyright: ignore[reportArgumentType]


class RadarcordHikariClient(RadarcordClient):
    """Radarcord stats client for hikari bots."""

    default_reviews_endpoint: ReviewsEndpoint = ReviewsEndpoint.REVIEWS

    def __init__(
        self,
        bot: hikari.GatewayBot,
        authorization: str | None = None,
        *,
        config: RadarcordConfig | None = None,
        http_client: HTTPClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            bot: The hikari gateway bot; its lifecycle stays with the caller
            authorization: Radarcord API token
            config: Client settings
            http_client: HTTP implementation override

        Raises:
            TypeError: If bot is not a ``hikari.GatewayBot``
        """
        super().__init__(
            HikariConnection(bot),
            authorization,
            config=config,
            http_client=http_client,
        )
        self.bot: hikari.GatewayBot = bot


class HikariCallbacks(CallbackFactory):
    """Default stats callbacks for hikari bots."""

    def __init__(self, bot: hikari.GatewayBot, *, on_send_error: SendErrorHook | None = None) -> None:
        super().__init__(HikariMessaging(bot), on_send_error=on_send_error)
        self.bot: hikari.GatewayBot = bot
