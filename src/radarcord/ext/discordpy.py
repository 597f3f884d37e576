"""discord.py binding.

Adapts a ``discord.Client`` (or ``commands.Bot``) to the capability
protocols and provides ready-made client and callback classes.

Example:
    >>> bot = commands.Bot(command_prefix="!", intents=discord.Intents.default())
    >>> radar = RadarcordDiscordPyClient(bot, os.environ["RADARCORD_TOKEN"])
    >>> defaults = DiscordPyCallbacks(bot)
    >>>
    >>> @bot.event
    ... async def on_ready():
    ...     await radar.autopost_with_callback(defaults.send_embed(LOG_CHANNEL_ID))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import discord

from radarcord.config import RadarcordConfig, ReviewsEndpoint
from radarcord.core.callbacks import CallbackFactory, parse_snowflake
from radarcord.core.client import RadarcordClient
from radarcord.core.webhook import HTTPWebhookSender
from radarcord.types.aliases import SendErrorHook, Snowflake
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.protocols import HTTPClient

logger = logging.getLogger(__name__)


def _require_client(client: object) -> discord.Client:
    if not isinstance(client, discord.Client):
        raise TypeError(
            f"Expected a discord.Client or an extending type, got {type(client).__name__} instead."
        )
    return client


def to_discord_embed(embed: object) -> discord.Embed:
    """Convert a RadarcordEmbed (or embed dict) into a ``discord.Embed``."""
    if isinstance(embed, discord.Embed):
        return embed
    if isinstance(embed, RadarcordEmbed):
        return discord.Embed.from_dict(embed.to_dict())
    if isinstance(embed, Mapping):
        return discord.Embed.from_dict(dict(embed))  # pyright: ignore[reportUnknownArgumentType]
    raise TypeError(f"Cannot convert {type(embed).__name__} into a discord.Embed")


def to_send_kwargs(content: object) -> dict[str, object]:
    """Convert message content into keyword arguments for ``Messageable.send``."""
    if isinstance(content, str):
        return {"content": content}
    if isinstance(content, (discord.Embed, RadarcordEmbed)):
        return {"embeds": [to_discord_embed(content)]}
    if isinstance(content, Mapping):
        kwargs: dict[str, object] = {str(key): value for key, value in content.items()}  # pyright: ignore[reportUnknownVariableType]
        embeds = list(kwargs.pop("embeds", None) or [])  # pyright: ignore[reportArgumentType]
        embed = kwargs.pop("embed", None)
        if embed is not None:
            embeds.append(embed)
        if embeds:
            kwargs["embeds"] = [to_discord_embed(item) for item in embeds]  # pyright: ignore[reportUnknownVariableType]
        return kwargs
    raise TypeError(f"Cannot send {type(content).__name__} to a discord.py channel")


class DiscordPyConnection:
    """BotConnection backed by a discord.py client."""

    def __init__(self, client: discord.Client) -> None:
        self.client: discord.Client = _require_client(client)

    def is_ready(self) -> bool:
        return self.client.is_ready()

    def bot_id(self) -> str | None:
        if self.client.user is not None:
            return str(self.client.user.id)
        if self.client.application_id is not None:
            return str(self.client.application_id)
        return None

    def guild_count(self) -> int:
        return len(self.client.guilds)


class DiscordPyMessaging(HTTPWebhookSender):
    """MessagingBackend backed by a discord.py client."""

    def __init__(self, client: discord.Client) -> None:
        self.client: discord.Client = _require_client(client)

    async def resolve_channel(self, channel_id: Snowflake) -> object | None:
        snowflake = parse_snowflake(channel_id)
        if snowflake is None:
            return None

        channel = self.client.get_channel(snowflake)
        if channel is not None:
            return channel
        try:
            return await self.client.fetch_channel(snowflake)
        except (discord.NotFound, discord.Forbidden, discord.InvalidData):
            logger.debug("Channel %s could not be fetched", snowflake)
            return None

    def is_text_channel(self, channel: object) -> bool:
        return isinstance(channel, discord.abc.Messageable)

    async def send_message(self, channel: object, content: object) -> None:
        if not isinstance(channel, discord.abc.Messageable):
            raise TypeError(f"Cannot send messages to {type(channel).__name__}")
        _ = await channel.send(**to_send_kwargs(content))  # pyright: ignore[reportArgumentType]


class RadarcordDiscordPyClient(RadarcordClient):
    """Radarcord stats client for discord.py bots."""

    default_reviews_endpoint: ReviewsEndpoint = ReviewsEndpoint.BOT

    def __init__(
        self,
        client: discord.Client,
        authorization: str | None = None,
        *,
        config: RadarcordConfig | None = None,
        http_client: HTTPClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            client: The discord.py client; its lifecycle stays with the caller
            authorization: Radarcord API token
            config: Client settings
            http_client: HTTP implementation override

        Raises:
            TypeError: If client is not a ``discord.Client``
        """
        super().__init__(
            DiscordPyConnection(client),
            authorization,
            config=config,
            http_client=http_client,
        )
        self.discord_client: discord.Client = client


class DiscordPyCallbacks(CallbackFactory):
    """Default stats callbacks for discord.py bots."""

    def __init__(self, client: discord.Client, *, on_send_error: SendErrorHook | None = None) -> None:
        super().__init__(DiscordPyMessaging(client), on_send_error=on_send_error)
        self.discord_client: discord.Client = client
