"""Ready-made stats callbacks that mirror post results into Discord.

The factory produces callables compatible with ``post_with_callback`` and
``autopost_with_callback``. Channel resolution problems raise; send
failures are handed to an error hook (logging by default) so a failed
notification never breaks the posting loop.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable
from typing import Final

from radarcord.core.webhook import HTTPWebhookSender
from radarcord.exceptions import RadarcordError
from radarcord.types.aliases import ContentBuilder, EmbedBuilder, SendErrorHook, Snowflake, StatsPostCallback
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.models import StatsPostResult, WebhookData
from radarcord.types.protocols import MessagingBackend
from radarcord.utils.sanitization import sanitize_exception

logger = logging.getLogger(__name__)

MAX_SNOWFLAKE: Final[int] = 2**64 - 1


def default_embed(result: StatsPostResult) -> RadarcordEmbed:
    """Embed showing the status code and raw body of a post."""
    return RadarcordEmbed(
        title="Message from Radarcord API",
        description="The Radarcord API has sent back a message!",
        fields=[
            {"name": "Status Code", "value": str(result.status_code), "inline": True},
            {"name": "Body", "value": json.dumps(result.body.to_dict())[:1024], "inline": True},
        ],
    )


def log_send_error(exc: BaseException, result: StatsPostResult) -> None:
    """Default error hook: log the failed notification."""
    logger.error(
        "Failed to deliver stats notification (status=%d): %s",
        result.status_code,
        exc,
        exc_info=exc,
    )


def parse_snowflake(value: Snowflake) -> int | None:
    """Parse a Discord id, or return None when it cannot be one.

    Discord ids are unsigned 64-bit integers; anything outside that range
    would only be rejected by the API with a 400.
    """
    try:
        snowflake = int(value)
    except ValueError:
        return None
    return snowflake if 0 < snowflake <= MAX_SNOWFLAKE else None


def _validate_channel_id(channel_id: object) -> Snowflake:
    if isinstance(channel_id, bool) or not isinstance(channel_id, (str, int)):
        raise TypeError(f"Expected channel_id to be a str or int, got {type(channel_id).__name__} instead.")
    return channel_id


async def _build(builder: Callable[[StatsPostResult], object], result: StatsPostResult) -> object:
    content = builder(result)
    if inspect.isawaitable(content):
        content = await content
    return content


class WebhookMessaging(HTTPWebhookSender):
    """Messaging backend with no gateway connection; only webhooks work."""

    async def resolve_channel(self, channel_id: Snowflake) -> object | None:
        return None

    def is_text_channel(self, channel: object) -> bool:
        return False

    async def send_message(self, channel: object, content: object) -> None:
        raise RadarcordError("Channel messages need a bot connection; use a webhook instead")


class CallbackFactory:
    """Builds stats callbacks delivering post results to Discord.

    Example:
        >>> defaults = CallbackFactory(messaging)
        >>> await radar.post_with_callback(defaults.send_embed("1111111111"))
    """

    def __init__(
        self,
        messaging: MessagingBackend | None = None,
        *,
        on_send_error: SendErrorHook | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            messaging: Backend used to resolve channels and send messages,
                defaults to a webhook-only backend
            on_send_error: Hook receiving send failures, defaults to logging them
        """
        if messaging is not None and not isinstance(messaging, MessagingBackend):
            raise TypeError(f"Expected a MessagingBackend, got {type(messaging).__name__} instead.")
        self.messaging: MessagingBackend = messaging if messaging is not None else WebhookMessaging()
        self.on_send_error: SendErrorHook = on_send_error or log_send_error

    async def _resolve_text_channel(self, channel_id: Snowflake) -> object:
        try:
            channel = await self.messaging.resolve_channel(channel_id)
        except RadarcordError:
            raise
        except Exception as exc:
            raise RadarcordError(
                f"Could not resolve channel ID {channel_id}: {sanitize_exception(exc)}",
                context={"channel_id": str(channel_id)},
            ) from exc
        if channel is None:
            raise RadarcordError(f"Invalid channel ID: {channel_id}.")
        if not self.messaging.is_text_channel(channel):
            raise RadarcordError(f"Channel ID {channel_id} is valid, however the resolved channel is not text based!")
        return channel

    async def _report(self, exc: Exception, result: StatsPostResult) -> None:
        try:
            outcome = self.on_send_error(exc, result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Send error hook failed")

    async def _deliver(self, channel: object, content: object, result: StatsPostResult) -> None:
        try:
            await self.messaging.send_message(channel, content)
        except Exception as exc:
            await self._report(exc, result)

    def send_embed(self, channel_id: Snowflake, custom_embed: EmbedBuilder | None = None) -> StatsPostCallback:
        """Return a callback that sends an embed to a channel.

        Args:
            channel_id: Channel to send the embed to
            custom_embed: Builder producing the embed from the post result,
                the default embed is used when omitted

        Returns:
            Callback for ``post_with_callback``/``autopost_with_callback``

        Raises:
            TypeError: If channel_id is not a str or int
        """
        channel_id = _validate_channel_id(channel_id)
        builder: EmbedBuilder = custom_embed or default_embed

        async def callback(result: StatsPostResult) -> None:
            embed = await _build(builder, result)
            channel = await self._resolve_text_channel(channel_id)
            await self._deliver(channel, {"embeds": [embed]}, result)

        return callback

    def send_custom_content(self, channel_id: Snowflake, content_builder: ContentBuilder) -> StatsPostCallback:
        """Return a callback that sends custom content to a channel.

        Args:
            channel_id: Channel to send the message to
            content_builder: Builder producing the message content from the post result

        Returns:
            Callback for ``post_with_callback``/``autopost_with_callback``

        Raises:
            TypeError: If channel_id is not a str or int, or content_builder is not callable
        """
        channel_id = _validate_channel_id(channel_id)
        if not callable(content_builder):
            raise TypeError(f"Expected content_builder to be callable, got {type(content_builder).__name__} instead.")

        async def callback(result: StatsPostResult) -> None:
            content = await _build(content_builder, result)
            channel = await self._resolve_text_channel(channel_id)
            await self._deliver(channel, content, result)

        return callback

    def send_message_with_webhook(
        self,
        webhook: WebhookData,
        custom_content: ContentBuilder | None = None,
    ) -> StatsPostCallback:
        """Return a callback that sends a message through a webhook.

        Args:
            webhook: Webhook credentials (id and token)
            custom_content: Builder producing the message content, the
                default embed is used when omitted

        Returns:
            Callback for ``post_with_callback``/``autopost_with_callback``
        """
        if not isinstance(webhook, WebhookData):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise TypeError(f"Expected webhook to be WebhookData, got {type(webhook).__name__} instead.")

        async def callback(result: StatsPostResult) -> None:
            if custom_content is not None:
                content = await _build(custom_content, result)
            else:
                content = {"embeds": [default_embed(result)]}
            try:
                await self.messaging.send_webhook(webhook, content)
            except Exception as exc:
                await self._report(exc, result)

        return callback
