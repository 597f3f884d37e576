"""Discord webhook client for sending notifications."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypedDict, override
from urllib.parse import urlparse

import httpx

from radarcord.exceptions import RadarcordError
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.models import WebhookData
from radarcord.utils.sanitization import sanitize_exception, sanitize_url
from radarcord.utils.status import is_ok

logger = logging.getLogger(__name__)


class WebhookPayload(TypedDict, total=False):
    """Discord webhook payload structure."""

    content: str
    username: str
    avatar_url: str
    embeds: list[dict[str, object]]


def _embed_to_dict(embed: object) -> dict[str, object]:
    if isinstance(embed, RadarcordEmbed):
        return embed.to_dict()
    if isinstance(embed, Mapping):
        return dict(embed)  # pyright: ignore[reportUnknownArgumentType]
    to_dict = getattr(embed, "to_dict", None)
    if callable(to_dict):
        # Native embeds (discord.Embed) serialize themselves
        return dict(to_dict())  # pyright: ignore[reportUnknownArgumentType]
    raise TypeError(f"Cannot send {type(embed).__name__} as a webhook embed")


def build_webhook_payload(content: object) -> WebhookPayload:
    """Convert message content into a webhook JSON payload.

    Args:
        content: A string, a RadarcordEmbed, an embed exposing ``to_dict()``
            or a mapping with ``content``/``embeds``/``username``/``avatar_url``

    Returns:
        Payload ready to be JSON-encoded

    Raises:
        TypeError: If the content cannot be represented as a webhook message
        ValueError: If the content carries neither text nor embeds
    """
    payload: WebhookPayload = {}
    if isinstance(content, str):
        payload["content"] = content
    elif isinstance(content, Mapping):
        text = content.get("content")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if text is not None:
            payload["content"] = str(text)  # pyright: ignore[reportUnknownArgumentType]
        embeds = content.get("embeds") or []  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        embed = content.get("embed")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if embed is not None:
            embeds = [*embeds, embed]  # pyright: ignore[reportUnknownVariableType]
        if embeds:
            payload["embeds"] = [_embed_to_dict(item) for item in embeds]  # pyright: ignore[reportUnknownVariableType]
        for key in ("username", "avatar_url"):
            value = content.get(key)  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
            if value is not None:
                payload[key] = str(value)  # pyright: ignore[reportUnknownArgumentType]
    else:
        payload["embeds"] = [_embed_to_dict(content)]

    if not payload.get("content") and not payload.get("embeds"):
        raise ValueError("Either content or embeds must be provided")
    return payload


class DiscordWebhookClient:
    """Discord webhook client for sending messages.

    Sends are attempted once; failures raise RadarcordError.
    """

    def __init__(
        self,
        webhook: WebhookData | str,
        username: str | None = None,
        avatar_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Discord webhook client.

        Args:
            webhook: Webhook credentials or full webhook URL
            username: Username override for messages
            avatar_url: Avatar URL override for messages
            timeout: Request timeout in seconds
        """
        self.webhook_url: str = webhook.url if isinstance(webhook, WebhookData) else webhook
        self.username: str | None = username
        self.avatar_url: str | None = avatar_url
        self.timeout: float = timeout

        self._validate_webhook_url()

    def _validate_webhook_url(self) -> None:
        """Validate the webhook URL format."""
        parsed = urlparse(self.webhook_url)

        if parsed.scheme not in ("http", "https"):
            raise ValueError("Webhook URL must use HTTP or HTTPS")

        if not parsed.netloc.endswith(("discord.com", "discordapp.com")):
            raise ValueError("Webhook URL must be a Discord webhook")

        if not parsed.path.startswith("/api/webhooks/"):
            raise ValueError("Invalid Discord webhook URL format")

    async def send(self, content: object) -> None:
        """Send content to the webhook.

        Args:
            content: Anything accepted by ``build_webhook_payload``

        Raises:
            RadarcordError: If the request fails or Discord answers non-2xx
            ValueError: If the message exceeds Discord limits
        """
        payload = build_webhook_payload(content)

        if "content" in payload and len(payload["content"]) > 2000:
            raise ValueError("Message content cannot exceed 2000 characters")
        if len(payload.get("embeds", [])) > 10:
            raise ValueError("Cannot send more than 10 embeds")

        if self.username and "username" not in payload:
            payload["username"] = self.username
        if self.avatar_url and "avatar_url" not in payload:
            payload["avatar_url"] = self.avatar_url

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise RadarcordError(f"Webhook request failed: {sanitize_exception(exc)}") from exc

        if not is_ok(response.status_code):
            logger.error("Discord webhook request failed with status %d: %s", response.status_code, response.text)
            raise RadarcordError.from_status(response.status_code, response.text)

        logger.debug("Discord webhook message sent successfully")

    @override
    def __repr__(self) -> str:
        return f"DiscordWebhookClient(webhook_url='{sanitize_url(self.webhook_url)}')"


class HTTPWebhookSender:
    """Mixin implementing ``MessagingBackend.send_webhook`` over plain HTTP.

    Webhooks need no live gateway connection, so every binding shares this.
    """

    webhook_timeout: float = 30.0

    async def send_webhook(self, webhook: WebhookData, content: object) -> None:
        """Send content through a webhook identified by id and token."""
        client = DiscordWebhookClient(webhook, timeout=self.webhook_timeout)
        await client.send(content)
