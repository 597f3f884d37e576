"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols that establish the
contracts between the framework-agnostic core and the bot framework
bindings, without requiring inheritance.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from radarcord.types.aliases import Snowflake
from radarcord.types.models import Response, WebhookData


@runtime_checkable
class BotConnection(Protocol):
    """Protocol for a connected bot client.

    The connection object is owned and lifecycle-managed by the caller;
    the stats client only reads from it.
    """

    def is_ready(self) -> bool:
        """Report whether the bot finished logging in.

        Returns:
            True once the gateway client is ready to report stats
        """
        ...

    def bot_id(self) -> str | None:
        """Return the bot's application/user id.

        Returns:
            The id as text, or None while it is not known yet
        """
        ...

    def guild_count(self) -> int:
        """Return the number of guilds the bot is currently in."""
        ...


@runtime_checkable
class MessagingBackend(Protocol):
    """Protocol for delivering notification messages.

    Bindings implement channel resolution and sending on top of their
    framework; webhook delivery needs no live connection.
    """

    async def resolve_channel(self, channel_id: Snowflake) -> object | None:
        """Resolve a channel by id.

        Args:
            channel_id: Channel snowflake

        Returns:
            The framework channel object, or None if it does not resolve
        """
        ...

    def is_text_channel(self, channel: object) -> bool:
        """Report whether messages can be sent to the channel."""
        ...

    async def send_message(self, channel: object, content: object) -> None:
        """Send content to a resolved text channel.

        Args:
            channel: Channel returned by ``resolve_channel``
            content: Message content (str, embed, mapping or native object)
        """
        ...

    async def send_webhook(self, webhook: WebhookData, content: object) -> None:
        """Send content through a webhook identified by id and token.

        Args:
            webhook: Webhook credentials
            content: Message content (str, embed, mapping or native object)
        """
        ...


class HTTPClient(Protocol):
    """Protocol for HTTP client operations.

    Defines the interface the stats client uses to talk to the
    Radarcord API. Implementations must not retry.
    """

    async def post(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send HTTP POST request with a JSON body.

        Args:
            url: Target URL for the POST request
            payload: Request body data (JSON-encoded)
            headers: Extra request headers (keyword-only)

        Returns:
            HTTP response with status, body, headers and raw text
        """
        ...

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send HTTP GET request.

        Args:
            url: Target URL
            headers: Extra request headers (keyword-only)

        Returns:
            HTTP response with status, body, headers and raw text
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
