"""Type definitions and protocols for the radarcord client.

This package provides:
- Data models (immutable dataclasses)
- The framework-neutral embed model
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 syntax)
"""

from radarcord.types.aliases import (
    ContentBuilder,
    EmbedBuilder,
    MessageContent,
    SendErrorHook,
    Snowflake,
    StatsPostCallback,
    TickErrorHook,
)
from radarcord.types.embeds import RadarcordEmbed
from radarcord.types.models import (
    Response,
    Review,
    StatsPostBody,
    StatsPostResult,
    WebhookData,
)
from radarcord.types.protocols import (
    BotConnection,
    HTTPClient,
    MessagingBackend,
)

__all__ = [
    # Type aliases
    "ContentBuilder",
    "EmbedBuilder",
    "MessageContent",
    "SendErrorHook",
    "Snowflake",
    "StatsPostCallback",
    "TickErrorHook",
    # Data models
    "RadarcordEmbed",
    "Response",
    "Review",
    "StatsPostBody",
    "StatsPostResult",
    "WebhookData",
    # Protocols
    "BotConnection",
    "HTTPClient",
    "MessagingBackend",
]
