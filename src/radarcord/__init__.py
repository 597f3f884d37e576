"""Radarcord - post Discord bot statistics to the Radarcord bot list.

The core is framework agnostic; ready-made bindings for discord.py and
hikari live under ``radarcord.ext``.
"""

from radarcord.config import RadarcordConfig, ReviewsEndpoint, load_config, load_config_from_env
from radarcord.core import (
    AutopostHandle,
    CallbackFactory,
    DiscordWebhookClient,
    IntervalScheduler,
    RadarcordClient,
    StaticConnection,
    WebhookMessaging,
    default_embed,
)
from radarcord.exceptions import ConfigurationError, RadarcordError
from radarcord.types import (
    BotConnection,
    MessagingBackend,
    RadarcordEmbed,
    Review,
    StatsPostBody,
    StatsPostResult,
    WebhookData,
)
from radarcord.utils import IntervalPreset, OverlapPolicy, get_timeout, is_ok

__version__ = "1.0.0"

__all__ = [
    "AutopostHandle",
    "BotConnection",
    "CallbackFactory",
    "ConfigurationError",
    "DiscordWebhookClient",
    "IntervalPreset",
    "IntervalScheduler",
    "MessagingBackend",
    "OverlapPolicy",
    "RadarcordClient",
    "RadarcordConfig",
    "RadarcordEmbed",
    "RadarcordError",
    "Review",
    "ReviewsEndpoint",
    "StaticConnection",
    "StatsPostBody",
    "StatsPostResult",
    "WebhookData",
    "WebhookMessaging",
    "default_embed",
    "get_timeout",
    "is_ok",
    "load_config",
    "load_config_from_env",
]
