"""Framework-agnostic core: stats client, scheduler and notification callbacks."""

from radarcord.core.callbacks import (
    MAX_SNOWFLAKE,
    CallbackFactory,
    WebhookMessaging,
    default_embed,
    log_send_error,
    parse_snowflake,
)
from radarcord.core.client import NOT_READY_MESSAGE, STATS_POSTED_MESSAGE, RadarcordClient
from radarcord.core.connection import StaticConnection
from radarcord.core.scheduler import AutopostHandle, IntervalScheduler
from radarcord.core.webhook import DiscordWebhookClient, HTTPWebhookSender, build_webhook_payload

__all__ = [
    "MAX_SNOWFLAKE",
    "NOT_READY_MESSAGE",
    "STATS_POSTED_MESSAGE",
    "AutopostHandle",
    "CallbackFactory",
    "DiscordWebhookClient",
    "HTTPWebhookSender",
    "IntervalScheduler",
    "RadarcordClient",
    "StaticConnection",
    "WebhookMessaging",
    "build_webhook_payload",
    "default_embed",
    "log_send_error",
    "parse_snowflake",
]
