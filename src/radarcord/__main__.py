"""Command line entry point for radarcord.

Posts stats or lists reviews for a bot without running a gateway client,
which is handy from cron jobs and deployment scripts.

Examples:
    radarcord post 123456789012345678 --guilds 250 --shards 2
    radarcord --config radarcord.yaml reviews 123456789012345678
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from pydantic import SecretStr

from radarcord.config import RadarcordConfig, load_config, load_config_from_env
from radarcord.core.callbacks import CallbackFactory
from radarcord.core.client import RadarcordClient
from radarcord.core.connection import StaticConnection
from radarcord.exceptions import ConfigurationError, RadarcordError
from radarcord.types.models import WebhookData
from radarcord.utils.logging import configure_logging

__all__ = ["main"]

EXIT_SUCCESS = 0
EXIT_ERROR = 1

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {number}")
    return number


def _webhook(value: str) -> WebhookData:
    webhook_id, sep, token = value.partition(":")
    if not sep or not webhook_id.isdigit() or not token:
        raise argparse.ArgumentTypeError("expected ID:TOKEN")
    return WebhookData(id=webhook_id, token=token)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        Parser with the ``post`` and ``reviews`` subcommands
    """
    parser = argparse.ArgumentParser(
        prog="radarcord",
        description="Post Discord bot statistics to Radarcord and read reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  radarcord post 123456789012345678 --guilds 250
  radarcord --token "$RADARCORD_TOKEN" post 123456789012345678 --guilds 250 --shards 2
  radarcord --config radarcord.yaml reviews 123456789012345678

Without --config, settings are read from RADARCORD_* environment variables.
        """,
    )

    _ = parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to a YAML configuration file",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--token",
        help="Radarcord API token (overrides configuration)",
    )
    _ = parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override log level from configuration",
        metavar="LEVEL",
    )

    subcommands = parser.add_subparsers(dest="command", required=True)

    post = subcommands.add_parser("post", help="Post guild and shard counts once")
    _ = post.add_argument("bot_id", help="Discord id of the bot")
    _ = post.add_argument("--guilds", type=_non_negative_int, required=True, help="Guild count to report")
    _ = post.add_argument("--shards", type=_non_negative_int, default=1, help="Shard count to report (default: 1)")
    _ = post.add_argument(
        "--notify-webhook",
        type=_webhook,
        help="Also send the result to a Discord webhook",
        metavar="ID:TOKEN",
    )

    reviews = subcommands.add_parser("reviews", help="List the reviews of a bot")
    _ = reviews.add_argument("bot_id", help="Discord id of the bot")
    _ = reviews.add_argument("--json", action="store_true", help="Print reviews as JSON")

    return parser


def resolve_config(config_path: Path | None, token: str | None, log_level: str | None) -> RadarcordConfig:
    """Load configuration and apply command line overrides.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config = load_config(config_path) if config_path is not None else load_config_from_env()

    overrides: dict[str, object] = {}
    if token:
        overrides["token"] = SecretStr(token)
    if log_level:
        overrides["log_level"] = log_level
    if overrides:
        config = config.model_copy(update=overrides)

    if config.token is None:
        raise ConfigurationError("No API token: pass --token, set RADARCORD_TOKEN or add token to the config file")
    return config


async def run_post(
    config: RadarcordConfig,
    bot_id: str,
    guilds: int,
    shards: int,
    notify_webhook: WebhookData | None = None,
) -> None:
    """Post stats once and print the API answer."""
    connection = StaticConnection(bot_id, guild_count=guilds)
    async with RadarcordClient(connection, config=config) as client:
        if notify_webhook is None:
            result = await client.post_stats(shards)
        else:
            notify = CallbackFactory().send_message_with_webhook(notify_webhook)
            result = await client.post_with_callback(notify, shards)

    print(f"{result.message} ({result.status_code})")
    if result.body.message:
        print(result.body.message)


async def run_reviews(config: RadarcordConfig, bot_id: str, *, as_json: bool = False) -> None:
    """Fetch and print the reviews of a bot."""
    connection = StaticConnection(bot_id)
    async with RadarcordClient(connection, config=config) as client:
        reviews = await client.get_reviews()

    if as_json:
        print(
            json.dumps(
                [
                    {"content": r.content, "stars": r.stars, "bot_id": r.bot_id, "user_id": r.user_id}
                    for r in reviews
                ],
                indent=2,
            )
        )
        return

    if not reviews:
        print("No reviews yet.")
        return
    for review in reviews:
        print(f"{review.stars}/5 from {review.user_id}: {review.content}")


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Main entry point for the radarcord command.

    Exit Codes:
        0: Command succeeded
        1: Configuration error or API error
    """
    args = build_parser().parse_args(argv)

    # Extract args with type annotations to avoid reportAny at argparse boundary
    command: str = args.command  # pyright: ignore[reportAny]
    config_path: Path | None = args.config  # pyright: ignore[reportAny]
    token: str | None = args.token  # pyright: ignore[reportAny]
    log_level: str | None = args.log_level  # pyright: ignore[reportAny]
    bot_id: str = args.bot_id  # pyright: ignore[reportAny]

    try:
        config = resolve_config(config_path, token, log_level)
        _ = configure_logging(log_level=config.log_level, stream=sys.stderr)

        if command == "post":
            guilds: int = args.guilds  # pyright: ignore[reportAny]
            shards: int = args.shards  # pyright: ignore[reportAny]
            notify_webhook: WebhookData | None = args.notify_webhook  # pyright: ignore[reportAny]
            asyncio.run(run_post(config, bot_id, guilds, shards, notify_webhook))
        else:
            as_json: bool = args.json  # pyright: ignore[reportAny]
            asyncio.run(run_reviews(config, bot_id, as_json=as_json))

    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    except RadarcordError as exc:
        print(f"Radarcord error: {exc}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    except Exception as exc:
        print(f"Unexpected error: {exc}", file=sys.stderr)
        logging.getLogger(__name__).exception("Unexpected error during command execution")
        sys.exit(EXIT_ERROR)

    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
