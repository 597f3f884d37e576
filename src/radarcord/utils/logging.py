"""Logging setup with correlation ID tracking and secret redaction.

The package itself only ever calls ``logging.getLogger(__name__)``;
applications (and the CLI) call ``configure_logging`` to install handlers.
Each autopost tick runs under its own correlation ID so the post and the
notification it triggers can be matched in the logs.
"""

import contextvars
import logging
import sys
import uuid
from typing import Final, TextIO, override

from radarcord.utils.sanitization import sanitize_args, sanitize_mapping, sanitize_value

# Automatically inherited by asyncio tasks created within the same context
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "radarcord_correlation_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"

# Attributes every LogRecord carries; anything else arrived through extra={}
_STANDARD_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "asctime",
        "correlation_id",
    }
)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds the current correlation ID to log records."""

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = correlation_id_var.get()
        record.correlation_id = correlation_id if correlation_id is not None else "N/A"
        return True


class SecretRedactingFilter(logging.Filter):
    """Logging filter that redacts tokens from log messages.

    Sanitizes the message text, the % formatting arguments and any extra
    fields, so API tokens and webhook tokens never reach a handler.

    Examples:
        >>> logger.info("Sending to %s", "https://discord.com/api/webhooks/1/abc")
        # Logged as: "Sending to https://discord.com/api/webhooks/1/<REDACTED>"
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            sanitized_msg = sanitize_value(record.msg)
            if isinstance(sanitized_msg, str):
                record.msg = sanitized_msg

        if record.args and isinstance(record.args, tuple):
            record.args = sanitize_args(record.args)

        extras: dict[str, object] = {
            name: value
            for name, value in record.__dict__.items()  # pyright: ignore[reportAny]
            if name not in _STANDARD_RECORD_ATTRS and not name.startswith("_")
        }
        for name, value in sanitize_mapping(extras).items():
            setattr(record, name, value)

        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    stream: TextIO | None = None,
    logger_name: str = "radarcord",
) -> logging.Logger:
    """Configure console logging for the radarcord logger tree.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream, defaults to stdout
        logger_name: Logger to configure, ``""`` configures the root logger

    Returns:
        The configured logger

    Example:
        >>> configure_logging(log_level="DEBUG")
        >>> logging.getLogger("radarcord.core.client").debug("Posting stats")
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    handler.addFilter(CorrelationIDFilter())
    handler.addFilter(SecretRedactingFilter())
    logger.addHandler(handler)

    return logger


def new_correlation_id() -> str:
    """Generate a short correlation ID and make it current."""
    correlation_id = uuid.uuid4().hex[:12]
    set_correlation_id(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _ = correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return correlation_id_var.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID from the current context."""
    _ = correlation_id_var.set(None)
