"""Redaction of Radarcord API tokens and Discord webhook tokens.

Used by the logging filter and by error messages that echo URLs, so a
token never ends up in a log file or a traceback.

Examples:
    >>> sanitize_url("https://discord.com/api/webhooks/123/secret_token")
    'https://discord.com/api/webhooks/123/<REDACTED>'

    >>> sanitize_value({"authorization": "abc", "guilds": 42})
    {'authorization': '<REDACTED>', 'guilds': 42}
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Final

REDACTED: Final[str] = "<REDACTED>"

# Each pattern keeps group 1 and replaces group 2 with the marker
_TEXT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    # Webhook execute URLs on discord.com, discordapp.com, ptb. and canary. hosts
    re.compile(
        r"(https?://(?:(?:ptb|canary)\.)?discord(?:app)?\.com/api(?:/v\d+)?/webhooks/\d+/)([^/?#\s]+)",
        re.IGNORECASE,
    ),
    # "Authorization: <token>", "'authorization': '<token>'", "x-api-key=<token>"
    re.compile(r"((?:authorization|x-api-key)[\"']?\s*[:=]\s*[\"']?)([^\s\"',}]+)", re.IGNORECASE),
    # ?token=..., &api_key=...
    re.compile(r"([?&](?:token|api[-_]?key|auth|secret|bearer)=)([^&\s]+)", re.IGNORECASE),
)

_SENSITIVE_FIELD: Final[re.Pattern[str]] = re.compile(
    r"token|secret|password|credential|authorization|(?<![a-z])o?auth(?![a-z])|bearer|api[-_]?key",
    re.IGNORECASE,
)


def is_sensitive_field(field_name: str) -> bool:
    """Whether a mapping key or log ``extra`` name holds a secret.

    Examples:
        >>> is_sensitive_field("Authorization")
        True
        >>> is_sensitive_field("guilds")
        False
    """
    return _SENSITIVE_FIELD.search(field_name) is not None


def sanitize_url(url: str) -> str:
    """Redact tokens from a URL or any free text mentioning one."""
    for pattern in _TEXT_PATTERNS:
        url = pattern.sub(rf"\1{REDACTED}", url)
    return url


def sanitize_value(value: object, *, field_name: str | None = None) -> object:
    """Redact secrets from arbitrarily nested data.

    Args:
        value: Scalar, string, mapping or sequence to clean
        field_name: Key the value was stored under; sensitive keys are
            redacted whatever their value

    Returns:
        A cleaned copy; numbers, booleans and None pass through unchanged
    """
    if field_name is not None and is_sensitive_field(field_name):
        return REDACTED
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return sanitize_url(value)
    if isinstance(value, Mapping):
        return {key: sanitize_value(item, field_name=str(key)) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, Sequence) and not isinstance(value, bytes):
        items: list[object] = [sanitize_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
        return tuple(items) if isinstance(value, tuple) else items
    return sanitize_url(str(value))


def sanitize_exception(exc: BaseException) -> str:
    """Render an exception as ``Type: message`` with secrets removed."""
    return f"{type(exc).__name__}: {sanitize_url(str(exc))}"


def sanitize_args(args: tuple[object, ...]) -> tuple[object, ...]:
    """Clean the %-formatting arguments of a log record."""
    return tuple(sanitize_value(arg) for arg in args)


def sanitize_mapping(data: Mapping[str, object]) -> dict[str, object]:
    """Clean a flat mapping such as a log record's ``extra`` fields."""
    return {key: sanitize_value(item, field_name=key) for key, item in data.items()}
