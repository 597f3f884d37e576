"""Data models for the radarcord client.

This module defines immutable dataclasses used throughout the package
for type-safe data transfer between the HTTP layer, the stats client
and user callbacks.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from radarcord.exceptions import RadarcordError

DISCORD_WEBHOOK_ROOT: Final[str] = "https://discord.com/api/webhooks"


@dataclass(slots=True, frozen=True)
class Response:
    """HTTP response.

    Represents an HTTP response with status code, parsed JSON body,
    headers, and the raw body text used in error messages.
    """

    status: int
    body: Mapping[str, object]
    headers: Mapping[str, str]
    text: str = ""


@dataclass(slots=True, frozen=True)
class StatsPostBody:
    """Parsed body of a successful stats post."""

    message: str
    extra: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> StatsPostBody:
        """Build the body from the JSON returned by the API.

        Keys other than ``message`` are kept in ``extra``.
        """
        message = payload.get("message", "")
        extra = {key: value for key, value in payload.items() if key != "message"}
        return cls(message=str(message), extra=extra)

    def to_dict(self) -> dict[str, object]:
        """Return the body the way the API sent it."""
        return {"message": self.message, **self.extra}


@dataclass(slots=True, frozen=True)
class StatsPostResult:
    """Result of a stats post.

    Returned by ``post_stats`` and handed to every stats callback.
    """

    status_code: int
    body: StatsPostBody
    message: str


@dataclass(slots=True, frozen=True)
class Review:
    """A user review of a bot listed on Radarcord.

    Identifiers are snowflakes kept as text so they never lose precision.
    """

    content: str
    stars: int
    bot_id: str
    user_id: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> Review:
        """Coerce one element of a reviews response into a Review.

        Args:
            payload: Raw review mapping with ``content``, ``stars``,
                ``botid`` and ``userid`` keys

        Returns:
            Parsed review

        Raises:
            RadarcordError: If a key is missing or ``stars`` is not an integer
        """
        try:
            content = payload["content"]
            raw_stars = payload["stars"]
            bot_id = payload["botid"]
            user_id = payload["userid"]
        except KeyError as exc:
            raise RadarcordError(f"Malformed review payload: missing field {exc.args[0]!r}") from exc

        if isinstance(raw_stars, bool) or not isinstance(raw_stars, (int, float, str)):
            raise RadarcordError(f"Malformed review payload: stars must be a number, got {raw_stars!r}")
        try:
            stars = int(raw_stars)
        except (ValueError, OverflowError) as exc:
            raise RadarcordError(f"Malformed review payload: stars must be a number, got {raw_stars!r}") from exc

        return cls(content=str(content), stars=stars, bot_id=str(bot_id), user_id=str(user_id))


@dataclass(slots=True, frozen=True)
class WebhookData:
    """Credentials of a Discord webhook."""

    id: str
    token: str

    @property
    def url(self) -> str:
        """Execute URL of the webhook."""
        return f"{DISCORD_WEBHOOK_ROOT}/{self.id}/{self.token}"

    def __repr__(self) -> str:
        return f"WebhookData(id={self.id!r}, token='<REDACTED>')"
