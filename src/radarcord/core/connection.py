"""BotConnection for processes that know their stats without a gateway client."""

from __future__ import annotations

from collections.abc import Callable

from radarcord.types.aliases import Snowflake


class StaticConnection:
    """A connection with a fixed bot id and a fixed or computed guild count.

    Useful from scripts and the CLI, and when shards are spread over several
    processes and the total guild count is aggregated elsewhere.

    Example:
        >>> connection = StaticConnection(123456789012345678, guild_count=lambda: redis_total())
    """

    def __init__(self, bot_id: Snowflake, guild_count: int | Callable[[], int] = 0) -> None:
        if isinstance(bot_id, bool) or not isinstance(bot_id, (str, int)):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise TypeError(f"Expected bot_id to be a str or int, got {type(bot_id).__name__} instead.")
        if not callable(guild_count) and (isinstance(guild_count, bool) or not isinstance(guild_count, int)):
            raise TypeError(f"Expected guild_count to be an int or callable, got {type(guild_count).__name__}.")
        self._bot_id: str = str(bot_id)
        self._guild_count: int | Callable[[], int] = guild_count

    def is_ready(self) -> bool:
        return True

    def bot_id(self) -> str | None:
        return self._bot_id

    def guild_count(self) -> int:
        if callable(self._guild_count):
            return self._guild_count()
        return self._guild_count

    def __repr__(self) -> str:
        return f"StaticConnection(bot_id={self._bot_id!r})"
