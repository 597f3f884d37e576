"""Unit tests for StaticConnection."""

from __future__ import annotations

import pytest

from radarcord.core.connection import StaticConnection
from radarcord.types.protocols import BotConnection


def test_is_a_bot_connection() -> None:
    assert isinstance(StaticConnection(1), BotConnection)


def test_fixed_values() -> None:
    connection = StaticConnection(123456789012345678, guild_count=12)
    assert connection.is_ready()
    assert connection.bot_id() == "123456789012345678"
    assert connection.guild_count() == 12


def test_computed_guild_count() -> None:
    totals = iter([10, 11])
    connection = StaticConnection("1", guild_count=lambda: next(totals))
    assert connection.guild_count() == 10
    assert connection.guild_count() == 11


@pytest.mark.parametrize("bot_id", [None, 1.5, True])
def test_rejects_bad_bot_id(bot_id: object) -> None:
    with pytest.raises(TypeError, match="bot_id"):
        _ = StaticConnection(bot_id)  # pyright: ignore[reportArgumentType]


@pytest.mark.parametrize("guild_count", ["12", False, 1.0])
def test_rejects_bad_guild_count(guild_count: object) -> None:
    with pytest.raises(TypeError, match="guild_count"):
        _ = StaticConnection(1, guild_count=guild_count)  # pyright: ignore[reportArgumentType]


def test_repr() -> None:
    assert repr(StaticConnection(7)) == "StaticConnection(bot_id='7')"
