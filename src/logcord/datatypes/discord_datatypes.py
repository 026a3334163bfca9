"""
Typed Discord snowflakes.

Guild and channel IDs reach Logcord as ints from py-cord, as ints from SQLite
and as strings from slash command payloads. Wrapping them keeps cache keys and
SQL parameters consistent, and stops a channel ID from being used where a
guild ID is expected.
"""

from __future__ import annotations

from typing import Union

import discord

SnowflakeLike = Union[int, str, "Snowflake"]


class Snowflake:
    """Base class for ID wrappers. Two wrappers are equal only when both type and value match."""

    __slots__ = ("_id",)

    def __init__(self, value: SnowflakeLike) -> None:
        """
        Raises:
            ValueError: If ``value`` is a bool, a non-numeric string, a negative
                number or another wrapper type.
        """
        if isinstance(value, type(self)):
            snowflake = value._id
        elif isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"{type(self).__name__} needs an int or numeric string, got {value!r}")
        else:
            snowflake = int(value.strip()) if isinstance(value, str) else value
        if snowflake < 0:
            raise ValueError(f"{type(self).__name__} cannot be negative: {snowflake}")
        self._id = snowflake

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    def to_int(self) -> int:
        return self._id

    __int__ = to_int

    def __str__(self) -> str:
        return str(self._id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snowflake):
            return NotImplemented
        return type(other) is type(self) and other._id == self._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))


class GuildID(Snowflake):
    """ID of a guild (server)."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild: discord.Guild) -> "GuildID":
        return cls(guild.id)


class ChannelID(Snowflake):
    """ID of a guild channel, e.g. a log channel.

    >>> ChannelID.from_int(1234).to_int()
    1234
    """

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel: discord.abc.GuildChannel) -> "ChannelID":
        return cls(channel.id)
