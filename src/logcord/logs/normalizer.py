"""Turn gateway member events into log events. No network I/O happens here."""

from typing import Optional, Union

import discord

from logcord.datatypes.log_event_datatypes import (
    LogEventKind,
    MemberLogEvent,
    MemberReference,
    RenameLogEvent,
)


def normalize_member_join(member: discord.Member) -> MemberLogEvent:
    """A join never needs enrichment."""
    return MemberLogEvent(kind=LogEventKind.JOIN, guild=member.guild, member=member)


def normalize_member_update(before: discord.Member, after: discord.Member) -> Optional[RenameLogEvent]:
    """Return a rename event when the nickname changed, otherwise None.

    Role or avatar updates leave the nickname alone and produce nothing; two
    ``None`` nicknames count as unchanged.
    """
    if before.nick == after.nick:
        return None
    return RenameLogEvent(before=before, after=after)


def member_reference_from_removal(
    guild: discord.Guild,
    user: Union[discord.User, discord.Member],
) -> MemberReference:
    """Wrap a removed user for the audit correlator.

    The gateway delivers a full member only when it was cached; anything else
    stays a bare reference that the correlator must resolve.
    """
    if isinstance(user, discord.Member):
        return MemberReference.resolved(user)
    return MemberReference.reference(guild, user)
