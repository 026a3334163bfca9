"""One-line renderers for every log event kind.

Every piece of user-controlled text (names, nicknames, reasons) has its
whitespace flattened, so a log entry is always a single line, and is passed
through :func:`discord.utils.escape_markdown` so that it renders literally.
"""

from typing import Callable, Dict, Optional, Union

import discord
from discord.utils import escape_markdown as escape

from logcord.datatypes.log_event_datatypes import (
    AuditEntry,
    BanLogEvent,
    KickLogEvent,
    LogEvent,
    LogEventKind,
    MemberLogEvent,
    RenameLogEvent,
)


def _text(value: str) -> str:
    """Flatten whitespace (newlines included) to single spaces, then escape markdown."""
    return escape(" ".join(str(value).split()))


def _subject(user: Union[discord.User, discord.Member]) -> str:
    return f"ID: {user.id} | {_text(str(user))}"


def _display_name(member: discord.Member) -> str:
    return member.nick if member.nick is not None else member.name


def _cause(entry: Optional[AuditEntry]) -> str:
    if entry is None:
        return ""
    cause = f" by {_text(entry.executor_tag)}"
    if entry.has_reason:
        return f"{cause} with reason {_text(entry.reason)}"
    return f"{cause} with no reason"


def render_join(event: MemberLogEvent) -> str:
    return f":inbox_tray: [JOIN] | {_subject(event.member)}"


def render_left(event: MemberLogEvent) -> str:
    return f":outbox_tray: [LEAVE] | {_subject(event.member)}"


def render_rename(event: RenameLogEvent) -> str:
    return (
        f":abc: [RENAME] | ID: {event.before.id} | "
        f"{_text(_display_name(event.before))} → {_text(_display_name(event.after))}"
    )


def render_kick(event: KickLogEvent) -> str:
    return f":boot: [KICK]{_cause(event.entry)} | {_subject(event.member)}"


def render_ban(event: BanLogEvent) -> str:
    return f":hammer: [BAN]{_cause(event.entry)} | {_subject(event.user)}"


def render_unban(event: BanLogEvent) -> str:
    return f":peace: [UNBAN]{_cause(event.entry)} | {_subject(event.user)}"


RENDERERS: Dict[LogEventKind, Callable[[LogEvent], str]] = {
    LogEventKind.JOIN: render_join,
    LogEventKind.LEFT: render_left,
    LogEventKind.RENAME: render_rename,
    LogEventKind.KICK: render_kick,
    LogEventKind.BAN: render_ban,
    LogEventKind.BAN_WITH_CAUSE: render_ban,
    LogEventKind.UNBAN: render_unban,
    LogEventKind.UNBAN_WITH_CAUSE: render_unban,
}


def render_event(event: LogEvent) -> str:
    """Render the log line for any event kind."""
    return RENDERERS[event.kind](event)
