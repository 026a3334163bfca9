"""
Log event kinds and the typed events that flow through the logging pipeline.

An event is created by the normalizer or the audit correlator, consumed once by
the routing resolver and the renderer, then dropped. Nothing here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import discord


class LogEventKind(Enum):
    """Every kind of log event the pipeline can emit."""

    JOIN = "join"
    LEFT = "left"
    KICK = "kick"
    RENAME = "rename"
    BAN = "ban"
    UNBAN = "unban"
    BAN_WITH_CAUSE = "ban_with_cause"
    UNBAN_WITH_CAUSE = "unban_with_cause"

    def __str__(self) -> str:
        return self.value


# Suffix carried by kinds enriched with an audit log entry
WITH_CAUSE_SUFFIX = "_with_cause"


class LogSettingsKey(Enum):
    """Base event kinds that own an enabled flag in the guild log settings."""

    JOIN = "join"
    LEFT = "left"
    RENAME = "rename"
    KICK = "kick"
    BAN = "ban"
    MESSAGE_DELETE = "message_delete"
    MESSAGE_EDIT = "message_edit"
    MESSAGE_ATTACHMENT = "message_attachment"

    def __str__(self) -> str:
        return self.value


class LogChannelCategory(Enum):
    """The two configurable log destinations of a guild."""

    GENERAL = "general"
    SENSITIVE = "sensitive"

    def __str__(self) -> str:
        return self.value


class AuditAction(Enum):
    """Audit log actions the correlator understands."""

    MEMBER_KICK = "member_kick"
    MEMBER_BAN_ADD = "member_ban_add"
    MEMBER_BAN_REMOVE = "member_ban_remove"

    def to_discord(self) -> discord.AuditLogAction:
        return _TO_DISCORD_ACTION[self]

    @classmethod
    def from_discord(cls, action: discord.AuditLogAction) -> Optional["AuditAction"]:
        """Map a py-cord audit log action, returning None for unrelated actions."""
        for audit_action, discord_action in _TO_DISCORD_ACTION.items():
            if discord_action == action:
                return audit_action
        return None


_TO_DISCORD_ACTION = {
    AuditAction.MEMBER_KICK: discord.AuditLogAction.kick,
    AuditAction.MEMBER_BAN_ADD: discord.AuditLogAction.ban,
    AuditAction.MEMBER_BAN_REMOVE: discord.AuditLogAction.unban,
}


@dataclass(frozen=True, slots=True)
class AuditEntry:
    """One audit log entry, reduced to what the renderers need.

    Attributes:
        action: Which moderation action was logged.
        target_id: ID of the user the action was taken against.
        executor_tag: Tag of the moderator who performed the action.
        reason: Free-text reason, if the moderator gave one.
    """

    action: AuditAction
    target_id: int
    executor_tag: str
    reason: Optional[str] = None

    @property
    def has_reason(self) -> bool:
        return bool(self.reason and self.reason.strip())

    @classmethod
    def from_discord(cls, entry: discord.AuditLogEntry) -> Optional["AuditEntry"]:
        """Build an AuditEntry from a py-cord entry, or None if the action is not a member action."""
        action = AuditAction.from_discord(entry.action)
        target_id = getattr(entry.target, "id", None)
        if action is None or target_id is None:
            return None
        executor = entry.user
        return cls(
            action=action,
            target_id=int(target_id),
            executor_tag=str(executor) if executor is not None else "Unknown",
            reason=entry.reason,
        )


class BanDirection(Enum):
    """Direction of a ban management event."""

    BAN = "ban"
    UNBAN = "unban"

    @property
    def bare_kind(self) -> LogEventKind:
        return LogEventKind.BAN if self is BanDirection.BAN else LogEventKind.UNBAN

    @property
    def with_cause_kind(self) -> LogEventKind:
        return LogEventKind.BAN_WITH_CAUSE if self is BanDirection.BAN else LogEventKind.UNBAN_WITH_CAUSE

    @property
    def audit_action(self) -> AuditAction:
        return AuditAction.MEMBER_BAN_ADD if self is BanDirection.BAN else AuditAction.MEMBER_BAN_REMOVE


@dataclass(frozen=True, slots=True)
class MemberReference:
    """A removed member that is either resolved or only a bare user reference.

    The gateway hands over a full :class:`discord.Member` when the member was
    cached and only a :class:`discord.User` otherwise. The audit correlator turns
    a bare reference into a member through its explicit resolve step.
    """

    guild: discord.Guild
    user: Union[discord.User, discord.Member]
    member: Optional[discord.Member] = None

    @property
    def is_resolved(self) -> bool:
        return self.member is not None

    @classmethod
    def resolved(cls, member: discord.Member) -> "MemberReference":
        return cls(guild=member.guild, user=member, member=member)

    @classmethod
    def reference(cls, guild: discord.Guild, user: discord.User) -> "MemberReference":
        return cls(guild=guild, user=user)


# -------------------- Log events --------------------

@dataclass(frozen=True, slots=True)
class MemberLogEvent:
    """A member joined or left the guild."""

    kind: LogEventKind
    guild: discord.Guild
    member: Union[discord.Member, discord.User]


@dataclass(frozen=True, slots=True)
class KickLogEvent:
    """A member was kicked; ``entry`` names the moderator and reason."""

    guild: discord.Guild
    member: discord.Member
    entry: AuditEntry
    kind: LogEventKind = field(default=LogEventKind.KICK, init=False)


@dataclass(frozen=True, slots=True)
class RenameLogEvent:
    """A member's nickname changed between two snapshots."""

    before: discord.Member
    after: discord.Member
    kind: LogEventKind = field(default=LogEventKind.RENAME, init=False)


@dataclass(frozen=True, slots=True)
class BanLogEvent:
    """A user was banned or unbanned, optionally with the matching audit entry."""

    kind: LogEventKind
    guild: discord.Guild
    user: Union[discord.User, discord.Member]
    entry: Optional[AuditEntry] = None


LogEvent = Union[MemberLogEvent, KickLogEvent, RenameLogEvent, BanLogEvent]
