"""
Audit log correlation for ambiguous member events.

A member disappearing from a guild is either a voluntary leave or a kick, and a
ban or unban may or may not be logged with moderator and reason. The correlator
answers both questions from the guild audit log and falls back to the plain
event whenever the log cannot be read.
"""

from typing import Collection, Optional, Union

import discord

from logcord.datatypes.log_event_datatypes import (
    AuditAction,
    AuditEntry,
    BanDirection,
    BanLogEvent,
    KickLogEvent,
    LogEvent,
    LogEventKind,
    MemberLogEvent,
    MemberReference,
)
from logcord.util.logger import get_logger

logger = get_logger("audit_correlator")

# Actions that can explain why a member is gone
MEMBER_REMOVE_ACTIONS = frozenset({
    AuditAction.MEMBER_KICK,
    AuditAction.MEMBER_BAN_ADD,
    AuditAction.MEMBER_BAN_REMOVE,
})


def can_view_audit_log(guild: discord.Guild) -> bool:
    """Return True if the bot's own member holds View Audit Log in the guild."""
    me = getattr(guild, "me", None)
    if me is None:
        return False
    return bool(me.guild_permissions.view_audit_log)


class AuditCorrelator:
    """Resolve member removals and ban events against the guild audit log.

    Parameters
    ----------
    fetch_limit:
        Maximum number of audit log entries read per lookup, newest first.
    """

    def __init__(self, fetch_limit: int = 50):
        self.fetch_limit = fetch_limit

    async def resolve_member(self, reference: MemberReference) -> Optional[discord.Member]:
        """Return the full member behind a reference, fetching it if needed.

        Returns None when the member cannot be fetched.
        """
        if reference.member is not None:
            return reference.member

        try:
            return await reference.guild.fetch_member(reference.user.id)
        except discord.HTTPException as exc:
            logger.debug(
                "[AUDIT CORRELATOR] Could not resolve member %s in guild %s: %s",
                reference.user.id,
                reference.guild.id,
                exc,
            )
        except Exception as exc:
            logger.warning(
                "[AUDIT CORRELATOR] Fetching member %s in guild %s failed (%s: %s)",
                reference.user.id,
                reference.guild.id,
                type(exc).__name__,
                exc,
            )
        return None

    async def resolve_member_remove(self, reference: MemberReference) -> Optional[LogEvent]:
        """Classify a member removal as a leave or a kick.

        Returns a ``left`` event when nothing in the audit log explains the
        removal, a ``kick`` event carrying the entry for a matching kick, and
        None when the newest matching entry is a ban or unban; the ban listener
        reports those.
        """
        guild = reference.guild
        member = await self.resolve_member(reference)
        if member is None:
            return MemberLogEvent(kind=LogEventKind.LEFT, guild=guild, member=reference.user)

        if not can_view_audit_log(guild):
            return MemberLogEvent(kind=LogEventKind.LEFT, guild=guild, member=member)

        entry = await self.find_entry(guild, member.id, MEMBER_REMOVE_ACTIONS)
        if entry is None:
            return MemberLogEvent(kind=LogEventKind.LEFT, guild=guild, member=member)
        if entry.action is AuditAction.MEMBER_KICK:
            return KickLogEvent(guild=guild, member=member, entry=entry)

        logger.debug(
            "[AUDIT CORRELATOR] Removal of %s in guild %s matches %s; left to the ban listener",
            member.id,
            guild.id,
            entry.action.value,
        )
        return None

    async def resolve_ban(
        self,
        guild: discord.Guild,
        user: Union[discord.User, discord.Member],
        direction: BanDirection,
    ) -> BanLogEvent:
        """Attach the matching audit entry to a ban or unban when there is one."""
        if not can_view_audit_log(guild):
            return BanLogEvent(kind=direction.bare_kind, guild=guild, user=user)

        entry = await self.find_entry(guild, user.id, {direction.audit_action}, action_filter=direction.audit_action)
        if entry is None:
            return BanLogEvent(kind=direction.bare_kind, guild=guild, user=user)
        return BanLogEvent(kind=direction.with_cause_kind, guild=guild, user=user, entry=entry)

    async def find_entry(
        self,
        guild: discord.Guild,
        target_id: int,
        actions: Collection[AuditAction],
        action_filter: Optional[AuditAction] = None,
    ) -> Optional[AuditEntry]:
        """Return the newest audit entry with one of ``actions`` against ``target_id``.

        ``action_filter`` narrows the query on Discord's side. Returns None when
        nothing matches or the audit log cannot be read.
        """
        discord_action = action_filter.to_discord() if action_filter is not None else None
        try:
            async for raw_entry in guild.audit_logs(limit=self.fetch_limit, action=discord_action):
                entry = AuditEntry.from_discord(raw_entry)
                if entry is not None and entry.action in actions and entry.target_id == target_id:
                    return entry
        except discord.HTTPException as exc:
            logger.warning("[AUDIT CORRELATOR] Audit log query failed for guild %s: %s", guild.id, exc)
        except Exception as exc:
            logger.warning(
                "[AUDIT CORRELATOR] Audit log unreachable for guild %s (%s: %s)",
                guild.id,
                type(exc).__name__,
                exc,
            )
        return None
