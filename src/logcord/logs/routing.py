"""
Routing of log events to a guild's log channel.

The resolver walks unresolved → guild resolved → settings loaded → category
classified → accepted or rejected. Any missing precondition rejects the event
(returns None); nothing in here raises for a missing configuration.
"""

from typing import Callable, Dict, Optional

import discord

from logcord.configuration.guild_settings import GuildSettingsManager, guild_settings_manager
from logcord.datatypes.discord_datatypes import GuildID
from logcord.datatypes.log_event_datatypes import (
    WITH_CAUSE_SUFFIX,
    LogChannelCategory,
    LogEvent,
    LogEventKind,
    LogSettingsKey,
)
from logcord.util.logger import get_logger

logger = get_logger("log_routing")


# Guild of origin, per event kind
GUILD_RESOLVERS: Dict[LogEventKind, Callable[[LogEvent], discord.Guild]] = {
    LogEventKind.JOIN: lambda event: event.guild,
    LogEventKind.LEFT: lambda event: event.guild,
    LogEventKind.KICK: lambda event: event.guild,
    LogEventKind.RENAME: lambda event: event.after.guild,
    LogEventKind.BAN: lambda event: event.guild,
    LogEventKind.UNBAN: lambda event: event.guild,
    LogEventKind.BAN_WITH_CAUSE: lambda event: event.guild,
    LogEventKind.UNBAN_WITH_CAUSE: lambda event: event.guild,
}

SENSITIVE_KEYS = frozenset({
    LogSettingsKey.MESSAGE_DELETE,
    LogSettingsKey.MESSAGE_ATTACHMENT,
    LogSettingsKey.MESSAGE_EDIT,
})


def settings_key_for(kind: LogEventKind) -> LogSettingsKey:
    """Collapse an event kind to the settings key that holds its enabled flag.

    ``*_with_cause`` kinds use their base kind, and unbans share the ban flag.
    """
    name = kind.value
    if name.endswith(WITH_CAUSE_SUFFIX):
        name = name[: -len(WITH_CAUSE_SUFFIX)]
    if name == LogEventKind.UNBAN.value:
        name = LogEventKind.BAN.value
    return LogSettingsKey(name)


def channel_category_for(key: LogSettingsKey) -> LogChannelCategory:
    """Message content events go to the sensitive channel, everything else to the general one."""
    return LogChannelCategory.SENSITIVE if key in SENSITIVE_KEYS else LogChannelCategory.GENERAL


class LogRouteResolver:
    """Decide whether an event is logged and in which channel."""

    def __init__(self, settings_manager: Optional[GuildSettingsManager] = None):
        self._settings_manager = settings_manager or guild_settings_manager

    async def resolve_channel(self, event: LogEvent) -> Optional[discord.abc.GuildChannel]:
        """Return the destination channel for ``event``, or None if it must not be logged."""
        guild = GUILD_RESOLVERS[event.kind](event)
        if guild is None:
            return None

        settings = await self._settings_manager.find_or_create(GuildID.from_guild(guild))
        key = settings_key_for(event.kind)
        category = channel_category_for(key)
        channel_id = settings.channel_for(category)

        if not settings.logs_enabled or not settings.is_event_enabled(key) or channel_id is None:
            logger.debug(
                "[LOG ROUTING] %s in guild %s rejected (logs=%s, %s=%s, %s channel=%s)",
                event.kind,
                guild.id,
                settings.logs_enabled,
                key,
                settings.is_event_enabled(key),
                category,
                channel_id,
            )
            return None

        channel = guild.get_channel(channel_id.to_int())
        if channel is None:
            logger.debug("[LOG ROUTING] %s channel %s of guild %s no longer exists", category, channel_id, guild.id)
        return channel
