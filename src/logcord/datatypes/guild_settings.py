"""
Persistent per-guild log configuration.

Database schema:
- guild_log_settings table with columns: guild_id, logs_enabled, one
  <key>_enabled flag per LogSettingsKey, general_channel_id, sensitive_channel_id
"""
from typing import Dict, Optional
from dataclasses import dataclass
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.log_event_datatypes import LogChannelCategory, LogSettingsKey


# Maps LogSettingsKey enum to the corresponding boolean field name on GuildLogSettings
EVENT_FLAG_FIELDS: Dict[LogSettingsKey, str] = {
    LogSettingsKey.JOIN: "join_enabled",
    LogSettingsKey.LEFT: "left_enabled",
    LogSettingsKey.RENAME: "rename_enabled",
    LogSettingsKey.KICK: "kick_enabled",
    LogSettingsKey.BAN: "ban_enabled",
    LogSettingsKey.MESSAGE_DELETE: "message_delete_enabled",
    LogSettingsKey.MESSAGE_EDIT: "message_edit_enabled",
    LogSettingsKey.MESSAGE_ATTACHMENT: "message_attachment_enabled",
}

# Maps LogChannelCategory enum to the corresponding channel field name on GuildLogSettings
CHANNEL_FIELDS: Dict[LogChannelCategory, str] = {
    LogChannelCategory.GENERAL: "general_channel_id",
    LogChannelCategory.SENSITIVE: "sensitive_channel_id",
}


@dataclass(slots=True)
class GuildLogSettings:
    """Persistent per-guild log configuration values. A new record has everything disabled."""

    guild_id: GuildID
    logs_enabled: bool = False
    join_enabled: bool = False
    left_enabled: bool = False
    rename_enabled: bool = False
    kick_enabled: bool = False
    ban_enabled: bool = False
    message_delete_enabled: bool = False
    message_edit_enabled: bool = False
    message_attachment_enabled: bool = False
    general_channel_id: Optional[ChannelID] = None
    sensitive_channel_id: Optional[ChannelID] = None

    def is_event_enabled(self, key: LogSettingsKey) -> bool:
        return bool(getattr(self, EVENT_FLAG_FIELDS[key]))

    def channel_for(self, category: LogChannelCategory) -> Optional[ChannelID]:
        return getattr(self, CHANNEL_FIELDS[category])
