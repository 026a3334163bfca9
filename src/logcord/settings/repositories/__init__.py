"""Repository layer for guild log settings database access."""
from logcord.settings.repositories.guild_log_settings_repo import GuildLogSettingsRepository, GuildLogSettingsRow

__all__ = [
    "GuildLogSettingsRepository",
    "GuildLogSettingsRow",
]
