"""
GuildLogSettingsService: orchestrates guild log settings persistence.

Responsibilities:
- Initialize the database at startup and load every guild's record
- Persist a guild's settings in one atomic transaction
- Delete a guild's settings
- Per-guild async locks so two guilds can persist concurrently

All raw SQL is delegated to the repository.
"""

from __future__ import annotations

import asyncio
from typing import Dict

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.guild_settings import GuildLogSettings
from logcord.database.db_connection import db_connection
from logcord.database.database import database
from logcord.settings.repositories import GuildLogSettingsRepository, GuildLogSettingsRow
from logcord.util.logger import get_logger

logger = get_logger("guild_settings_service")


class GuildLogSettingsService:
    """
    Orchestrates guild log settings persistence.

    - No SQL here, only repository calls, transactions and locks.
    - Per-guild locks allow independent guilds to persist concurrently.
    """

    def __init__(self) -> None:
        self._repo = GuildLogSettingsRepository()
        self._per_guild_locks: Dict[int, asyncio.Lock] = {}

    def _lock_for(self, guild_id: GuildID) -> asyncio.Lock:
        gid = guild_id.to_int()
        if gid not in self._per_guild_locks:
            self._per_guild_locks[gid] = asyncio.Lock()
        return self._per_guild_locks[gid]

    async def initialize(self) -> bool:
        """Initialize the underlying database (schema creation)."""
        ok = await database.initialize()
        if ok:
            logger.info("[GUILD SETTINGS SERVICE] Database initialized")
        return ok

    async def load_all(self) -> Dict[GuildID, GuildLogSettings]:
        """Load every guild's log settings, keyed by GuildID."""
        async with db_connection.read() as conn:
            rows = await self._repo.get_all(conn)

        result = {GuildID.from_int(gid): _row_to_settings(row) for gid, row in rows.items()}
        logger.info("[GUILD SETTINGS SERVICE] Loaded %d guilds from database", len(result))
        return result

    async def fetch(self, guild_id: GuildID) -> GuildLogSettings | None:
        """Load a single guild's settings, or None if the guild has no persisted record."""
        async with db_connection.read() as conn:
            row = await self._repo.get(conn, guild_id)
        return _row_to_settings(row) if row is not None else None

    async def save(self, guild_id: GuildID, settings: GuildLogSettings) -> bool:
        """
        Persist all settings for a guild in a single atomic transaction.

        Two saves for the same guild are serialized; different guilds proceed
        concurrently.
        """
        async with self._lock_for(guild_id):
            try:
                async with db_connection.transaction() as conn:
                    await self._repo.upsert(conn, _settings_to_row(guild_id, settings))

                logger.debug("[GUILD SETTINGS SERVICE] Persisted guild %s", guild_id.to_int())
                return True
            except Exception:
                logger.exception("[GUILD SETTINGS SERVICE] Failed to persist guild %s", guild_id.to_int())
                return False

    async def delete(self, guild_id: GuildID) -> bool:
        """Delete the persisted log settings of a guild, serialized with its saves."""
        async with self._lock_for(guild_id):
            try:
                async with db_connection.transaction() as conn:
                    await self._repo.delete(conn, guild_id)

                logger.debug("[GUILD SETTINGS SERVICE] Deleted settings for guild %s", guild_id.to_int())
                return True
            except Exception:
                logger.exception("[GUILD SETTINGS SERVICE] Failed to delete guild %s", guild_id.to_int())
                return False


# ------------------------------------------------------------------
# Private helpers: convert between GuildLogSettings and repo rows
# ------------------------------------------------------------------

def _row_to_settings(row: GuildLogSettingsRow) -> GuildLogSettings:
    return GuildLogSettings(
        guild_id=GuildID.from_int(row.guild_id),
        logs_enabled=row.logs_enabled,
        join_enabled=row.join_enabled,
        left_enabled=row.left_enabled,
        rename_enabled=row.rename_enabled,
        kick_enabled=row.kick_enabled,
        ban_enabled=row.ban_enabled,
        message_delete_enabled=row.message_delete_enabled,
        message_edit_enabled=row.message_edit_enabled,
        message_attachment_enabled=row.message_attachment_enabled,
        general_channel_id=ChannelID.from_int(row.general_channel_id) if row.general_channel_id else None,
        sensitive_channel_id=ChannelID.from_int(row.sensitive_channel_id) if row.sensitive_channel_id else None,
    )


def _settings_to_row(guild_id: GuildID, settings: GuildLogSettings) -> GuildLogSettingsRow:
    return GuildLogSettingsRow(
        guild_id=guild_id.to_int(),
        logs_enabled=settings.logs_enabled,
        join_enabled=settings.join_enabled,
        left_enabled=settings.left_enabled,
        rename_enabled=settings.rename_enabled,
        kick_enabled=settings.kick_enabled,
        ban_enabled=settings.ban_enabled,
        message_delete_enabled=settings.message_delete_enabled,
        message_edit_enabled=settings.message_edit_enabled,
        message_attachment_enabled=settings.message_attachment_enabled,
        general_channel_id=settings.general_channel_id.to_int() if settings.general_channel_id else None,
        sensitive_channel_id=settings.sensitive_channel_id.to_int() if settings.sensitive_channel_id else None,
    )


guild_settings_service = GuildLogSettingsService()
