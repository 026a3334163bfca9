"""
Per-guild log settings cache backed by SQLite.

Every persisted guild is loaded into memory at startup. The routing resolver
reads through :meth:`GuildSettingsManager.find_or_create`; the ``/logs``
commands change settings through the mutators, which update the cache at once
and write the row in a background task.
"""

import asyncio
from typing import Dict, List, Optional, Set

from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.guild_settings import CHANNEL_FIELDS, EVENT_FLAG_FIELDS, GuildLogSettings
from logcord.datatypes.log_event_datatypes import LogChannelCategory, LogSettingsKey
from logcord.settings.guild_settings_service import GuildLogSettingsService, guild_settings_service
from logcord.util.logger import get_logger

logger = get_logger("guild_settings_manager")


class GuildSettingsManager:
    """
    In-memory registry of :class:`GuildLogSettings` with write-behind persistence.

    Until :meth:`async_init` succeeds the manager works purely in memory and
    nothing is written.
    """

    def __init__(self, service: Optional[GuildLogSettingsService] = None):
        self._service = service or guild_settings_service
        self.guilds: Dict[GuildID, GuildLogSettings] = {}
        self._pending_writes: Set[asyncio.Task] = set()
        self._db_initialized = False

    async def async_init(self) -> None:
        """Open the database and load every stored guild.

        Raises
        ------
        RuntimeError
            If the database could not be initialized.
        """
        if self._db_initialized:
            return
        if not await self._service.initialize():
            raise RuntimeError("guild settings database could not be initialized")

        self.guilds = await self._service.load_all()
        self._db_initialized = True
        logger.info("[GUILD SETTINGS MANAGER] %d guild(s) loaded", len(self.guilds))

    def ensure_guild(self, guild_id: GuildID) -> GuildLogSettings:
        """Return the cached record, inserting an all-disabled one if the guild is unknown."""
        return self.guilds.setdefault(guild_id, GuildLogSettings(guild_id=guild_id))

    def get_guild_settings(self, guild_id: GuildID) -> GuildLogSettings:
        return self.ensure_guild(guild_id)

    def list_guild_ids(self) -> List[GuildID]:
        return list(self.guilds)

    async def find_or_create(self, guild_id: GuildID) -> GuildLogSettings:
        """
        Return the guild's settings, creating an all-disabled record if none exists.

        The cache is checked first, then the database. A new record is cached
        and written in the background. When the database read fails an
        uncached all-disabled record is returned, so the guild logs nothing
        and the next lookup tries the database again.
        """
        cached = self.guilds.get(guild_id)
        if cached is not None:
            return cached

        if self._db_initialized:
            try:
                stored = await self._service.fetch(guild_id)
            except Exception:
                logger.exception("[GUILD SETTINGS MANAGER] Reading settings of guild %s failed", guild_id)
                return GuildLogSettings(guild_id=guild_id)
            if stored is not None:
                return self.guilds.setdefault(guild_id, stored)

        if guild_id in self.guilds:
            return self.guilds[guild_id]
        created = self.ensure_guild(guild_id)
        logger.debug("[GUILD SETTINGS MANAGER] New default log settings for guild %s", guild_id)
        self._persist_in_background(guild_id)
        return created

    def set_logs_enabled(self, guild_id: GuildID, enabled: bool) -> None:
        self.ensure_guild(guild_id).logs_enabled = bool(enabled)
        logger.debug("[GUILD SETTINGS MANAGER] Guild %s logs_enabled=%s", guild_id, bool(enabled))
        self._persist_in_background(guild_id)

    def set_event_enabled(self, guild_id: GuildID, key: LogSettingsKey, enabled: bool) -> None:
        """Toggle the flag of one settings key."""
        field = EVENT_FLAG_FIELDS[key]
        setattr(self.ensure_guild(guild_id), field, bool(enabled))
        logger.debug("[GUILD SETTINGS MANAGER] Guild %s %s=%s", guild_id, field, bool(enabled))
        self._persist_in_background(guild_id)

    def set_log_channel(self, guild_id: GuildID, category: LogChannelCategory, channel_id: Optional[ChannelID]) -> None:
        """Point a channel category at ``channel_id``; None clears it."""
        field = CHANNEL_FIELDS[category]
        setattr(self.ensure_guild(guild_id), field, channel_id)
        logger.debug("[GUILD SETTINGS MANAGER] Guild %s %s=%s", guild_id, field, channel_id)
        self._persist_in_background(guild_id)

    def _persist_in_background(self, guild_id: GuildID) -> None:
        if not self._db_initialized:
            logger.debug("[GUILD SETTINGS MANAGER] No database yet; guild %s stays in memory", guild_id)
            return
        try:
            task = asyncio.get_running_loop().create_task(self.persist_guild(guild_id))
        except RuntimeError:
            logger.warning("[GUILD SETTINGS MANAGER] No event loop running; guild %s not written", guild_id)
            return

        self._pending_writes.add(task)
        task.add_done_callback(lambda done: self._on_write_done(guild_id, done))

    def _on_write_done(self, guild_id: GuildID, task: asyncio.Task) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            logger.warning("[GUILD SETTINGS MANAGER] Write of guild %s was cancelled", guild_id)
        elif task.exception() is not None:
            logger.error("[GUILD SETTINGS MANAGER] Write of guild %s raised", guild_id, exc_info=task.exception())
        elif not task.result():
            logger.error("[GUILD SETTINGS MANAGER] Write of guild %s failed", guild_id)

    async def persist_guild(self, guild_id: GuildID) -> bool:
        """Write one guild's cached record now. Returns False if it is not cached or the write failed."""
        settings = self.guilds.get(guild_id)
        if settings is None:
            logger.warning("[GUILD SETTINGS MANAGER] Guild %s is not cached; nothing to write", guild_id)
            return False
        return await self._service.save(guild_id, settings)

    async def shutdown(self) -> None:
        """Wait for every queued write to finish."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
        logger.info("[GUILD SETTINGS MANAGER] All pending writes flushed")


guild_settings_manager = GuildSettingsManager()
