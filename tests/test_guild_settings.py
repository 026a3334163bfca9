import asyncio
import sqlite3
from unittest.mock import AsyncMock, MagicMock

import pytest

from logcord.configuration.guild_settings import GuildSettingsManager
from logcord.database.database import Database
from logcord.database.db_connection import ConnectionManager
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.guild_settings import GuildLogSettings
from logcord.datatypes.log_event_datatypes import LogChannelCategory, LogSettingsKey
from logcord.settings import guild_settings_service as service_module
from logcord.settings.guild_settings_service import GuildLogSettingsService


def _use_temp_database(monkeypatch, db_path):
    connection = ConnectionManager()
    monkeypatch.setattr(service_module, "db_connection", connection)
    monkeypatch.setattr(service_module, "database", Database(connection=connection, db_path=db_path))
    return connection


def test_defaults_are_all_disabled(settings_manager):
    settings = settings_manager.get_guild_settings(GuildID(1))

    assert settings.logs_enabled is False
    assert not any(settings.is_event_enabled(key) for key in LogSettingsKey)
    assert settings.channel_for(LogChannelCategory.GENERAL) is None
    assert settings.channel_for(LogChannelCategory.SENSITIVE) is None


def test_mutators_update_cache(settings_manager):
    gid = GuildID(1)

    settings_manager.set_logs_enabled(gid, True)
    settings_manager.set_event_enabled(gid, LogSettingsKey.KICK, True)
    settings_manager.set_log_channel(gid, LogChannelCategory.SENSITIVE, ChannelID(77))

    settings = settings_manager.get_guild_settings(gid)
    assert settings.logs_enabled is True
    assert settings.is_event_enabled(LogSettingsKey.KICK) is True
    assert settings.is_event_enabled(LogSettingsKey.BAN) is False
    assert settings.channel_for(LogChannelCategory.SENSITIVE) == ChannelID(77)
    assert settings_manager.list_guild_ids() == [gid]

    settings_manager.set_log_channel(gid, LogChannelCategory.SENSITIVE, None)
    assert settings.channel_for(LogChannelCategory.SENSITIVE) is None


@pytest.mark.asyncio
async def test_find_or_create_returns_same_record(settings_manager):
    first = await settings_manager.find_or_create(GuildID(5))
    second = await settings_manager.find_or_create(GuildID("5"))

    assert first is second
    assert first == GuildLogSettings(guild_id=GuildID(5))


@pytest.mark.asyncio
async def test_find_or_create_read_failure_returns_uncached_default():
    service = MagicMock(spec=GuildLogSettingsService)
    service.initialize = AsyncMock(return_value=True)
    service.load_all = AsyncMock(return_value={})
    service.fetch = AsyncMock(side_effect=RuntimeError("disk gone"))
    manager = GuildSettingsManager(service=service)
    await manager.async_init()

    settings = await manager.find_or_create(GuildID(9))

    assert settings.logs_enabled is False
    assert manager.list_guild_ids() == []


@pytest.mark.asyncio
async def test_async_init_raises_when_database_fails():
    service = MagicMock(spec=GuildLogSettingsService)
    service.initialize = AsyncMock(return_value=False)
    manager = GuildSettingsManager(service=service)

    with pytest.raises(RuntimeError):
        await manager.async_init()


@pytest.mark.asyncio
async def test_settings_survive_restart(tmp_path, monkeypatch):
    db_path = tmp_path / "logcord.db"
    connection = _use_temp_database(monkeypatch, db_path)
    gid = GuildID(1234)

    try:
        manager = GuildSettingsManager(service=GuildLogSettingsService())
        await manager.async_init()
        manager.set_logs_enabled(gid, True)
        manager.set_event_enabled(gid, LogSettingsKey.BAN, True)
        manager.set_log_channel(gid, LogChannelCategory.GENERAL, ChannelID(500))
        await manager.shutdown()

        reloaded = GuildSettingsManager(service=GuildLogSettingsService())
        await reloaded.async_init()
        settings = reloaded.get_guild_settings(gid)
    finally:
        await connection.close()

    assert settings.logs_enabled is True
    assert settings.ban_enabled is True
    assert settings.kick_enabled is False
    assert settings.general_channel_id == ChannelID(500)
    assert settings.sensitive_channel_id is None

    conn = sqlite3.connect(db_path)
    row = conn.execute(
        "SELECT logs_enabled, ban_enabled, general_channel_id FROM guild_log_settings WHERE guild_id = ?",
        (1234,),
    ).fetchone()
    conn.close()
    assert row == (1, 1, 500)


@pytest.mark.asyncio
async def test_new_guild_record_is_persisted(tmp_path, monkeypatch):
    db_path = tmp_path / "logcord.db"
    connection = _use_temp_database(monkeypatch, db_path)

    try:
        manager = GuildSettingsManager(service=GuildLogSettingsService())
        await manager.async_init()
        await manager.find_or_create(GuildID(77))
        await manager.shutdown()

        stored = await GuildLogSettingsService().fetch(GuildID(77))
    finally:
        await connection.close()

    assert stored == GuildLogSettings(guild_id=GuildID(77))


@pytest.mark.asyncio
async def test_service_delete_removes_record(tmp_path, monkeypatch):
    connection = _use_temp_database(monkeypatch, tmp_path / "logcord.db")
    service = GuildLogSettingsService()

    try:
        assert await service.initialize() is True
        assert await service.save(GuildID(3), GuildLogSettings(guild_id=GuildID(3), logs_enabled=True)) is True
        assert (await service.fetch(GuildID(3))).logs_enabled is True

        assert await service.delete(GuildID(3)) is True
        assert await service.fetch(GuildID(3)) is None
    finally:
        await connection.close()


@pytest.mark.asyncio
async def test_service_delete_waits_for_guild_lock(tmp_path, monkeypatch):
    connection = _use_temp_database(monkeypatch, tmp_path / "logcord.db")
    service = GuildLogSettingsService()
    gid = GuildID(4)

    try:
        await service.initialize()
        await service.save(gid, GuildLogSettings(guild_id=gid, logs_enabled=True))

        lock = service._lock_for(gid)
        await lock.acquire()
        pending = asyncio.create_task(service.delete(gid))
        await asyncio.sleep(0.05)
        assert not pending.done()
        assert await service.fetch(gid) is not None

        lock.release()
        assert await pending is True
        assert await service.fetch(gid) is None
    finally:
        await connection.close()
