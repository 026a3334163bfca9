from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from fakes import text_channel
from logcord.bot.cogs import log_settings_cmds
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.guild_settings import GuildLogSettings
from logcord.datatypes.log_event_datatypes import LogChannelCategory, LogSettingsKey


@pytest.fixture
def manager(monkeypatch, settings_manager):
    monkeypatch.setattr(log_settings_cmds, "guild_settings_manager", settings_manager)
    return settings_manager


def _ctx(guild_id=10, manage_guild=True):
    return SimpleNamespace(
        guild_id=guild_id,
        guild=SimpleNamespace(name="Test Guild", me=SimpleNamespace()),
        user=SimpleNamespace(guild_permissions=SimpleNamespace(manage_guild=manage_guild)),
        respond=AsyncMock(),
    )


def _cog():
    return log_settings_cmds.LogSettingsCog(SimpleNamespace())


def test_setup_adds_cog():
    captured = {}

    fake_bot = SimpleNamespace(add_cog=lambda cog: captured.setdefault("cog", cog))
    log_settings_cmds.setup(fake_bot)

    assert isinstance(captured["cog"], log_settings_cmds.LogSettingsCog)


@pytest.mark.asyncio
async def test_enable_and_disable_toggle_master_switch(manager):
    ctx = _ctx()

    await log_settings_cmds.LogSettingsCog.logs_enable.callback(_cog(), ctx)
    assert manager.get_guild_settings(GuildID(10)).logs_enabled is True

    await log_settings_cmds.LogSettingsCog.logs_disable.callback(_cog(), ctx)
    assert manager.get_guild_settings(GuildID(10)).logs_enabled is False
    assert ctx.respond.await_count == 2


@pytest.mark.asyncio
async def test_commands_require_guild(manager):
    ctx = _ctx(guild_id=None)

    await log_settings_cmds.LogSettingsCog.logs_enable.callback(_cog(), ctx)

    ctx.respond.assert_awaited_once_with("This command can only be used in a server.", ephemeral=True)
    assert manager.list_guild_ids() == []


@pytest.mark.asyncio
async def test_commands_require_manage_guild(manager):
    ctx = _ctx(manage_guild=False)

    await log_settings_cmds.LogSettingsCog.logs_event.callback(_cog(), ctx, "kick", True)

    ctx.respond.assert_awaited_once_with("You need the Manage Server permission to configure logs.", ephemeral=True)
    assert manager.list_guild_ids() == []


@pytest.mark.asyncio
async def test_event_toggles_single_key(manager):
    ctx = _ctx()

    await log_settings_cmds.LogSettingsCog.logs_event.callback(_cog(), ctx, "kick", True)

    settings = manager.get_guild_settings(GuildID(10))
    assert settings.is_event_enabled(LogSettingsKey.KICK) is True
    assert settings.is_event_enabled(LogSettingsKey.BAN) is False


@pytest.mark.asyncio
async def test_event_all_toggles_every_key(manager):
    ctx = _ctx()

    await log_settings_cmds.LogSettingsCog.logs_event.callback(_cog(), ctx, "all", True)

    settings = manager.get_guild_settings(GuildID(10))
    assert all(settings.is_event_enabled(key) for key in LogSettingsKey)


@pytest.mark.asyncio
async def test_event_rejects_unknown_key(manager):
    ctx = _ctx()

    await log_settings_cmds.LogSettingsCog.logs_event.callback(_cog(), ctx, "typing", True)

    assert "Unknown log event" in ctx.respond.await_args.args[0]


@pytest.mark.asyncio
async def test_channel_sets_and_resets(manager):
    ctx = _ctx()
    channel = text_channel(500)
    channel.mention = "<#500>"
    channel.permissions_for = MagicMock(return_value=SimpleNamespace(view_channel=True, send_messages=True))

    await log_settings_cmds.LogSettingsCog.logs_channel.callback(_cog(), ctx, "general", channel)
    settings = manager.get_guild_settings(GuildID(10))
    assert settings.channel_for(LogChannelCategory.GENERAL) == ChannelID(500)

    await log_settings_cmds.LogSettingsCog.logs_channel.callback(_cog(), ctx, "general", None)
    assert settings.channel_for(LogChannelCategory.GENERAL) is None


@pytest.mark.asyncio
async def test_channel_requires_bot_access(manager):
    ctx = _ctx()
    channel = text_channel(500)
    channel.mention = "<#500>"
    channel.permissions_for = MagicMock(return_value=SimpleNamespace(view_channel=True, send_messages=False))

    await log_settings_cmds.LogSettingsCog.logs_channel.callback(_cog(), ctx, "sensitive", channel)

    channel.permissions_for.assert_called_once_with(ctx.guild.me)
    assert manager.get_guild_settings(GuildID(10)).channel_for(LogChannelCategory.SENSITIVE) is None


@pytest.mark.asyncio
async def test_show_responds_with_embed(manager):
    ctx = _ctx()

    await log_settings_cmds.LogSettingsCog.logs_show.callback(_cog(), ctx)

    embed = ctx.respond.await_args.kwargs["embed"]
    assert isinstance(embed, discord.Embed)
    assert ctx.respond.await_args.kwargs["ephemeral"] is True


def test_embed_lists_every_event():
    settings = GuildLogSettings(guild_id=GuildID(1), logs_enabled=True, kick_enabled=True, general_channel_id=ChannelID(5))

    embed = log_settings_cmds.build_log_settings_embed("Guild", settings)

    assert "Logging enabled" in embed.description
    assert "<#5>" in embed.description
    events = embed.fields[0].value.splitlines()
    assert len(events) == len(LogSettingsKey)
    assert "✅ Kicks" in events
