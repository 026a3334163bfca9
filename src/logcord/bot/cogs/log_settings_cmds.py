"""
Log settings cog: the ``/logs`` slash command group.

Subcommands:
- /logs show: Current log state, channels and per-event toggles
- /logs enable, /logs disable: Master switch for logging in this server
- /logs event <event> <enabled>: Toggle one log event, or all of them
- /logs channel <category> [channel]: Set or reset the general/sensitive log channel

All commands require the Manage Server permission and reply ephemerally.
"""

from typing import Optional

import discord
from discord.ext import commands

from logcord.configuration.guild_settings import guild_settings_manager
from logcord.datatypes.discord_datatypes import ChannelID, GuildID
from logcord.datatypes.guild_settings import GuildLogSettings
from logcord.datatypes.log_event_datatypes import LogChannelCategory, LogSettingsKey
from logcord.util.logger import get_logger

logger = get_logger("log_settings_cog")

ALL_EVENTS = "all"

EVENT_LABELS = {
    LogSettingsKey.JOIN: "Member joins",
    LogSettingsKey.LEFT: "Member leaves",
    LogSettingsKey.RENAME: "Nickname changes",
    LogSettingsKey.KICK: "Kicks",
    LogSettingsKey.BAN: "Bans and unbans",
    LogSettingsKey.MESSAGE_DELETE: "Deleted messages",
    LogSettingsKey.MESSAGE_EDIT: "Edited messages",
    LogSettingsKey.MESSAGE_ATTACHMENT: "Message attachments",
}

EVENT_CHOICES = [key.value for key in LogSettingsKey] + [ALL_EVENTS]
CATEGORY_CHOICES = [category.value for category in LogChannelCategory]


def _check(state: bool) -> str:
    return "✅" if state else "❌"


def build_log_settings_embed(guild_name: str, settings: GuildLogSettings) -> discord.Embed:
    """Render a guild's log settings as an embed."""
    embed = discord.Embed(
        title=f"Log settings for {discord.utils.escape_markdown(guild_name)}",
        color=discord.Color.blurple(),
    )
    general_lines = [f"{_check(settings.logs_enabled)} Logging {'enabled' if settings.logs_enabled else 'disabled'}"]
    for category in LogChannelCategory:
        channel_id = settings.channel_for(category)
        channel_text = f"<#{channel_id}>" if channel_id is not None else "not set"
        general_lines.append(f"{_check(channel_id is not None)} {category.value.capitalize()} channel: {channel_text}")
    embed.description = "\n".join(general_lines)
    embed.add_field(
        name="Events",
        value="\n".join(f"{_check(settings.is_event_enabled(key))} {label}" for key, label in EVENT_LABELS.items()),
        inline=False,
    )
    return embed


class LogSettingsCog(commands.Cog):
    """Guild-level log settings commands backed by the guild settings manager."""

    logs = discord.SlashCommandGroup("logs", "Configure membership and moderation logs for this server.")

    def __init__(self, discord_bot_instance):
        self.discord_bot_instance = discord_bot_instance
        logger.info("Log settings cog loaded")

    async def _ensure_manage_context(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond("This command can only be used in a server.", ephemeral=True)
            return False
        permissions = getattr(ctx.user, "guild_permissions", None)
        if not getattr(permissions, "manage_guild", False):
            await ctx.respond("You need the Manage Server permission to configure logs.", ephemeral=True)
            return False
        return True

    @logs.command(name="show", description="Show the log settings of this server.")
    async def logs_show(self, ctx: discord.ApplicationContext):
        if not await self._ensure_manage_context(ctx):
            return
        settings = await guild_settings_manager.find_or_create(GuildID(ctx.guild_id))
        guild_name = getattr(ctx.guild, "name", str(ctx.guild_id))
        await ctx.respond(embed=build_log_settings_embed(guild_name, settings), ephemeral=True)

    @logs.command(name="enable", description="Turn logging on for this server.")
    async def logs_enable(self, ctx: discord.ApplicationContext):
        if not await self._ensure_manage_context(ctx):
            return
        guild_settings_manager.set_logs_enabled(GuildID(ctx.guild_id), True)
        await ctx.respond("Logging has been **enabled** for this server.", ephemeral=True)

    @logs.command(name="disable", description="Turn logging off for this server.")
    async def logs_disable(self, ctx: discord.ApplicationContext):
        if not await self._ensure_manage_context(ctx):
            return
        guild_settings_manager.set_logs_enabled(GuildID(ctx.guild_id), False)
        await ctx.respond("Logging has been **disabled** for this server.", ephemeral=True)

    @logs.command(name="event", description="Enable or disable logging of one event, or all of them.")
    async def logs_event(
        self,
        ctx: discord.ApplicationContext,
        event: discord.Option(str, "Event to toggle", choices=EVENT_CHOICES),
        enabled: discord.Option(bool, "Whether the event is logged"),
    ):
        if not await self._ensure_manage_context(ctx):
            return

        if event == ALL_EVENTS:
            keys = list(LogSettingsKey)
        else:
            try:
                keys = [LogSettingsKey(event)]
            except ValueError:
                await ctx.respond(f"Unknown log event `{discord.utils.escape_markdown(event)}`.", ephemeral=True)
                return

        guild_id = GuildID(ctx.guild_id)
        for key in keys:
            guild_settings_manager.set_event_enabled(guild_id, key, enabled)

        state = "enabled" if enabled else "disabled"
        label = "All log events" if event == ALL_EVENTS else EVENT_LABELS[keys[0]]
        await ctx.respond(f"{label}: **{state}**.", ephemeral=True)

    @logs.command(name="channel", description="Set the general or sensitive log channel; omit the channel to reset it.")
    async def logs_channel(
        self,
        ctx: discord.ApplicationContext,
        category: discord.Option(str, "Which log channel to set", choices=CATEGORY_CHOICES),
        channel: discord.Option(discord.TextChannel, "Destination channel", required=False, default=None),
    ):
        if not await self._ensure_manage_context(ctx):
            return

        try:
            log_category = LogChannelCategory(category)
        except ValueError:
            await ctx.respond(f"Unknown log channel `{discord.utils.escape_markdown(category)}`.", ephemeral=True)
            return

        guild_id = GuildID(ctx.guild_id)
        if channel is None:
            guild_settings_manager.set_log_channel(guild_id, log_category, None)
            await ctx.respond(f"The {log_category.value} log channel has been reset.", ephemeral=True)
            return

        if not isinstance(channel, discord.TextChannel):
            await ctx.respond("Log channels must be text channels.", ephemeral=True)
            return

        permissions = channel.permissions_for(ctx.guild.me)
        if not (permissions.view_channel and permissions.send_messages):
            await ctx.respond(f"I can't view or post in {channel.mention}.", ephemeral=True)
            return

        guild_settings_manager.set_log_channel(guild_id, log_category, ChannelID.from_channel(channel))
        await ctx.respond(f"The {log_category.value} log channel is now {channel.mention}.", ephemeral=True)


def setup(discord_bot_instance):
    """Add the log settings cog to the supplied Discord bot instance."""
    discord_bot_instance.add_cog(LogSettingsCog(discord_bot_instance))
