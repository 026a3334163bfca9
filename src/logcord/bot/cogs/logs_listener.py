"""Gateway listeners that feed membership and moderation events into the logging pipeline.

Each listener runs one pipeline to completion: normalize (or correlate against
the audit log), then hand the event to the dispatcher. Pipelines for different
events never share state, so py-cord is free to run them concurrently.
"""

from typing import Optional, Union

import discord
from discord.ext import commands

from logcord.configuration.app_configuration import app_config
from logcord.datatypes.log_event_datatypes import BanDirection, LogEvent
from logcord.logs.audit_correlator import AuditCorrelator
from logcord.logs.dispatcher import LogDispatcher
from logcord.logs.normalizer import (
    member_reference_from_removal,
    normalize_member_join,
    normalize_member_update,
)
from logcord.util.logger import get_logger

logger = get_logger("logs_listener_cog")


class LogsListenerCog(commands.Cog):
    """Cog turning member lifecycle events into log channel notices."""

    def __init__(
        self,
        discord_bot_instance,
        correlator: Optional[AuditCorrelator] = None,
        dispatcher: Optional[LogDispatcher] = None,
    ):
        """Initialize the listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        correlator:
            Audit log correlator; built from the app configuration when omitted.
        dispatcher:
            Log dispatcher; a default one is created when omitted.
        """
        self.bot = discord_bot_instance
        self.correlator = correlator or AuditCorrelator(fetch_limit=app_config.audit_log_fetch_limit)
        self.dispatcher = dispatcher or LogDispatcher()
        logger.info("Logs listener cog loaded")

    async def _dispatch(self, event: Optional[LogEvent]) -> None:
        if event is None:
            return
        await self.dispatcher.dispatch(event)

    @commands.Cog.listener(name="on_member_join")
    async def on_member_join(self, member: discord.Member):
        await self._dispatch(normalize_member_join(member))

    @commands.Cog.listener(name="on_member_update")
    async def on_member_update(self, before: discord.Member, after: discord.Member):
        await self._dispatch(normalize_member_update(before, after))

    @commands.Cog.listener(name="on_raw_member_remove")
    async def on_raw_member_remove(self, payload: discord.RawMemberRemoveEvent):
        """Handle a member removal, cached or not.

        The raw event fires for every removal; ``payload.user`` is a full member
        only when the member was cached.
        """
        guild = self.bot.get_guild(payload.guild_id)
        if guild is None:
            logger.debug("Member removal in unknown guild %s ignored", payload.guild_id)
            return

        reference = member_reference_from_removal(guild, payload.user)
        await self._dispatch(await self.correlator.resolve_member_remove(reference))

    @commands.Cog.listener(name="on_member_ban")
    async def on_member_ban(self, guild: discord.Guild, user: Union[discord.User, discord.Member]):
        await self._dispatch(await self.correlator.resolve_ban(guild, user, BanDirection.BAN))

    @commands.Cog.listener(name="on_member_unban")
    async def on_member_unban(self, guild: discord.Guild, user: discord.User):
        await self._dispatch(await self.correlator.resolve_ban(guild, user, BanDirection.UNBAN))


def setup(discord_bot_instance):
    """Register the LogsListenerCog with the bot."""
    discord_bot_instance.add_cog(LogsListenerCog(discord_bot_instance))
