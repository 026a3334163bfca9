"""Deliver rendered log lines to the channel chosen by the routing resolver."""

from typing import Optional

import discord

from logcord.datatypes.log_event_datatypes import LogEvent
from logcord.logs.renderer import render_event
from logcord.logs.routing import LogRouteResolver
from logcord.util.logger import get_logger

logger = get_logger("log_dispatcher")

# Log lines quote user text; nothing in them may ping
NO_MENTIONS = discord.AllowedMentions.none()


class LogDispatcher:
    """Route, render and send one log event.

    Delivery is best effort: a rejected route, a non-text channel or a failed
    send all end the pipeline quietly. The return value only reports whether a
    message went out.
    """

    def __init__(self, resolver: Optional[LogRouteResolver] = None):
        self.resolver = resolver or LogRouteResolver()

    async def dispatch(self, event: LogEvent) -> bool:
        channel = await self.resolver.resolve_channel(event)
        if channel is None:
            return False
        if not isinstance(channel, discord.TextChannel):
            logger.debug("[LOG DISPATCHER] Channel %s is not a text channel; %s not sent", channel.id, event.kind)
            return False

        line = render_event(event)
        try:
            await channel.send(line, allowed_mentions=NO_MENTIONS)
        except discord.HTTPException as exc:
            logger.warning("[LOG DISPATCHER] Failed to send %s log to channel %s: %s", event.kind, channel.id, exc)
            return False

        logger.debug("[LOG DISPATCHER] Sent %s log to channel %s", event.kind, channel.id)
        return True
