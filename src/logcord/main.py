"""
Logcord
=======

Entry point of the membership and moderation log bot. Startup order is:
working directory, ``.env`` token, settings database, bot with cogs, gateway.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Return the directory Logcord runs from.

    ``LOGCORD_HOME`` wins when set. A frozen build runs next to its executable;
    a source checkout runs from the repository root.
    """
    home = os.getenv("LOGCORD_HOME")
    if home:
        return Path(home).resolve()
    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent
    return Path(__file__).resolve().parents[2]


# Relative paths in config/app_config.yml resolve against this directory
BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from logcord.configuration.guild_settings import guild_settings_manager
from logcord.database.database import get_db
from logcord.util.logger import get_logger, handle_exception

logger = get_logger("main")

TOKEN_VARIABLE = "DISCORD_BOT_TOKEN"


def load_environment() -> str:
    """Read ``.env`` and return the bot token, exiting with status 1 when it is missing."""
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv(TOKEN_VARIABLE)
    if token:
        return token
    logger.critical("%s is not set; add it to %s or the environment.", TOKEN_VARIABLE, BASE_DIR / ".env")
    sys.exit(1)


def build_intents() -> discord.Intents:
    """Gateway intents for member lifecycle and ban events.

    ``members`` is privileged and must also be switched on in the developer
    portal, otherwise joins, removals and nickname updates never arrive.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.bans = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot) -> None:
    from logcord.bot.cogs import log_settings_cmds, logs_listener

    for cog_module in (logs_listener, log_settings_cmds):
        cog_module.setup(discord_bot_instance)
    logger.info("Cogs loaded: %s", ", ".join(discord_bot_instance.cogs) or "none reported")


def create_bot() -> discord.Bot:
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot)
    return bot


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Disconnect from Discord, wait for queued settings writes, then close the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception:
            logger.exception("Discord client did not close cleanly")

    try:
        await guild_settings_manager.shutdown()
    except Exception:
        logger.exception("Pending guild settings writes failed during shutdown")

    await get_db().shutdown()
    logger.info("Logcord stopped.")


async def run_bot(bot: discord.Bot, token: str) -> int:
    """Connect and serve until the gateway closes. Returns the exit code."""
    logger.info("Connecting to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Bot task cancelled")
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        return 1
    except Exception as exc:
        logger.critical("Bot stopped with an error: %s", exc)
        return 1
    finally:
        await shutdown_runtime(bot)
    return 0


async def async_main() -> int:
    token = load_environment()

    try:
        await guild_settings_manager.async_init()
    except Exception as exc:
        logger.critical("Guild settings database unavailable: %s", exc)
        return 1

    try:
        bot = create_bot()
    except Exception as exc:
        logger.critical("Could not build the Discord bot: %s", exc)
        await shutdown_runtime()
        return 1

    return await run_bot(bot, token)


def main() -> int:
    """Console entry point; returns the process exit code."""
    sys.excepthook = handle_exception
    logger.info("Starting Logcord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Interrupted; exiting.")
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
