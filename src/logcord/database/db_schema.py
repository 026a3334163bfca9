"""
SQLite schema for guild log settings.

One row per guild: the master switch, one ``<event>_enabled`` flag per
settings key and the two log channel IDs. Every statement is idempotent, so
``initialize_schema`` runs on each startup.
"""

import aiosqlite

from logcord.datatypes.guild_settings import CHANNEL_FIELDS, EVENT_FLAG_FIELDS
from logcord.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


def _guild_log_settings_table() -> str:
    flag_columns = ",\n".join(
        f"    {column} INTEGER NOT NULL DEFAULT 0" for column in ["logs_enabled", *EVENT_FLAG_FIELDS.values()]
    )
    channel_columns = ",\n".join(f"    {column} INTEGER" for column in CHANNEL_FIELDS.values())
    return (
        "CREATE TABLE IF NOT EXISTS guild_log_settings (\n"
        "    guild_id INTEGER PRIMARY KEY,\n"
        f"{flag_columns},\n"
        f"{channel_columns},\n"
        "    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,\n"
        "    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP\n"
        ")"
    )


_TOUCH_UPDATED_AT = """
CREATE TRIGGER IF NOT EXISTS guild_log_settings_touch
AFTER UPDATE ON guild_log_settings
FOR EACH ROW
BEGIN
    UPDATE guild_log_settings SET updated_at = CURRENT_TIMESTAMP WHERE guild_id = NEW.guild_id;
END
"""

_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


class SchemaManager:
    """Creates the tables and trigger Logcord relies on."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """Create missing tables and record :data:`SCHEMA_VERSION`. Runs inside the caller's transaction."""
        for statement in (_guild_log_settings_table(), _TOUCH_UPDATED_AT, _SCHEMA_VERSION_TABLE):
            await db.execute(statement)
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
        logger.info("[SCHEMA] Schema version %d ready", SCHEMA_VERSION)
