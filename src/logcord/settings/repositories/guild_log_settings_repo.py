"""
Repository for the guild_log_settings table.

Handles only the guild_log_settings table; no joins, no related data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import aiosqlite

from logcord.datatypes.discord_datatypes import GuildID
from logcord.util.logger import get_logger

logger = get_logger("guild_log_settings_repo")

_COLUMNS = """
    guild_id, logs_enabled,
    join_enabled, left_enabled, rename_enabled, kick_enabled, ban_enabled,
    message_delete_enabled, message_edit_enabled, message_attachment_enabled,
    general_channel_id, sensitive_channel_id
"""


@dataclass
class GuildLogSettingsRow:
    """Raw DB row for a guild's log settings."""
    guild_id: int
    logs_enabled: bool
    join_enabled: bool
    left_enabled: bool
    rename_enabled: bool
    kick_enabled: bool
    ban_enabled: bool
    message_delete_enabled: bool
    message_edit_enabled: bool
    message_attachment_enabled: bool
    general_channel_id: Optional[int]
    sensitive_channel_id: Optional[int]


def _row_from_record(record) -> GuildLogSettingsRow:
    return GuildLogSettingsRow(
        guild_id=record[0],
        logs_enabled=bool(record[1]),
        join_enabled=bool(record[2]),
        left_enabled=bool(record[3]),
        rename_enabled=bool(record[4]),
        kick_enabled=bool(record[5]),
        ban_enabled=bool(record[6]),
        message_delete_enabled=bool(record[7]),
        message_edit_enabled=bool(record[8]),
        message_attachment_enabled=bool(record[9]),
        general_channel_id=record[10],
        sensitive_channel_id=record[11],
    )


class GuildLogSettingsRepository:
    """CRUD for the guild_log_settings table only."""

    async def get(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> GuildLogSettingsRow | None:
        """Fetch a single guild's log settings row."""
        async with conn.execute(
            f"SELECT {_COLUMNS} FROM guild_log_settings WHERE guild_id = ?",
            (int(guild_id),),
        ) as cursor:
            record = await cursor.fetchone()

        if record is None:
            return None
        return _row_from_record(record)

    async def get_all(
        self, conn: aiosqlite.Connection
    ) -> Dict[int, GuildLogSettingsRow]:
        """Fetch all guilds' log settings rows keyed by guild_id int."""
        async with conn.execute(f"SELECT {_COLUMNS} FROM guild_log_settings") as cursor:
            records = await cursor.fetchall()

        result: Dict[int, GuildLogSettingsRow] = {}
        for record in records:
            row = _row_from_record(record)
            result[row.guild_id] = row
        return result

    async def upsert(
        self, conn: aiosqlite.Connection, row: GuildLogSettingsRow
    ) -> None:
        """Insert or update a guild's log settings row."""
        await conn.execute(
            f"""
            INSERT INTO guild_log_settings ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
                logs_enabled               = excluded.logs_enabled,
                join_enabled               = excluded.join_enabled,
                left_enabled               = excluded.left_enabled,
                rename_enabled             = excluded.rename_enabled,
                kick_enabled               = excluded.kick_enabled,
                ban_enabled                = excluded.ban_enabled,
                message_delete_enabled     = excluded.message_delete_enabled,
                message_edit_enabled       = excluded.message_edit_enabled,
                message_attachment_enabled = excluded.message_attachment_enabled,
                general_channel_id         = excluded.general_channel_id,
                sensitive_channel_id       = excluded.sensitive_channel_id
            """,
            (
                int(row.guild_id),
                1 if row.logs_enabled else 0,
                1 if row.join_enabled else 0,
                1 if row.left_enabled else 0,
                1 if row.rename_enabled else 0,
                1 if row.kick_enabled else 0,
                1 if row.ban_enabled else 0,
                1 if row.message_delete_enabled else 0,
                1 if row.message_edit_enabled else 0,
                1 if row.message_attachment_enabled else 0,
                row.general_channel_id,
                row.sensitive_channel_id,
            ),
        )

    async def delete(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> None:
        """Delete a guild row."""
        await conn.execute(
            "DELETE FROM guild_log_settings WHERE guild_id = ?",
            (int(guild_id),),
        )
