"""
The shared aiosqlite connection.

Logcord keeps one connection open for its whole lifetime. In WAL mode readers
never block, so ``read()`` hands the connection out directly. Writers queue on
a semaphore inside ``transaction()``, which commits on success and rolls back
when the block raises.

    await db_connection.open(path)

    async with db_connection.read() as conn:
        async with conn.execute("SELECT ...") as cursor:
            rows = await cursor.fetchall()

    async with db_connection.transaction() as conn:
        await conn.execute("UPDATE ...")

    await db_connection.close()
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from logcord.util.logger import get_logger

logger = get_logger("database_connection")

_PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA foreign_keys = ON",
    "PRAGMA temp_store = MEMORY",
)


class ConnectionManager:
    """Owner of the single aiosqlite connection and its writer lock."""

    def __init__(self) -> None:
        self._conn: aiosqlite.Connection | None = None
        self._writer = asyncio.Semaphore(1)
        self.path: Path | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self, path: Path) -> None:
        """Connect to ``path`` (creating its directory) and apply the pragmas. A second call is a no-op."""
        if self.is_open:
            logger.warning("[DB CONNECTION] Connection to %s already open; open() ignored", self.path)
            return

        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(path)
        conn.row_factory = aiosqlite.Row
        for pragma in _PRAGMAS:
            await conn.execute(pragma)
        await conn.commit()

        self._conn = conn
        self.path = path
        logger.info("[DB CONNECTION] Connected to %s", path)

    async def close(self) -> None:
        """Checkpoint the WAL into the main file and close."""
        conn, self._conn = self._conn, None
        if conn is None:
            return

        try:
            await conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            await conn.commit()
        except Exception:
            logger.exception("[DB CONNECTION] WAL checkpoint failed while closing %s", self.path)
        finally:
            await conn.close()
        logger.info("[DB CONNECTION] Closed %s", self.path)

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        The open connection.

        Raises:
            RuntimeError: If ``open()`` has not been awaited yet.
        """
        if self._conn is None:
            raise RuntimeError("database connection is not open; await db_connection.open(path) first")
        return self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        conn = self.connection
        async with self._writer:
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        yield self.connection


db_connection = ConnectionManager()
