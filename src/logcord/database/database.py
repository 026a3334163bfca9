"""
Database lifecycle: open the shared connection, create the schema, close it.

Repositories never open connections themselves; they go through
``db_connection`` once :meth:`Database.initialize` has succeeded.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from logcord.configuration.app_configuration import app_config
from logcord.database.db_connection import ConnectionManager, db_connection
from logcord.database.db_schema import SchemaManager
from logcord.util.logger import get_logger

logger = get_logger("database")


class Database:
    """Startup and shutdown of the SQLite store.

    ``db_path`` overrides ``database.path`` from the app configuration.
    """

    def __init__(self, connection: ConnectionManager = db_connection, db_path: Optional[Path] = None):
        self._connection = connection
        self._db_path = db_path
        self._ready = False

    @property
    def db_path(self) -> Path:
        return self._db_path if self._db_path is not None else app_config.database_path

    @property
    def is_initialized(self) -> bool:
        return self._ready

    async def initialize(self) -> bool:
        """Open the connection and create the schema. Returns False (and logs) on failure."""
        if self._ready:
            return True

        path = self.db_path
        try:
            await self._connection.open(path)
            async with self._connection.transaction() as conn:
                await SchemaManager.initialize_schema(conn)
        except Exception:
            logger.exception("[DATABASE] Could not initialize %s", path)
            await self._connection.close()
            return False

        self._ready = True
        logger.info("[DATABASE] Ready at %s", path)
        return True

    async def shutdown(self) -> None:
        if not self._ready:
            return
        await self._connection.close()
        self._ready = False


database = Database()


def get_db() -> Database:
    return database
