"""
Database package for Logcord.

Provides the single long-lived SQLite connection and schema management used by
the guild log settings store.

Public API:
    - database: Global Database instance
    - get_db: Get the global Database instance
    - db_connection: Global connection manager
"""
