"""
Data types shared across Logcord.

- **discord_datatypes.py**: Type-safe wrappers for Discord snowflake IDs
  (users, guilds, channels).
- **log_event_datatypes.py**: Log event kinds, settings keys, channel
  categories, audit log entries and the typed log events that flow through
  the logging pipeline.
- **guild_settings.py**: The persisted per-guild log settings record.
"""
