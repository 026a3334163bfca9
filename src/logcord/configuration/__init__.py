"""
Configuration management for Logcord.

- **app_configuration.py**: File-lock based YAML configuration loader for global
  settings (database location, audit log fetch limit). Falls back to defaults on
  missing or malformed config files.

- **guild_settings.py**: Per-guild log settings cache. Loads every guild's
  record at startup, answers find-or-create lookups for the routing resolver
  and schedules non-blocking persistence when the ``/logs`` commands change a
  setting.
"""
