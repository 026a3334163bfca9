"""
Discord integration for Logcord.

- **cogs/logs_listener.py**: Gateway listeners (join, member removal, member
  update, ban, unban) that feed the logging pipeline
- **cogs/log_settings_cmds.py**: ``/logs`` slash commands for viewing and
  changing a server's log settings
"""
