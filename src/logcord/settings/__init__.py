"""
Guild log settings persistence.

- **repositories/**: Raw SQL access, one repository per table.
- **guild_settings_service.py**: Transactions, per-guild locks and conversion
  between repository rows and :class:`GuildLogSettings`.
"""
