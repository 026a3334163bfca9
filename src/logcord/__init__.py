"""
Logcord - Discord Membership and Moderation Log Bot

Logcord watches member lifecycle and moderation events in the servers it is
invited to and posts a one-line notice for each of them into a configured
log channel.

Core Components:

- **Event Normalizer**: Turns gateway events (join, leave, nickname change,
  ban, unban) into typed log events
- **Audit Correlator**: Looks up the guild audit log to tell kicks apart from
  voluntary leaves and to attach the moderator and reason to bans and unbans
- **Routing Resolver**: Applies the per-guild log settings and picks the
  general or sensitive log channel
- **Renderer + Dispatcher**: Renders a markdown-escaped log line and posts it
- **Guild Settings**: Per-server log toggles and channels persisted in SQLite,
  editable through the ``/logs`` slash commands
"""
