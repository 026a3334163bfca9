"""
The membership and moderation logging pipeline.

One gateway event runs through the stages below in order and produces at most
one log line:

- **normalizer.py**: Gateway events → typed log events (join, rename) or
  member references for the correlator (member removal)
- **audit_correlator.py**: Audit log lookups that turn a removal into a kick
  and attach moderator and reason to bans and unbans
- **routing.py**: Settings-key collapse, channel category selection and
  destination channel resolution from the guild's log settings
- **renderer.py**: One markdown-escaped line per event kind
- **dispatcher.py**: Sends the rendered line to the resolved text channel
"""
