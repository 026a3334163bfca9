"""
Utility helpers for Logcord.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Suppresses noise from
  Discord internals and networking layers. Uses prompt_toolkit for console output
  so log lines never tear an active prompt.
"""
