"""
Pytest configuration and fixtures for Logcord tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to path so imports work without an editable install
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from logcord.configuration.guild_settings import GuildSettingsManager  # noqa: E402


@pytest.fixture
def settings_manager():
    """A fresh in-memory settings manager (no database behind it)."""
    return GuildSettingsManager()
