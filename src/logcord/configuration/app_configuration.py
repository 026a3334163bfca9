"""
Global application configuration read from ``config/app_config.yml``.

Only deployment-wide values live here. Per-guild log toggles and channels
are stored in the database (see :mod:`logcord.configuration.guild_settings`).
"""

from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, Dict

import yaml

from logcord.util.logger import get_logger

logger = get_logger("app_configuration")

CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_DATABASE_PATH = "./data/app.db"
DEFAULT_AUDIT_LOG_FETCH_LIMIT = 50


def read_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Parse ``path`` under a shared flock. Anything but a YAML mapping yields ``{}``."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_SH)
            try:
                loaded = yaml.safe_load(handle)
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
    except FileNotFoundError:
        logger.warning("[APP CONFIGURATION] %s does not exist; using defaults", path)
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("[APP CONFIGURATION] Could not read %s: %s", path, exc)
        return {}

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.error("[APP CONFIGURATION] %s must contain a mapping, found %s", path, type(loaded).__name__)
        return {}
    return loaded


class AppConfig:
    """Cached view over the YAML configuration file with typed accessors.

    Missing or invalid values fall back to the defaults above, so a deployment
    without a config file still starts.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def reload(self) -> Dict[str, Any]:
        self._data = read_yaml_mapping(self.config_path)
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def section(self, name: str) -> Dict[str, Any]:
        """Return a nested mapping, or ``{}`` when the key is absent or not a mapping."""
        value = self._data.get(name)
        return value if isinstance(value, dict) else {}

    @property
    def database_path(self) -> Path:
        """SQLite file for guild log settings, ``database.path`` (default ``./data/app.db``)."""
        return Path(str(self.section("database").get("path") or DEFAULT_DATABASE_PATH)).resolve()

    @property
    def audit_log_fetch_limit(self) -> int:
        """Entries read per audit log lookup, ``audit_log.fetch_limit`` (default 50)."""
        raw = self.section("audit_log").get("fetch_limit", DEFAULT_AUDIT_LOG_FETCH_LIMIT)
        if isinstance(raw, bool):
            raw = None
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            limit = 0
        if limit <= 0:
            logger.warning(
                "[APP CONFIGURATION] audit_log.fetch_limit %r is not a positive integer; using %d",
                raw,
                DEFAULT_AUDIT_LOG_FETCH_LIMIT,
            )
            return DEFAULT_AUDIT_LOG_FETCH_LIMIT
        return limit


app_config = AppConfig(CONFIG_PATH)
