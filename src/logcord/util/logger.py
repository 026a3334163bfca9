"""
Logging for Logcord.

Every module asks for its logger through :func:`get_logger`. Each logger writes
to the console through prompt_toolkit and to one rotating log file per session
under ``<repo>/logs``.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI

LOGS_DIR: Path = (Path(__file__).parents[3] / "logs").resolve()
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FORMAT: str = "[%(asctime)s] [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H-%M-%S"

# A log file touched this recently is reused after a restart
SESSION_REUSE_SECONDS = 60
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5

LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[38;5;88m",
}
RESET = "\033[0m"

_session_log_file: Optional[Path] = None


class ColorFormatter(logging.Formatter):
    """Formatter that colors the whole line by record level."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if color is None:
            return line
        return f"{color}{line}{RESET}"


class PromptToolkitHandler(logging.Handler):
    """Console handler printing through prompt_toolkit so an active prompt is redrawn, not torn."""

    def __init__(self, formatter: Optional[logging.Formatter] = None):
        super().__init__()
        if formatter is not None:
            self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print_formatted_text(ANSI(self.format(record)))
        except Exception:
            self.handleError(record)


def should_use_color() -> bool:
    try:
        return sys.stderr.isatty()
    except Exception:
        return False


def _console_formatter() -> logging.Formatter:
    formatter_cls = ColorFormatter if should_use_color() else logging.Formatter
    return formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT)


def get_log_filepath() -> Path:
    """
    Return the log file shared by every logger of this session.

    The newest file of the day is reused when it was written in the last
    minute, so a quick restart keeps appending to it. Otherwise the session
    starts a file named after the current timestamp.
    """
    global _session_log_file

    if _session_log_file is not None:
        return _session_log_file

    now = datetime.now()
    todays_logs = sorted(
        LOGS_DIR.glob(f"{now:%Y-%m-%d}*.log"),
        key=lambda path: path.stat().st_mtime,
        reverse=True,
    )
    if todays_logs and now.timestamp() - todays_logs[0].stat().st_mtime < SESSION_REUSE_SECONDS:
        _session_log_file = todays_logs[0]
    else:
        _session_log_file = LOGS_DIR / f"{now.strftime(DATE_FORMAT)}.log"
    return _session_log_file


def _file_handler() -> RotatingFileHandler:
    handler = RotatingFileHandler(
        get_log_filepath(),
        encoding="utf-8",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(logger_name: str) -> logging.Logger:
    """Return the named logger, attaching the console and file handlers on first use.

    Parameters
    ----------
    logger_name:
        Name of the logger, usually the module's role (``"log_routing"``).
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(PromptToolkitHandler(formatter=_console_formatter()))
    logger.addHandler(_file_handler())
    return logger


def handle_exception(exception_type, exception_instance, exception_traceback) -> None:
    """``sys.excepthook`` replacement: log uncaught exceptions, let Ctrl+C through."""
    if issubclass(exception_type, KeyboardInterrupt):
        sys.__excepthook__(exception_type, exception_instance, exception_traceback)
        return
    logging.error("Uncaught exception", exc_info=(exception_type, exception_instance, exception_traceback))


# Library loggers only surface errors
NOISY_LOGGERS = [
    "discord", "discord.client", "discord.gateway", "discord.http", "discord.state",
    "aiohttp", "aiosqlite", "websockets",
]


def silence_library_loggers() -> None:
    for name in NOISY_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.setLevel(logging.ERROR)
        library_logger.propagate = False
        library_logger.handlers = []


silence_library_loggers()
