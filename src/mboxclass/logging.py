"""Logging setup for mboxclass: terse console diagnostics, optional log file."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import ConfigurationError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3

LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class ConsoleFormatter(logging.Formatter):
    """Prefix each stderr line with a one-letter level marker, coloured on a TTY."""

    MARKERS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("D", "\x1b[36m"),
        logging.INFO: ("I", "\x1b[32m"),
        logging.WARNING: ("!", "\x1b[33m"),
        logging.ERROR: ("X", "\x1b[31m"),
        logging.CRITICAL: ("X", "\x1b[35m"),
    }
    RESET = "\x1b[0m"

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        marker, color = self.MARKERS.get(record.levelno, ("?", "\x1b[37m"))
        message = super().format(record)
        if not self.use_color:
            return f"{marker} {message}"
        return f"{color}{marker}{self.RESET} {message}"


def configure_logging(logging_config: LoggingConfig) -> None:
    """Route mboxclass diagnostics to stderr and, when configured, a rotating file.

    The console follows ``level``; the file follows ``file_level`` (falling
    back to ``level``). The root logger is opened to the more verbose of the
    two so neither handler is starved.
    """

    console_level = level_from_name(logging_config.level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]
    root_level = console_level

    if logging_config.file is not None:
        file_level = level_from_name(logging_config.file_level or logging_config.level)
        handlers.append(_file_handler(logging_config.file, file_level))
        root_level = min(root_level, file_level)

    logging.basicConfig(level=root_level, handlers=handlers, force=True)
    if logging_config.file is not None:
        logging.getLogger(__name__).debug("Writing log file %s", logging_config.file)


def level_from_name(name: str) -> int:
    """Translate a configured level name such as ``warning`` into its number."""

    try:
        return LEVELS[name.strip().lower()]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown log level: {name}") from exc


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    isatty = getattr(handler.stream, "isatty", None)
    handler.setFormatter(ConsoleFormatter(use_color=bool(isatty and isatty())))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


__all__ = ["ConsoleFormatter", "configure_logging", "level_from_name"]
