"""Logging setup shared by the CLI entry points."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAIN_LOG_NAME = "mailexpiry.log"
DEBUG_LOG_NAME = "debug.log"
LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ConsoleFormatter(logging.Formatter):
    """Prefix records with a single-letter level tag, coloured on a TTY."""

    TAGS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("D", "\x1b[36m"),
        logging.INFO: ("I", "\x1b[32m"),
        logging.WARNING: ("!", "\x1b[33m"),
        logging.ERROR: ("X", "\x1b[31m"),
        logging.CRITICAL: ("X", "\x1b[35m"),
    }

    RESET = "\x1b[0m"

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(name)s: %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        tag, color = self.TAGS.get(record.levelno, ("?", "\x1b[37m"))
        text = super().format(record)
        if self.use_color:
            return f"{color}{tag}{self.RESET} {text}"
        return f"{tag} {text}"


def configure_logging(
    logging_config: LoggingConfig,
    root_dir: Path,
    *,
    verbose: bool = False,
) -> None:
    """Install file and console handlers on the root logger.

    The console only shows warnings unless ``verbose`` is set, so command
    output on stdout stays readable. ``verbose`` and ``debug_file`` open the
    root logger to DEBUG; the main log file keeps the configured level.
    """

    level = parse_log_level(logging_config.level)
    root_level = level
    if verbose or logging_config.debug_file:
        root_level = min(level, logging.DEBUG)
    log_dir = (root_dir / "logs").expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [
        _file_handler(log_dir / MAIN_LOG_NAME, level=max(level, logging.INFO)),
        _console_handler(logging.DEBUG if verbose else logging.WARNING),
    ]
    if logging_config.debug_file:
        handlers.append(_file_handler(log_dir / DEBUG_LOG_NAME, level=logging.DEBUG))

    logging.basicConfig(level=root_level, handlers=handlers, force=True)


def parse_log_level(level: str) -> int:
    """Translate a level name from config into a ``logging`` constant."""

    try:
        return LOG_LEVELS[level.strip().upper()]
    except KeyError as exc:
        raise ConfigError(f"Unknown log level: {level}") from exc


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    stream = getattr(handler, "stream", None)
    use_color = bool(getattr(stream, "isatty", lambda: False)())
    handler.setFormatter(ConsoleFormatter(use_color))
    return handler


__all__ = ["LOG_LEVELS", "configure_logging", "parse_log_level"]
