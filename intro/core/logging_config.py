"""Logging setup for the page enhancer, applied through ``logging.config.dictConfig``."""

from __future__ import annotations

import logging
import logging.config
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import settings

# Per-logger levels; the file handler still receives DEBUG from our own code
LOGGER_LEVELS = {
    "intro": "INFO",
    "intro.infra": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "sqlalchemy": "WARNING",
    "aiosqlite": "WARNING",
    "asyncio": "ERROR",
}


class LevelColorFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, datefmt: Optional[str] = None, color: Optional[bool] = None) -> None:
        super().__init__(fmt, datefmt)
        self.color = sys.stderr.isatty() if color is None else color

    def formatMessage(self, record: logging.LogRecord) -> str:
        if not self.color or record.levelno not in self.COLORS:
            return super().formatMessage(record)
        plain = record.levelname
        record.levelname = f"{self.COLORS[record.levelno]}{plain}{self.RESET}"
        try:
            return super().formatMessage(record)
        finally:
            record.levelname = plain


def log_file_path(log_dir: Path, when: Optional[datetime] = None) -> Path:
    return log_dir / f"intro_{(when or datetime.now()).strftime('%Y%m%d')}.log"


def build_logging_config(log_file: bool, debug: bool, log_dir: Optional[Path] = None) -> Dict[str, Any]:
    console_level = "DEBUG" if debug else "INFO"
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "level": console_level,
            "formatter": "console",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(log_file_path(log_dir or settings.LOG_DIR)),
            "maxBytes": settings.LOG_MAX_BYTES,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf-8",
            "level": "DEBUG",
            "formatter": "file",
        }

    loggers = {name: {"level": level} for name, level in LOGGER_LEVELS.items()}
    if debug:
        loggers["intro"] = {"level": "DEBUG"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": LevelColorFormatter,
                "fmt": "%(asctime)s %(levelname)-8s %(name)s - %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "file": {
                "format": "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d) - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": console_level, "handlers": list(handlers)},
    }


def setup_logging(log_file: bool = True, debug: bool = False, log_dir: Optional[Path] = None) -> None:
    if log_file:
        (log_dir or settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_file, debug, log_dir))
