"""Logging configuration for seedgraph."""

import logging
import sys
from pathlib import Path
from typing import Optional
from .settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"

# Libraries whose debug output drowns the per-batch summary lines
QUIET_LOGGERS = ("faker",)


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name}")
    return level


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> None:
    """
    Configure the ``seedgraph`` logger.

    Console output goes to stderr so command output on stdout stays clean.
    The file handler, when enabled, always records file and line numbers.

    Args:
        level: Logging level name; defaults to ``Settings.log_level``
        log_file: Optional log file; defaults to ``Settings.log_file``
        format_string: Console format; defaults to ``LOG_FORMAT``
    """
    settings = get_settings()
    log_level = _level(level or settings.log_level)
    log_file_path = log_file or settings.log_file

    logger = logging.getLogger("seedgraph")
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(format_string or LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_file_path:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``seedgraph`` namespace.

    Configures logging from settings on first use.
    """
    if not logging.getLogger("seedgraph").handlers:
        setup_logging()

    if name.startswith("seedgraph"):
        return logging.getLogger(name)
    return logging.getLogger(f"seedgraph.{name}")
