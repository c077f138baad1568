# Path: config/logging.py
# Purpose: Configure application-wide logging handlers.
# Layer: config.
# Details: Console output plus an optional file copy, shared by scripts, API, and tests.

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Top-level packages whose loggers are configured together.
PACKAGE_LOGGERS = ("core", "api", "config", "scripts")


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None, console: bool = True) -> logging.Logger:
    """
    Set up console and file handlers for the application loggers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path receiving every record at DEBUG level
        console: Whether to also log to stdout

    Returns:
        The ``core`` logger, configured
    """

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = []
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        package_logger.setLevel(logging.DEBUG if log_file else numeric_level)
        package_logger.handlers = list(handlers)
        package_logger.propagate = False

    return logging.getLogger("core")


__all__ = ["setup_logging", "LOG_FORMAT"]
