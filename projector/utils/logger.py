"""
Logging Configuration

Provides logging for the projector with:
- Console output with colors
- Optional file logging with rotation
- Per-module child loggers under the "projector" root
"""

import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, init

init(autoreset=True)

ROOT_LOGGER_NAME = "projector"


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA,
    }

    def format(self, record):
        # Color a copy so file handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{Style.RESET_ALL}"

        return super().format(record)


# Global logger cache
_loggers = {}


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_size_mb: int = 10,
    backup_count: int = 5,
    enable_console: bool = True,
    enable_colors: bool = True,
) -> logging.Logger:
    """
    Set up logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (None to disable file logging)
        max_size_mb: Maximum log file size before rotation
        backup_count: Number of backup files to keep
        enable_console: Enable console output
        enable_colors: Enable colored console output

    Returns:
        Root logger
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers = []

    detailed_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    simple_format = "%(asctime)s | %(levelname)-8s | %(message)s"

    if enable_console:
        # stderr keeps stdout clean for curve output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)

        if enable_colors:
            console_handler.setFormatter(ColoredFormatter(simple_format))
        else:
            console_handler.setFormatter(logging.Formatter(simple_format))

        root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(detailed_format))

        root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging initialized (level={log_level}, file={log_file})")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    # Normalize name
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = name[len(ROOT_LOGGER_NAME) + 1:]

    logger_name = f"{ROOT_LOGGER_NAME}.{name}"

    if logger_name not in _loggers:
        logger = logging.getLogger(logger_name)
        _loggers[logger_name] = logger

        # Initialize root logger if not done
        if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
            setup_logging(log_level="WARNING")

    return _loggers[logger_name]
