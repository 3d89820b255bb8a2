"""
Logging configuration for the rdstext command line.

The library modules only create loggers; handlers and levels are set up
here, once, by the application entry point.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
APP_LOGGER = 'rdstext'


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    fmt: str = DEFAULT_FORMAT,
    max_file_size: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    console_output: bool = True
) -> logging.Logger:
    """
    Set up console and rotating-file logging.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Path to log file (optional)
        fmt: Log record format string
        max_file_size: Maximum log file size in bytes before rotation
        backup_count: Number of backup files to keep
        console_output: Whether to output logs to the console (stderr)

    Returns:
        The application logger

    Raises:
        ValueError: If the level name is unknown
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    root_logger.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=fmt, datefmt='%Y-%m-%d %H:%M:%S')

    # stdout carries --print output, so logs go to stderr
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_file),
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(numeric_level)

    app_logger.debug(f"Logging initialized - Level: {level}")
    if log_file:
        app_logger.debug(f"Log file: {log_file}")

    return app_logger


def log_processing_progress(
    current: int,
    total: int,
    logger: logging.Logger,
    message_template: str = "Processed {current}/{total} records ({percentage:.1f}%)"
):
    """
    Log batch progress roughly every 10% (every 1% for large batches).

    Args:
        current: Records done so far
        total: Total record count
        logger: Logger instance to use
        message_template: Template for the progress message
    """
    if total == 0:
        return

    step = max(1, total // 10) if total <= 1000 else max(1, total // 100)
    if current % step == 0 or current == total:
        percentage = (current / total) * 100
        logger.info(message_template.format(current=current, total=total, percentage=percentage))
