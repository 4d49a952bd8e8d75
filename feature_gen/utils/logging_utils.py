"""Logging setup shared by pipeline modules and scripts."""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str | Path = "logs",
    log_format: str = DEFAULT_LOG_FORMAT,
) -> logging.Logger:
    """Configure a named logger with a console handler and optional file handler.

    Args:
        name: Logger name
        log_level: Level name (DEBUG, INFO, ...)
        log_file: Optional log file name, created under log_dir
        log_dir: Directory for log files
        log_format: logging format string

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level.upper())

    # Re-running setup must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    Modules log through the ``feature_gen`` hierarchy, so configuring the
    ``feature_gen`` logger once configures all of them.
    """
    return logging.getLogger(name)
