"""
Logging utilities for pileshots
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "pileshots"


def _file_handler(log_file, formatter, level, max_bytes, backup_count):
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    return file_handler


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
) -> logging.Logger:
    """Setup pipeline logging

    Calling it again adjusts the level of the existing handlers and adds a
    rotating file handler when ``log_file`` is given and none is attached yet.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if getattr(logger, "_pileshots_configured", False):
        for handler in logger.handlers:
            handler.setLevel(level)
        has_file = any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        )
        if log_file is not None and not has_file:
            logger.addHandler(
                _file_handler(log_file, formatter, level, max_bytes, backup_count)
            )
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        logger.addHandler(
            _file_handler(log_file, formatter, level, max_bytes, backup_count)
        )

    logger._pileshots_configured = True
    logger.debug("Logging system initialized")
    return logger


def get_logger(name):
    """Get a logger instance for a specific module"""
    return logging.getLogger(name)
