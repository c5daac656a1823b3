"""
Logger module for the bank statement reporter.

This module provides a standardized logging mechanism for the application.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_logger(
    name: str,
    level: int = logging.INFO,
    log_dir: str = "logs",
    console: bool = False,
) -> logging.Logger:
    """
    Create a logger writing to a timestamped file, optionally echoing to stderr.

    Args:
        name (str): Name of the logger.
        level (int, optional): Logging level. Defaults to logging.INFO.
        log_dir (str, optional): Directory to store log files. Defaults to "logs".
        console (bool, optional): Also log warnings and above to stderr.

    Returns:
        logging.Logger: Configured logger instance.
    """
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)

    # Clear any existing handlers to prevent duplicate logging
    logger.handlers.clear()
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = os.path.join(log_dir, f"{name}_{timestamp}.log")
    file_handler = logging.FileHandler(log_filename, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(max(level, logging.WARNING))
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(console_handler)

    logger.propagate = False

    return logger


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Retrieve an existing logger or create a new one.

    Args:
        name (str): Name of the logger.
        level (Optional[int], optional): Logging level. Defaults to None.

    Returns:
        logging.Logger: Logger instance.
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    return logger


def level_from_name(level_name: str, default: int = logging.INFO) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value."""
    numeric_level = getattr(logging, str(level_name).upper(), None)
    return numeric_level if isinstance(numeric_level, int) else default
