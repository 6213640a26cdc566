"""
Logging Utilities

This module sets up logging for the project with a consistent format for
console and (optionally) file output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logger(name: str,
                 level: int = logging.INFO,
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (default: logging.INFO)
        log_file: Optional log file path. If provided, logs will be written to this file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Simpler format for console, process info in file
    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def set_package_log_level(level: int, log_file: Optional[str] = None) -> None:
    """
    Apply a log level to every logger already created under ``scanner_fusion``.

    Module loggers are created at import time with the default level, so a
    level read from the config has to be pushed to them afterwards.

    Args:
        level: Logging level to apply
        log_file: Optional log file that is attached to each package logger
    """
    manager = logging.root.manager
    for name, candidate in list(manager.loggerDict.items()):
        if not name.startswith("scanner_fusion") or not isinstance(candidate, logging.Logger):
            continue
        candidate.setLevel(level)
        for handler in candidate.handlers:
            handler.setLevel(level)
        if log_file and not any(isinstance(h, logging.FileHandler) for h in candidate.handlers):
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            candidate.addHandler(file_handler)
