#!/usr/bin/env python3
"""
Logging configuration for the diff updater.
"""

import sys
from typing import Optional

from loguru import logger

from .config import DiffUpdaterConfig

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def resolve_log_level(config: DiffUpdaterConfig, verbose: int = 0) -> str:
    """Each -v on the command line overrides the configured level: INFO, then DEBUG."""
    if verbose > 1:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return config.log_level


def setup_logging(config: Optional[DiffUpdaterConfig] = None, verbose: int = 0) -> str:
    """
    Set up loguru sinks from the updater configuration.

    Args:
        config: Updater configuration, defaults are used when None
        verbose: Number of -v flags given on the command line

    Returns:
        str: The effective log level
    """
    config = config or DiffUpdaterConfig()
    level = resolve_log_level(config, verbose)

    # Remove default logger
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if config.log_file is not None:
        logger.add(
            str(config.log_file),
            rotation=config.log_rotation,
            retention=config.log_retention,
            level=level,
            format=FILE_FORMAT,
        )

    logger.debug(f"Logging initialized at {level}")
    return level
