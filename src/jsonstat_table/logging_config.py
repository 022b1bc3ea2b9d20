"""
Logging configuration for the jsonstat_table package.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

from jsonstat_table.config import JSONSTAT_LOG_LEVEL

PACKAGE_LOGGER = "jsonstat_table"


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the 'jsonstat_table' logger.

    Args:
        level: logging level or its name, JSONSTAT_LOG_LEVEL when None
        log_file: optional path of a log file written next to the console output
    """
    if level is None:
        level = JSONSTAT_LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Streamlit re-runs the script on every interaction
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
    return logger
