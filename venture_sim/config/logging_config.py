"""Logging configuration for the venture simulator.

Configures the root logger to output to the terminal (stdout).
"""

import logging
import os
import sys
from typing import Optional


def setup_logging(level: Optional[str] = None, verbose: bool = False) -> None:
    """Configure the root logger to output to stdout.

    Args:
        level: Log level name (e.g. "INFO"); falls back to VENTURE_SIM_LOG_LEVEL
        verbose: If True, forces DEBUG regardless of level
    """
    logger = logging.getLogger()

    if verbose:
        log_level = logging.DEBUG
    else:
        name = (level or os.getenv("VENTURE_SIM_LOG_LEVEL", "INFO")).upper()
        log_level = logging.getLevelName(name)
        if not isinstance(log_level, int):
            log_level = logging.INFO
    logger.setLevel(log_level)

    # Avoid duplicate handlers on repeated setup
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(console_handler)

    logging.debug("Logging initialized at %s", logging.getLevelName(log_level))
