"""Logging setup for the ``atomgraph`` namespace.

Library modules only create ``logging.getLogger(__name__)`` loggers; call
:func:`setup_logging` from scripts or notebooks to actually see the output.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``atomgraph`` logger.

    Args:
        level: logging level (e.g. ``logging.DEBUG``).
        log_file: optional path to also write logs to.

    Returns:
        The configured ``atomgraph`` logger.
    """
    logger = logging.getLogger("atomgraph")
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once.
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

    logger.debug("Logging initialized.")
    return logger
