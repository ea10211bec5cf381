"""
Logging configuration for FrameGrabber.
Call setup_logging() once from an entry point (CLI or dashboard).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import config as cfg


def setup_logging(level: int = cfg.LOG_LEVEL, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger with a console handler and an optional file handler.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Streamlit reruns the script; drop handlers from a previous run to avoid duplicate lines
    for handler in list(logger.handlers):
        if getattr(handler, "_framegrabber", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(cfg.LOG_FORMAT, datefmt=cfg.LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler._framegrabber = True  # type: ignore[attr-defined]
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler._framegrabber = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logging.getLogger(__name__).debug("Logging initialized.")
