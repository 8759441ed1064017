"""Central logging configuration for the photo classifier.

This module handles FILE LOGGING ONLY - for console output, use utils.console.

Usage:
    from utils.logging import get_logger, init_logging
    init_logging("classify")  # once at app start (e.g., in main.py)
    logger = get_logger(__name__)
    logger.debug("Detailed debug info")  # Goes to file only
    logger.info("Important event")       # Goes to file only

Features:
    * File only: detailed with timestamp, module, function, line number
    * New log file per run (./logs/{name}_YYYYmmdd_HHMMSS.log)
    * DEBUG level captures everything, including raw model responses
    * Nothing is written to stdout, which the lookup server uses for protocol frames

For user-facing terminal output, use:
    from utils.console import console
    console.start("Pipeline started")
"""
from __future__ import annotations

import datetime
import logging
import os
from pathlib import Path

_INITIALIZED = False
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
# Default log file, updated by init_logging
LOG_FILE = LOG_DIR / "pipeline.log"
DEFAULT_FILE_LEVEL = logging.DEBUG


def init_logging(name: str = "pipeline", file_level: int = DEFAULT_FILE_LEVEL) -> None:
    """Initialize file logging once. Safe to call multiple times.

    Args:
        name: Base name for the log file (e.g. 'classify', 'lookup').
              A timestamp will be appended: logs/{name}_{date}.log
        file_level: Minimum level for file logging (default: DEBUG)
    """
    global _INITIALIZED, LOG_FILE
    if _INITIALIZED:
        return
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    LOG_FILE = LOG_DIR / f"{name}_{timestamp}.log"

    # Format: timestamp | level | module:function:line | message
    file_fmt = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"

    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(file_fmt, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    _INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name."""
    return logging.getLogger(name)


__all__ = ["init_logging", "get_logger", "LOG_FILE"]
