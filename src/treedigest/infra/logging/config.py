from __future__ import annotations

"""
Logging Configuration Models.

Level names accepted on the command line and the settings dataclass
consumed by configure_logging().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings applied once by configure_logging() at CLI start-up.

    Attributes:
        level: Level name (DEBUG, INFO, ...); unknown names mean INFO.
        console: Emit records on stderr, keeping stdout for build output.
        log_file: Rotating log file path, or None.
        max_bytes: Size that triggers a rollover of log_file.
        backup_count: Rolled-over files kept next to log_file.
        console_fmt: Format of stderr records.
        file_fmt: Format of file records; includes the worker thread name.
        datefmt: Timestamp format of file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024  # Default: 1MB
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
