from __future__ import annotations

"""
Logging Configuration Models.

Defines the immutable settings consumed by `configure_logging` and the
mapping from textual level names to logging constants.
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
    Logging subsystem settings for one process.

    Attributes:
        level: Minimum severity captured by every handler.
        console: Emit records on stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size that triggers rotation of the log file.
        backup_count: Rotated files to keep.
        console_fmt: Record format on stderr.
        file_fmt: Record format in the log file.
        datefmt: Timestamp format of the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, *, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Console logging at INFO, or DEBUG when requested, plus an optional file."""
        return cls(level="DEBUG" if debug else "INFO", console=True, log_file=log_file)
