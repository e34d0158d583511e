from __future__ import annotations

from .config import LoggingConfig
from .core import (
    _CONFIGURED_FLAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    default_log_path,
    get_logger,
    shutdown_logging,
)
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "default_log_path",
    "get_logger",
    "shutdown_logging",
    "_CONFIGURED_FLAG_ATTR",
    "_QUEUE_LISTENER_ATTR",
    "_HANDLER_TAG_ATTR",
]
