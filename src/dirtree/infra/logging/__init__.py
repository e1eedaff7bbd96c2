from __future__ import annotations

from .core import (
    PACKAGE_LOGGER,
    LoggingConfig,
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_default_log_path,
    get_recent_logs,
)

__all__ = [
    "PACKAGE_LOGGER",
    "LoggingConfig",
    "configure_logging",
    "get_recent_logs",
    "get_default_log_path",
]
