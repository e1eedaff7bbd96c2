from __future__ import annotations

"""
Logging Setup for the dirtree Package.

Handlers are attached to the 'dirtree' logger, never to the root, so a host
application keeps control of its own logging. Records pass through a
QueueHandler to a QueueListener thread; file writes then happen off the
thread that is walking an outline or servicing watcher events.

Nothing here runs on import. Modules only do logging.getLogger(__name__);
configure_logging() is for scripts and applications embedding the package.
"""

import atexit
import logging
import os
import queue
import sys
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from typing import Any, List, Mapping, Optional

from dirtree.infra.fs import get_user_data_dir

PACKAGE_LOGGER = "dirtree"
DEFAULT_LOG_NAME = "dirtree.log"

# Marks handlers and listeners owned by this module
_HANDLER_TAG_ATTR: str = "_dirtree_handler"
_CONFIGURED_FLAG_ATTR: str = "_dirtree_configured"
_QUEUE_LISTENER_ATTR: str = "_dirtree_queue_listener"

# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LoggingConfig:
    """
    Where and how much the dirtree logger writes.

    Attributes:
        level: Minimum level name ('DEBUG', 'INFO', ...).
        console: Echo records to stderr.
        log_file: Rotating log file path, or None for no file.
        max_bytes: Size at which the log file is rotated.
        backup_count: Rotated files kept next to the live one.
        logger_name: Logger the handlers are attached to.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 512 * 1024
    backup_count: int = 2
    logger_name: str = PACKAGE_LOGGER

    console_fmt: str = "%(levelname)-7s %(message)s"
    file_fmt: str = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_options(cls, options: Mapping[str, Any], **overrides: Any) -> "LoggingConfig":
        """
        Derive a config from set_dir_tree()/watch_file() options.

        The 'debug' option selects DEBUG level, where the handler traces
        and token tables are emitted.
        """
        level = "DEBUG" if options.get("debug") else "INFO"
        return cls(level=level, **overrides)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_default_log_path(file_name: str = DEFAULT_LOG_NAME) -> str:
    """Return <user data dir>/logs/<file_name>."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Attach console and/or file output to the package logger.

    Idempotent: a second call returns the already configured logger unless
    force is set, which tears down our previous handlers and listener first.
    When neither console nor file output is requested the logger is left
    unconfigured. If the queue machinery itself fails, a plain stderr
    handler is installed instead so records are not lost.

    Args:
        cfg: Logging configuration.
        force: Rebuild even if already configured.

    Returns:
        logging.Logger: The configured logger.
    """
    target = logging.getLogger(cfg.logger_name)
    if getattr(target, _CONFIGURED_FLAG_ATTR, False) and not force:
        return target

    try:
        level = logging.getLevelName(cfg.level.strip().upper()) if cfg.level else logging.INFO
        if not isinstance(level, int):
            level = logging.INFO
        target.setLevel(level)
        _teardown(target)

        outputs: List[logging.Handler] = []
        if cfg.console:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(logging.Formatter(cfg.console_fmt))
            outputs.append(console)
        if cfg.log_file:
            file_handler = _open_log_file(cfg)
            if file_handler is not None:
                outputs.append(file_handler)
        if not outputs:
            return target

        for handler in outputs:
            handler.setLevel(level)
            _tag(handler)

        records: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
        front = QueueHandler(records)
        _tag(front)
        listener = QueueListener(records, *outputs, respect_handler_level=True)
        listener.start()
        atexit.register(_stop_listener, listener)

        target.addHandler(front)
        setattr(target, _QUEUE_LISTENER_ATTR, listener)
        setattr(target, _CONFIGURED_FLAG_ATTR, True)
        return target

    except Exception:
        _teardown(target)
        emergency = logging.StreamHandler(sys.stderr)
        emergency.setFormatter(logging.Formatter("dirtree (fallback) %(levelname)s %(message)s"))
        _tag(emergency)
        target.addHandler(emergency)
        target.warning("Queued logging could not be set up; writing straight to stderr.")
        return target


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Return the last n_lines of a log file.

    Args:
        n_lines: Lines to keep from the end.
        log_path: File to read; defaults to get_default_log_path().

    Returns:
        str: The tail, or a notice when the file does not exist.
    """
    path = log_path or get_default_log_path()
    if not os.path.exists(path):
        return "Log file not found."

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.readlines()
    return "".join(lines[-n_lines:])

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _tag(handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _open_log_file(cfg: LoggingConfig) -> Optional[RotatingFileHandler]:
    """Open the rotating log file, or warn on stderr and return None."""
    try:
        os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
        handler = RotatingFileHandler(
            cfg.log_file,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"dirtree: cannot open log file {cfg.log_file!r}: {e}\n")
        return None
    handler.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
    return handler


def _teardown(target: logging.Logger) -> None:
    """Stop our listener and detach every handler we attached."""
    _stop_listener(getattr(target, _QUEUE_LISTENER_ATTR, None))
    setattr(target, _QUEUE_LISTENER_ATTR, None)
    setattr(target, _CONFIGURED_FLAG_ATTR, False)
    for handler in list(target.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            target.removeHandler(handler)
            handler.close()


def _stop_listener(listener: Optional[QueueListener]) -> None:
    # stop() fails on a listener whose thread is already gone
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
