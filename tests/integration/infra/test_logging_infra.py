from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture on the package logger, idempotency
of configuration, log file rotation and log tail retrieval.
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterator, List
from unittest.mock import patch

import pytest

from dirtree.infra.logging import (
    PACKAGE_LOGGER,
    LoggingConfig,
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    configure_logging,
    get_default_log_path,
    get_recent_logs,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Detach our handlers from the package logger before and after each test."""
    _reset_package_logger()
    yield
    _reset_package_logger()


def _reset_package_logger() -> None:
    target = logging.getLogger(PACKAGE_LOGGER)

    listener = getattr(target, _QUEUE_LISTENER_ATTR, None)
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
    setattr(target, _QUEUE_LISTENER_ATTR, None)

    for h in list(target.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            target.removeHandler(h)
            h.close()

    setattr(target, _CONFIGURED_FLAG_ATTR, False)
    target.setLevel(logging.NOTSET)


def _our_handlers(name: str = PACKAGE_LOGGER) -> List[logging.Handler]:
    return [h for h in logging.getLogger(name).handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial_handler_count = len(_our_handlers())

    configure_logging(cfg)
    assert len(_our_handlers()) == initial_handler_count, "Handlers were duplicated."


def test_root_logger_is_left_alone() -> None:
    before = list(logging.getLogger().handlers)

    configure_logging(LoggingConfig(console=True))

    assert logging.getLogger().handlers == before
    assert len(_our_handlers()) == 1


def test_force_reconfigure_replaces_listener() -> None:
    configure_logging(LoggingConfig(level="INFO", console=True))
    first = getattr(logging.getLogger(PACKAGE_LOGGER), _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)
    target = logging.getLogger(PACKAGE_LOGGER)

    assert getattr(target, _QUEUE_LISTENER_ATTR) is not first
    assert len(_our_handlers()) == 1
    assert target.level == logging.DEBUG


def test_from_options_maps_debug_to_level() -> None:
    assert LoggingConfig.from_options({"debug": True}).level == "DEBUG"
    assert LoggingConfig.from_options({"debug": False, "ms": 50}).level == "INFO"
    assert LoggingConfig.from_options({}, console=False).console is False


def test_unknown_level_falls_back_to_info() -> None:
    target = configure_logging(LoggingConfig(level="chatty"))
    assert target.level == logging.INFO


def test_log_rotation(tmp_path: Path) -> None:
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger(f"{PACKAGE_LOGGER}.test_rotate")

    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)

    backup_file = tmp_path / "test_rotate.log.1"
    assert log_file.exists()
    assert backup_file.exists(), "Rotation backup file was not created."


def test_records_reach_the_file(tmp_path: Path) -> None:
    log_file = tmp_path / "dirtree.log"
    configure_logging(LoggingConfig(console=False, log_file=str(log_file)))

    logging.getLogger(f"{PACKAGE_LOGGER}.core.interpreter").info("Directory tree written at out")
    time.sleep(0.5)

    assert "Directory tree written at out" in get_recent_logs(5, str(log_file))


def test_queue_listener_architecture() -> None:
    configure_logging(LoggingConfig(level="INFO", console=True))

    target = logging.getLogger(PACKAGE_LOGGER)

    assert len(_our_handlers()) > 0
    assert getattr(target, _QUEUE_LISTENER_ATTR) is not None


def test_no_outputs_leaves_logger_unconfigured() -> None:
    configure_logging(LoggingConfig(console=False, log_file=None))

    assert _our_handlers() == []
    assert not getattr(logging.getLogger(PACKAGE_LOGGER), _CONFIGURED_FLAG_ATTR, False)


def test_get_recent_logs_tail(tmp_path: Path) -> None:
    log_file = tmp_path / "tail.log"
    log_file.write_text("".join(f"line {i}\n" for i in range(10)), encoding="utf-8")

    assert get_recent_logs(3, str(log_file)) == "line 7\nline 8\nline 9\n"


def test_get_recent_logs_missing_file(tmp_path: Path) -> None:
    assert get_recent_logs(log_path=str(tmp_path / "absent.log")) == "Log file not found."


def test_default_log_path_under_user_data_dir(tmp_path: Path) -> None:
    with patch("dirtree.infra.logging.core.get_user_data_dir", return_value=str(tmp_path)):
        path = get_default_log_path()
        assert path == os.path.join(str(tmp_path), "logs", "dirtree.log")
        assert get_recent_logs() == "Log file not found."
