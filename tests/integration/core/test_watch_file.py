from __future__ import annotations

"""
Integration tests for watch_file() over a real watchdog Observer.

Timing-based: the observer needs a moment to start before changes are
made, and each wait is bounded so a missed event fails instead of hanging.
"""

import asyncio
from pathlib import Path
from typing import List

import pytest

from dirtree import FsChange, watch_file

TIMEOUT = 10.0
STARTUP = 0.5


def test_watch_directory_reports_new_file(tmp_path: Path) -> None:
    target = tmp_path / "new.txt"
    seen: List[FsChange] = []

    def on_change(change: FsChange) -> bool:
        seen.append(change)
        return change.path == str(target)

    async def scenario() -> None:
        task = asyncio.create_task(watch_file(str(tmp_path), on_change, {"ms": 50}))
        await asyncio.sleep(STARTUP)
        target.write_text("hello", encoding="utf-8")
        await asyncio.wait_for(task, TIMEOUT)

    asyncio.run(scenario())

    assert any(c.path == str(target) for c in seen)


def test_watch_single_file_ignores_siblings(tmp_path: Path) -> None:
    watched = tmp_path / "watched.txt"
    watched.write_text("v1", encoding="utf-8")
    seen: List[FsChange] = []

    def on_change(change: FsChange) -> bool:
        seen.append(change)
        return True

    async def scenario() -> None:
        task = asyncio.create_task(watch_file(watched, on_change, {"ms": 50}))
        await asyncio.sleep(STARTUP)
        (tmp_path / "sibling.txt").write_text("x", encoding="utf-8")
        watched.write_text("v2", encoding="utf-8")
        await asyncio.wait_for(task, TIMEOUT)

    asyncio.run(scenario())

    assert seen
    assert all(c.path == str(watched) for c in seen)


def test_callback_exception_is_reraised(tmp_path: Path) -> None:
    def on_change(change: FsChange) -> bool:
        raise RuntimeError("callback failed")

    async def scenario() -> None:
        task = asyncio.create_task(watch_file(str(tmp_path), on_change, {"ms": 50}))
        await asyncio.sleep(STARTUP)
        (tmp_path / "boom.txt").write_text("x", encoding="utf-8")
        await asyncio.wait_for(task, TIMEOUT)

    with pytest.raises(RuntimeError, match="callback failed"):
        asyncio.run(scenario())


def test_invalid_options_rejected(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        asyncio.run(watch_file(str(tmp_path), lambda c: True, {"ms": "soon"}))
