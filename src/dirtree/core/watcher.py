from __future__ import annotations

"""
Debounced File-Change Notifier.

The OS reports one logical change (an editor save, say) as a burst of raw
events. FileEventHandler coalesces them: each (path, kind) pair gets its own
Debouncer, re-armed by every raw event, and the caller's callback runs once
the pair has been quiet for the debounce window.

watch_file() feeds the handler from a watchdog Observer. The observer runs
its own thread, so raw events are handed to the event loop through an
asyncio.Queue.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from dirtree.domain.config import DEFAULT_DEBOUNCE_MS, get_default_watch_options, validate_options

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

class FsChangeKind(Enum):
    CREATE = "create"
    MODIFY = "modify"
    REMOVE = "remove"
    RENAME = "rename"
    ACCESS = "access"
    OTHER = "other"


_WATCHDOG_KINDS: Dict[str, FsChangeKind] = {
    "created": FsChangeKind.CREATE,
    "modified": FsChangeKind.MODIFY,
    "deleted": FsChangeKind.REMOVE,
    "moved": FsChangeKind.RENAME,
    "opened": FsChangeKind.ACCESS,
    "closed": FsChangeKind.ACCESS,
    "closed_no_write": FsChangeKind.ACCESS,
}


@dataclass(frozen=True)
class FsChange:
    """
    A debounced filesystem change.

    Attributes:
        kind: Type of change.
        path: Absolute path the change applies to.
    """
    kind: FsChangeKind
    path: str


FsCallback = Callable[[FsChange], Any]
WatchPaths = Union[str, "os.PathLike[str]", Sequence[Union[str, "os.PathLike[str]"]]]

# -----------------------------------------------------------------------------
# DEBOUNCING
# -----------------------------------------------------------------------------

class Debouncer:
    """
    Delays a call until ms milliseconds have passed without a new trigger.

    Timers run on the event loop, so trigger() and cancel() must be called
    from the loop's thread.
    """

    def __init__(self, func: Callable[[], None], ms: int, loop: asyncio.AbstractEventLoop):
        self.func = func
        self.ms = ms
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)start the quiet-period timer."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._loop.call_later(self.ms / 1000, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.func()


class FileEventHandler:
    """
    Coalesces raw change events per (path, kind) before calling back.

    Every fired change is also appended to `changes`, which makes the
    handler usable without a callback for collecting changes in tests.
    """

    def __init__(
            self,
            callback: Optional[FsCallback] = None,
            *,
            ms: int = DEFAULT_DEBOUNCE_MS,
            debug: bool = False,
    ):
        self.callback = callback
        self.ms = ms
        self.debug = debug
        self.changes: List[FsChange] = []
        self._debouncers: Dict[Tuple[str, FsChangeKind], Debouncer] = {}

    @property
    def pending(self) -> int:
        """Number of (path, kind) pairs waiting for their quiet period."""
        return len(self._debouncers)

    def handle(self, change: FsChange) -> None:
        """
        Register one raw event. Must be called from within a running event loop.

        Args:
            change: Raw event to debounce.
        """
        self._dbg(f"HANDLE: {change.kind.value} {change.path}")
        key = (change.path, change.kind)
        debouncer = self._debouncers.get(key)
        if debouncer is None:
            self._dbg(f"Create handler for {change.kind.value} {change.path}")
            debouncer = Debouncer(
                lambda: self._fire(change),
                self.ms,
                asyncio.get_running_loop(),
            )
            self._debouncers[key] = debouncer
        debouncer.trigger()

    def close(self) -> None:
        """Cancel every pending debounced call."""
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        self._debouncers.clear()

    async def get_change_list(self) -> List[FsChange]:
        """Wait one debounce window, then return the changes fired so far."""
        await asyncio.sleep(self.ms / 1000)
        return list(self.changes)

    def _fire(self, change: FsChange) -> None:
        self._debouncers.pop((change.path, change.kind), None)
        self._dbg(f"FIRE: {change.kind.value} {change.path}")
        self.changes.append(change)
        if self.callback is not None:
            self.callback(change)

    def _dbg(self, msg: str) -> None:
        if self.debug:
            logger.debug(msg)


# -----------------------------------------------------------------------------
# WATCHDOG BRIDGE
# -----------------------------------------------------------------------------

class _QueueingEventHandler(FileSystemEventHandler):
    """Forwards watchdog events from the observer thread to an asyncio.Queue."""

    def __init__(
            self,
            queue: "asyncio.Queue[Optional[FsChange]]",
            loop: asyncio.AbstractEventLoop,
            only_path: Optional[str] = None,
    ):
        super().__init__()
        self._queue = queue
        self._loop = loop
        self._only_path = only_path

    def on_any_event(self, event: FileSystemEvent) -> None:
        kind = _WATCHDOG_KINDS.get(event.event_type, FsChangeKind.OTHER)
        paths = [event.src_path]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(dest_path)

        for raw in paths:
            path = os.path.abspath(os.fsdecode(raw))
            if self._only_path is not None and path != self._only_path:
                continue
            self._loop.call_soon_threadsafe(self._queue.put_nowait, FsChange(kind, path))


def _schedule(
        observer: Observer,
        path: str,
        queue: "asyncio.Queue[Optional[FsChange]]",
        loop: asyncio.AbstractEventLoop,
) -> None:
    """Watch a directory recursively, or a single file through its parent directory."""
    abs_path = os.path.abspath(path)
    if os.path.isdir(abs_path):
        observer.schedule(_QueueingEventHandler(queue, loop), abs_path, recursive=True)
    else:
        parent = os.path.dirname(abs_path)
        observer.schedule(_QueueingEventHandler(queue, loop, abs_path), parent, recursive=False)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def watch_file(
        paths: WatchPaths,
        callback: FsCallback,
        options: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Watch one or more files or directories until the callback asks to stop.

    The callback receives each debounced FsChange; a truthy return value
    ends the watch. An exception raised by the callback also ends it and is
    re-raised here.

    Usage:
        await watch_file("notes.txt", handler)
        await watch_file(["notes.txt", "src"], handler, {"ms": 500})

    Options:
        ms: Debounce window in milliseconds.
        debug: Trace raw and debounced events at DEBUG level.
    """
    opts, _ = validate_options(options, get_default_watch_options(), strict=True)
    if isinstance(paths, (str, os.PathLike)):
        path_list = [os.fspath(paths)]
    else:
        path_list = [os.fspath(p) for p in paths]

    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[Optional[FsChange]]" = asyncio.Queue()
    failures: List[Exception] = []

    def on_change(change: FsChange) -> None:
        try:
            result = callback(change)
        except Exception as e:
            failures.append(e)
            result = True
        if result:
            if opts["debug"]:
                logger.debug(f"Stop requested after {change.kind.value} {change.path}")
            queue.put_nowait(None)

    handler = FileEventHandler(on_change, ms=opts["ms"], debug=opts["debug"])
    observer = Observer()
    for path in path_list:
        _schedule(observer, path, queue, loop)

    logger.info(f"Watching {', '.join(path_list)}")
    observer.start()
    try:
        while True:
            change = await queue.get()
            if change is None:
                break
            handler.handle(change)
    finally:
        handler.close()
        observer.stop()
        observer.join()
        logger.info("Watcher closed")

    if failures:
        raise failures[0]


watch_files = watch_file
