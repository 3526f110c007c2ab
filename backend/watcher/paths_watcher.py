"""
PathWatch Paths Watcher.

Watches a set of root directories recursively and calls back once
entry creation and deletion activity has settled.
Requires Python 3.11+.
"""

import asyncio
import os
import stat
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog
from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from utils.config import get_settings
from utils.logger import LoggerMixin
from watcher.debouncer import Debouncer
from watcher.disposable import DisposableBag
from watcher.types import DEBOUNCE_PERIOD_MS, ChangeKind

# Name changes only; modifications and in-place renames are never delivered
NAME_CHANGE_EVENTS = [
    FileCreatedEvent,
    DirCreatedEvent,
    FileDeletedEvent,
    DirDeletedEvent,
]


class ChangeEventHandler(FileSystemEventHandler):
    """Forwards created/deleted events from one watch to the debouncer."""

    def __init__(self, debouncer: Debouncer) -> None:
        super().__init__()
        self._debouncer = debouncer
        self._active = True

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        """Handle file/directory creation."""
        if self._active:
            self._debouncer.signal(ChangeKind.ENTRY_CREATED)

    def on_deleted(self, event: FileDeletedEvent | DirDeletedEvent) -> None:
        """Handle file/directory deletion."""
        if self._active:
            self._debouncer.signal(ChangeKind.ENTRY_REMOVED)

    def unsubscribe(self) -> None:
        """Drop every event delivered from now on."""
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


@dataclass
class WatchTarget:
    """One opened recursive watch on a directory."""

    path: str
    observer: Observer
    handler: ChangeEventHandler

    @property
    def active(self) -> bool:
        """Check whether events from this watch still reach the debouncer."""
        return self.handler.active

    def unsubscribe(self) -> None:
        self.handler.unsubscribe()

    def disable(self) -> None:
        """Stop event delivery from the OS watch."""
        self.observer.unschedule_all()

    def close(self) -> None:
        """Stop the observer thread and release its handle."""
        self.observer.stop()
        if threading.current_thread() is not self.observer:
            self.observer.join(timeout=get_settings().watcher.join_timeout_seconds)


def _is_directory(path: str) -> bool:
    """
    Check that path exists and is a directory.

    A path the OS cannot represent (embedded NUL byte) counts as absent.

    Raises:
        OSError: For failures other than the path being absent
    """
    try:
        mode = os.stat(path).st_mode
    except (FileNotFoundError, NotADirectoryError, ValueError):
        return False
    return stat.S_ISDIR(mode)


class PathsWatcher(LoggerMixin):
    """
    Debounced change aggregator over several root directories.

    Every directory that can be watched gets its own observer; all of
    them feed one Debouncer, which calls ``on_changed`` once no entry
    was created or removed for a full period. Directories that cannot
    be accessed or watched are logged and skipped, so construction
    always succeeds, possibly watching nothing.
    """

    def __init__(
        self,
        paths: Iterable[str] | None,
        on_changed: Callable[[], Any],
        log: structlog.stdlib.BoundLogger | None = None,
        *,
        period_ms: int = DEBOUNCE_PERIOD_MS,
    ) -> None:
        """
        Initialize the watcher and start watching.

        Args:
            paths: Candidate root directories; relative ones are ignored
            on_changed: Zero-argument callback, sync or async
            log: Logger for diagnostics, defaults to the class logger
            period_ms: Debounce period in milliseconds
        """
        if log is not None:
            self._logger = log

        self._disposables = DisposableBag(type(self).__name__, log=log)
        self._targets: list[WatchTarget] = []
        self._debouncer: Debouncer | None = None

        roots = [p for p in (paths or []) if os.path.isabs(p)]
        if not roots:
            return

        self._debouncer = Debouncer(callback=on_changed, period_ms=period_ms, log=log)
        self._disposables.add(self._debouncer.dispose)

        for path in roots:
            try:
                if not _is_directory(path):
                    continue
            except OSError as e:
                self.log.warning("directory_access_failed", path=path, error=str(e))
                continue

            try:
                target = self._open_target(path)
            except (OSError, ValueError) as e:
                self.log.warning("watch_creation_failed", path=path, error=str(e))
                continue

            self._targets.append(target)
            (
                self._disposables
                .add(target.unsubscribe)
                .add(target.disable)
                .add(target)
            )

        if self._targets:
            self.log.debug("paths_watcher_started", paths=self.watched_paths)

    def _open_target(self, path: str) -> WatchTarget:
        """
        Open a recursive name-change watch on one directory.

        Raises:
            OSError: If the OS rejects the watch
            ValueError: If the path is not acceptable to the observer
        """
        handler = ChangeEventHandler(self._debouncer)
        observer = Observer()
        observer.name = f"paths-watcher:{path}"
        observer.daemon = True
        observer.schedule(
            handler,
            path,
            recursive=True,
            event_filter=NAME_CHANGE_EVENTS,
        )
        observer.start()
        return WatchTarget(path=path, observer=observer, handler=handler)

    def set_event_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Set the event loop that async callbacks run on."""
        if self._debouncer is not None:
            self._debouncer.set_event_loop(loop)

    def dispose(self) -> None:
        """Release every watch and the debounce timer. Safe to repeat."""
        if self._disposables.try_dispose():
            self._targets.clear()
            self.log.debug("paths_watcher_disposed")

    close = dispose

    @property
    def targets(self) -> tuple[WatchTarget, ...]:
        """Currently held watches."""
        return tuple(self._targets)

    @property
    def watched_paths(self) -> list[str]:
        """Directories currently being watched."""
        return [target.path for target in self._targets]

    @property
    def is_disposed(self) -> bool:
        return self._disposables.is_disposed

    def __enter__(self) -> "PathsWatcher":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.dispose()
