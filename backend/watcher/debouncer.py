"""
PathWatch Debouncer.

Coalesces bursts of directory change signals into one callback.
Requires Python 3.11+.
"""

import asyncio
import concurrent.futures
import inspect
import threading
from collections.abc import Callable
from typing import Any

import structlog

from utils.logger import LoggerMixin
from watcher.types import DEBOUNCE_PERIOD_MS, ChangeKind


class RepeatingTimer(threading.Thread):
    """
    Calls a function every ``interval`` seconds until cancelled.

    The first call happens one interval after start(). The function
    receives the timer so it can tell which timer is ticking.
    """

    def __init__(self, interval: float, function: Callable[["RepeatingTimer"], Any]) -> None:
        super().__init__(name="debounce-timer", daemon=True)
        self.interval = interval
        self.function = function
        self.finished = threading.Event()

    def cancel(self) -> None:
        """Stop the timer; no call starts after this returns."""
        self.finished.set()

    def run(self) -> None:
        while not self.finished.wait(self.interval):
            self.function(self)


class Debouncer(LoggerMixin):
    """
    Trailing-edge debounce with a fixed sampling period.

    The first signal starts a recurring timer. Every tick checks whether
    any signal arrived during the last period; the first quiet tick fires
    the callback on a separate thread and stops the timer. Activity is
    therefore coalesced into non-overlapping windows, and sustained churn
    with gaps shorter than one period never fires.
    """

    def __init__(
        self,
        callback: Callable[[], Any] | None = None,
        period_ms: int = DEBOUNCE_PERIOD_MS,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            callback: Zero-argument function or coroutine function to call
                once changes settle
            period_ms: Timer period and initial delay in milliseconds
            log: Logger for callback failures, defaults to the class logger
        """
        if log is not None:
            self._logger = log
        self._callback = callback
        self._period = period_ms / 1000.0
        self._lock = threading.Lock()
        self._timer: RepeatingTimer | None = None
        self._dirty = False
        self._disposed = False
        self._loop: asyncio.AbstractEventLoop | None = None

    def set_callback(self, callback: Callable[[], Any]) -> None:
        """Set or update the callback function."""
        self._callback = callback

    def set_event_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Set the event loop for async callbacks."""
        self._loop = loop

    def signal(self, kind: ChangeKind) -> None:
        """
        Record that an entry was created or removed.

        Safe to call from any thread. Returns as soon as the state is
        updated; after dispose() it does nothing.

        Args:
            kind: Kind of name change observed
        """
        with self._lock:
            if self._disposed:
                return
            if kind in (ChangeKind.ENTRY_CREATED, ChangeKind.ENTRY_REMOVED):
                self._dirty = True
                if self._timer is None:
                    self._timer = RepeatingTimer(self._period, self.tick)
                    self._timer.start()

    def tick(self, timer: RepeatingTimer) -> None:
        """
        Handle one timer period.

        Args:
            timer: The timer that is ticking
        """
        with self._lock:
            # Stale tick from a timer that was already stopped
            if timer is not self._timer:
                return
            if not self._dirty:
                self._dispatch()
                timer.cancel()
                self._timer = None
            self._dirty = False

    def dispose(self) -> None:
        """Stop the timer and ignore any further signals."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            timer, self._timer = self._timer, None
            self._dirty = False

        if timer is not None:
            timer.cancel()

    @property
    def is_pending(self) -> bool:
        """Check if changes are waiting for a quiet period."""
        return self._timer is not None

    @property
    def is_disposed(self) -> bool:
        """Check if the debouncer has been disposed."""
        return self._disposed

    def _dispatch(self) -> None:
        """Run the callback on its own thread without waiting for it."""
        callback = self._callback
        if callback is None:
            return
        threading.Thread(
            target=self._invoke,
            args=(callback,),
            name="debounce-callback",
            daemon=True,
        ).start()

    def _invoke(self, callback: Callable[[], Any]) -> None:
        self.log.debug("changes_settled")
        try:
            if inspect.iscoroutinefunction(callback):
                if self._loop is not None:
                    future = asyncio.run_coroutine_threadsafe(callback(), self._loop)
                    future.add_done_callback(self._report_async_failure)
                else:
                    asyncio.run(callback())
            else:
                callback()
        except Exception as e:
            self.log.error("debounce_callback_failed", error=str(e))

    def _report_async_failure(self, future: concurrent.futures.Future[Any]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.log.error("debounce_callback_failed", error=str(error))
