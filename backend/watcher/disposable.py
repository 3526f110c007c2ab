"""
PathWatch Disposal Bag.

Ordered, run-once teardown of owned resources.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from typing import Any, Protocol

import structlog

from utils.logger import LoggerMixin


class Closeable(Protocol):
    """Anything that releases its resources through close()."""

    def close(self) -> Any: ...


class ObjectDisposedError(RuntimeError):
    """Raised when a resource is registered with an already disposed bag."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is already disposed")
        self.name = name


class DisposableBag(LoggerMixin):
    """
    Collects cleanup actions and runs each of them exactly once.

    Actions run in the order they were added. A failing action is logged
    and does not stop the rest of the teardown.
    """

    def __init__(self, name: str, log: structlog.stdlib.BoundLogger | None = None) -> None:
        """
        Initialize the bag.

        Args:
            name: Owner name used in log entries and errors
            log: Logger for failed actions, defaults to the class logger
        """
        if log is not None:
            self._logger = log
        self._name = name
        self._actions: list[Callable[[], Any]] = []
        self._lock = threading.Lock()
        self._disposed = False

    def add(self, item: Callable[[], Any] | Closeable) -> "DisposableBag":
        """
        Register a cleanup action.

        Args:
            item: Zero-argument callable, or an object with close()

        Returns:
            The bag itself, for chaining

        Raises:
            ObjectDisposedError: If the bag was already disposed
        """
        action = item if callable(item) else item.close
        with self._lock:
            if self._disposed:
                raise ObjectDisposedError(self._name)
            self._actions.append(action)
        return self

    def try_dispose(self) -> bool:
        """
        Run all registered actions.

        Returns:
            True if this call performed the teardown, False if the bag
            was already disposed
        """
        with self._lock:
            if self._disposed:
                return False
            self._disposed = True
            actions, self._actions = self._actions, []

        for action in actions:
            try:
                action()
            except Exception as e:
                self.log.error("dispose_action_failed", owner=self._name, error=str(e))
        return True

    @property
    def is_disposed(self) -> bool:
        """Check whether the bag has been disposed."""
        return self._disposed

    def __len__(self) -> int:
        return len(self._actions)
