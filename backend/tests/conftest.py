"""
PathWatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import threading
from pathlib import Path

import pytest

# Short period keeps timing tests fast; waits below are multiples of it
PERIOD_MS = 200
PERIOD = PERIOD_MS / 1000.0


class CallbackRecorder:
    """Thread-safe zero-argument callback that counts its invocations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls = 0
        self.fired = threading.Event()

    def __call__(self) -> None:
        with self._lock:
            self._calls += 1
        self.fired.set()

    @property
    def calls(self) -> int:
        with self._lock:
            return self._calls

    def wait(self, timeout: float = 5.0) -> bool:
        """Block until the first invocation or the timeout."""
        return self.fired.wait(timeout)


@pytest.fixture
def recorder() -> CallbackRecorder:
    """Create a callback recorder."""
    return CallbackRecorder()


@pytest.fixture
def watch_root(tmp_path: Path) -> Path:
    """Create a directory tree to watch."""
    root = tmp_path / "search_path"
    root.mkdir()
    (root / "pkg").mkdir()
    (root / "pkg" / "__init__.py").write_text('"""Package init."""\n')
    (root / "module.py").write_text("VALUE = 1\n")
    return root


@pytest.fixture
def second_root(tmp_path: Path) -> Path:
    """Create a second, empty directory to watch."""
    root = tmp_path / "site_packages"
    root.mkdir()
    return root
