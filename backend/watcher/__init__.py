"""
PathWatch Watcher Package.

Debounced monitoring of directory trees for entry creation and deletion.
Requires Python 3.11+.
"""

from watcher.debouncer import Debouncer
from watcher.disposable import DisposableBag, ObjectDisposedError
from watcher.paths_watcher import PathsWatcher, WatchTarget
from watcher.types import DEBOUNCE_PERIOD_MS, ChangeKind

__all__ = [
    "PathsWatcher",
    "WatchTarget",
    "Debouncer",
    "DisposableBag",
    "ObjectDisposedError",
    "ChangeKind",
    "DEBOUNCE_PERIOD_MS",
]
