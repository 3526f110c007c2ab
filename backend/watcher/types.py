"""
PathWatch Watcher Types.

Shared enums and constants for the watcher package.
Requires Python 3.11+.
"""

from enum import Enum

# Period and initial delay of the recurring debounce timer
DEBOUNCE_PERIOD_MS = 1000


class ChangeKind(str, Enum):
    """Kinds of name changes a directory watch reports."""

    ENTRY_CREATED = "created"
    ENTRY_REMOVED = "removed"
