"""Exception types raised by the tracker core."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for recoverable tracker errors."""


class PersistenceError(TrackerError):
    """Raised when the user list cannot be serialized, decoded, or written.

    The in-memory state is kept when a save fails; callers may retry with
    ``CycleStore.flush()``.
    """


class UserIndexError(TrackerError, IndexError):
    """Raised when a write targets a selection index with no user behind it."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"No user at index {index} (have {count})")
        self.index = index
        self.count = count
