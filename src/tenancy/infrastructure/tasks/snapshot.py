"""Per-nesting snapshot storage for context tasks.

Every ``make_current`` is matched by exactly one later ``forget_current``,
so a task's nesting depth is simply the number of unmatched
``make_current`` calls. The arena keys each snapshot by that depth.
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class SnapshotArena(Generic[T]):
    """Snapshots indexed by nesting depth (1 = outermost)."""

    def __init__(self) -> None:
        self._slots: dict[int, T] = {}
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def enter(self, snapshot: T) -> int:
        """Store ``snapshot`` one level deeper and return the new depth."""
        self._depth += 1
        self._slots[self._depth] = snapshot
        return self._depth

    def leave(self) -> T | None:
        """Release the deepest level and return its snapshot (None when empty)."""
        if self._depth == 0:
            return None
        snapshot = self._slots.pop(self._depth)
        self._depth -= 1
        return snapshot
