"""Bounded undo/redo history built from buffer snapshots."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Protocol

from termedit.config import DEFAULT_HISTORY_LIMIT
from termedit.runtime import telemetry

from .state import Snapshot


class Restorable(Protocol):
    """Anything that can hand out and take back snapshots."""

    def snapshot(self) -> Snapshot: ...

    def restore(self, snapshot: Snapshot) -> None: ...


class HistoryManager:
    """Linear undo/redo stacks.

    The undo stack is capped at ``limit`` entries and drops the oldest when a
    new one arrives. The redo stack is only filled by ``undo`` and is emptied
    by every new ``save``.
    """

    def __init__(self, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._undo: Deque[Snapshot] = deque(maxlen=limit)
        self._redo: List[Snapshot] = []

    @property
    def depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def peek(self) -> Optional[Snapshot]:
        return self._undo[-1] if self._undo else None

    def save(self, buffer: Restorable) -> None:
        self.record(buffer.snapshot())

    def record(self, snapshot: Snapshot) -> None:
        """Push an already captured pre-edit snapshot."""

        evicted = len(self._undo) == self.limit
        self._undo.append(snapshot)
        self._redo.clear()
        if evicted:
            telemetry.record_event(
                "history.evict", level="debug", data={"limit": self.limit}
            )

    def undo(self, buffer: Restorable) -> bool:
        if not self._undo:
            return False
        snapshot = self._undo.pop()
        self._redo.append(buffer.snapshot())
        buffer.restore(snapshot)
        return True

    def redo(self, buffer: Restorable) -> bool:
        if not self._redo:
            return False
        snapshot = self._redo.pop()
        # appending directly keeps redo intact; ``record`` would clear it
        self._undo.append(buffer.snapshot())
        buffer.restore(snapshot)
        return True

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()


__all__ = ["HistoryManager", "Restorable"]
