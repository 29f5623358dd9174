"""Buffer abstractions and undo/redo data structures."""

from .buffer import DIRECTIONS, Direction, TextBuffer, Transaction
from .document import BufferDocument, split_lines
from .state import BufferState, Cursor, Snapshot
from .undo import HistoryManager, Restorable
from .validation import clamp_cursor

__all__ = [
    "BufferDocument",
    "BufferState",
    "Cursor",
    "DIRECTIONS",
    "Direction",
    "HistoryManager",
    "Restorable",
    "Snapshot",
    "TextBuffer",
    "Transaction",
    "clamp_cursor",
    "split_lines",
]
