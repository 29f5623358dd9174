"""Edit session orchestration and its boundary contracts."""

from .debounce import DebounceTimer
from .persistence import FileSink, LoadResult, load_lines
from .ports import FixedGeometry, PersistenceSink, RenderSink, TerminalGeometry
from .render import PromptView, RenderState, StatusFields, VisibleLine
from .session import FIND_LABEL, SAVE_LABEL, UNTITLED, EditSession

__all__ = [
    "DebounceTimer",
    "EditSession",
    "FIND_LABEL",
    "FileSink",
    "FixedGeometry",
    "LoadResult",
    "PersistenceSink",
    "PromptView",
    "RenderSink",
    "RenderState",
    "SAVE_LABEL",
    "StatusFields",
    "TerminalGeometry",
    "UNTITLED",
    "VisibleLine",
    "load_lines",
]
