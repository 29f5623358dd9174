"""Session modes and command dispatch."""

from .base_mode import (
    COMMANDS,
    TYPING_COMMANDS,
    Command,
    CommandResult,
    Mode,
    ModeBus,
)
from .capture_mode import CaptureMode
from .mode_manager import ModeManager
from .normal_mode import NormalMode

__all__ = [
    "COMMANDS",
    "TYPING_COMMANDS",
    "CaptureMode",
    "Command",
    "CommandResult",
    "Mode",
    "ModeBus",
    "ModeManager",
    "NormalMode",
]
