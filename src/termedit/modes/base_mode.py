"""Base classes and shared types for session modes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional

if TYPE_CHECKING:
    from termedit.session.render import RenderState
    from termedit.session.session import EditSession

COMMANDS: frozenset[str] = frozenset(
    {
        "insert_char",
        "delete_char",
        "newline",
        "move_up",
        "move_down",
        "move_left",
        "move_right",
        "tab",
        "undo",
        "redo",
        "save",
        "find",
        "find_next",
        "find_prev",
        "paste",
        "interrupt",
    }
)

# commands that extend an open typing burst instead of closing it
TYPING_COMMANDS: frozenset[str] = frozenset({"insert_char", "delete_char", "tab"})


@dataclass(frozen=True, slots=True)
class Command:
    """One decoded editor command; ``text`` carries inserted or pasted text."""

    name: str
    text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.name not in COMMANDS:
            raise ValueError(f"Unknown command '{self.name}'")


@dataclass(slots=True)
class CommandResult:
    """Result returned from ``Mode.handle``."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    switch_to: Optional[str] = None
    mutated: bool = False
    view: Optional["RenderState"] = None


class ModeBus:
    """Minimal event bus letting the session publish structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all session modes inherit from."""

    name: str = "mode"

    def __init__(self, session: "EditSession") -> None:
        self.session = session

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle(
        self, command: Command
    ) -> CommandResult:  # pragma: no cover - abstract override
        raise NotImplementedError
