"""Built-in key bindings."""

from __future__ import annotations

from typing import Iterable

from .models import Binding, KeyStroke
from .registry import KeymapRegistry

# (token, command, description)
_DEFAULTS: tuple[tuple[str, str, str], ...] = (
    ("enter", "newline", "Split the line at the cursor"),
    ("backspace", "delete_char", "Delete before the cursor"),
    ("ctrl+h", "delete_char", "Delete before the cursor"),
    ("tab", "tab", "Insert indentation"),
    ("up", "move_up", "Cursor up"),
    ("down", "move_down", "Cursor down"),
    ("left", "move_left", "Cursor left"),
    ("right", "move_right", "Cursor right"),
    ("ctrl+z", "undo", "Undo"),
    ("ctrl+y", "redo", "Redo"),
    ("ctrl+s", "save", "Save"),
    ("ctrl+f", "find", "Find"),
    ("ctrl+n", "find_next", "Next match"),
    ("f3", "find_next", "Next match"),
    ("ctrl+p", "find_prev", "Previous match"),
    ("shift+f3", "find_prev", "Previous match"),
    ("escape", "interrupt", "Cancel the prompt"),
    ("ctrl+c", "interrupt", "Cancel the prompt"),
)


def default_bindings() -> tuple[Binding, ...]:
    return tuple(
        Binding(
            id=f"default.{token}",
            stroke=KeyStroke.parse(token),
            command=command,
            description=description,
            source="defaults",
        )
        for token, command, description in _DEFAULTS
    )


def load_default_keymaps(
    registry: KeymapRegistry, *, bindings: Iterable[Binding] | None = None
) -> None:
    for binding in bindings if bindings is not None else default_bindings():
        registry.register_binding(binding, replace=True)


__all__ = ["default_bindings", "load_default_keymaps"]
