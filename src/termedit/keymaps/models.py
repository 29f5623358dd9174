"""Dataclasses describing key bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from termedit.modes import COMMANDS

_MODIFIER_ORDER = ("ctrl", "alt", "meta", "shift")


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = {m.strip().lower() for m in modifiers if m.strip()}
    known = [m for m in _MODIFIER_ORDER if m in values]
    return tuple(known + sorted(values.difference(_MODIFIER_ORDER)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press, e.g. ``ctrl+z`` or ``up``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+f3"`` style tokens; ``"+"`` alone is a key."""

        raw = token.strip()
        if not raw:
            raise ValueError("token cannot be empty")
        if raw == "+" or raw.endswith("++"):
            return cls("+", tuple(part for part in raw[:-1].split("+") if part))
        *modifiers, key = raw.split("+")
        return cls(key, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a keystroke with a session command."""

    id: str
    stroke: KeyStroke
    command: str
    description: str = ""
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if self.command not in COMMANDS:
            raise ValueError(
                f"Binding '{self.id}' references unknown command '{self.command}'"
            )

    @property
    def key_signature(self) -> str:
        return self.stroke.token


__all__ = ["Binding", "KeyStroke"]
