"""Mode manager coordinating the normal and capture pipelines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Type

from termedit.runtime import telemetry

from .base_mode import Command, CommandResult, Mode

if TYPE_CHECKING:
    from termedit.session.session import EditSession


class ModeManager:
    """Owns the active mode, handles transitions, and dispatches commands."""

    def __init__(self, session: "EditSession") -> None:
        self.session = session
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    def get(self, name: str) -> Mode:
        try:
            return self._modes[name]
        except KeyError as exc:
            raise KeyError(f"Unknown mode '{name}'") from exc

    def register_mode(self, mode_cls: Type[Mode]) -> Mode:
        mode = mode_cls(self.session)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", data={"mode": name})

    def handle(self, command: Command) -> CommandResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"command": command.name, "mode": mode.name},
        ):
            result = mode.handle(command)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result


__all__ = ["ModeManager"]
