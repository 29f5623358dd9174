"""Capture mode: collects a filename or search query on the prompt line.

While it is active the buffer is out of reach. Typed characters land in the
prompt, ``newline`` submits, ``interrupt`` abandons the partial value, and
anything else is rejected.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from .base_mode import Command, CommandResult, Mode

SubmitHandler = Callable[[str], CommandResult]


class CaptureMode(Mode):
    name = "capture"

    def __init__(self, session) -> None:
        super().__init__(session)
        self.label = ""
        self._typed: List[str] = []
        self._on_submit: Optional[SubmitHandler] = None

    def prepare(self, label: str, on_submit: SubmitHandler) -> None:
        self.label = label
        self._on_submit = on_submit
        self._typed.clear()

    @property
    def current_text(self) -> str:
        return "".join(self._typed)

    def on_enter(self, previous: str | None) -> None:
        del previous
        self.session.bus.emit("prompt.start", self.label)

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        self.session.bus.emit("prompt.end", self.label)
        self._typed.clear()
        self._on_submit = None

    def handle(self, command: Command) -> CommandResult:
        if command.name == "interrupt":
            return self._finish("")

        if command.name == "newline":
            return self._finish(self.current_text)

        if command.name == "delete_char":
            if self._typed:
                self._typed.pop()
            return CommandResult(consumed=True, status="editing")

        if command.name in {"insert_char", "paste"} and command.text:
            # a prompt is a single line; pasted text stops at the first break
            pieces = command.text.splitlines()
            first_line = pieces[0] if pieces else ""
            self._typed.extend(first_line)
            return CommandResult(consumed=True, status="editing")

        return CommandResult(consumed=False, status="rejected", message=command.name)

    def _finish(self, value: str) -> CommandResult:
        handler = self._on_submit
        self.session.bus.emit("prompt.submit" if value else "prompt.cancel", value)
        if handler is None:  # pragma: no cover - prepare() always precedes entry
            result = CommandResult(consumed=True, status="prompt_cancel")
        else:
            result = handler(value)
        result.switch_to = "normal"
        return result


__all__ = ["CaptureMode", "SubmitHandler"]
