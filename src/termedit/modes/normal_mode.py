"""Normal mode: every command goes straight to the session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from .base_mode import Command, CommandResult, Mode

if TYPE_CHECKING:
    from termedit.session.session import EditSession

Handler = Callable[[Command], CommandResult]


class NormalMode(Mode):
    name = "normal"

    def __init__(self, session: "EditSession") -> None:
        super().__init__(session)
        self._handlers: Dict[str, Handler] = {
            "insert_char": lambda cmd: session.insert_char(cmd.text or ""),
            "delete_char": lambda _: session.delete_char(),
            "newline": lambda _: session.insert_new_line(),
            "move_up": lambda _: session.move_cursor("up"),
            "move_down": lambda _: session.move_cursor("down"),
            "move_left": lambda _: session.move_cursor("left"),
            "move_right": lambda _: session.move_cursor("right"),
            "tab": lambda _: session.insert_tab(),
            "undo": lambda _: session.undo(),
            "redo": lambda _: session.redo(),
            "save": lambda _: session.save(),
            "find": lambda _: session.find(),
            "find_next": lambda _: session.find_next(),
            "find_prev": lambda _: session.find_prev(),
            "paste": lambda cmd: session.paste(cmd.text or ""),
            "interrupt": lambda _: CommandResult(consumed=False, status="noop"),
        }

    def handle(self, command: Command) -> CommandResult:
        handler = self._handlers.get(command.name)
        if handler is None:  # pragma: no cover - COMMANDS and the table agree
            return CommandResult(consumed=False, status="miss")
        return handler(command)


__all__ = ["NormalMode"]
