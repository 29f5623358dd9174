"""Textual-agnostic adapter that feeds key tokens into an EditSession."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from termedit.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from termedit.modes import Command, CommandResult
from termedit.session import EditSession, RenderState

SESSION_EVENTS = (
    "prompt.start",
    "prompt.end",
    "prompt.submit",
    "prompt.cancel",
    "save.ok",
    "save.failed",
    "search.done",
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[RenderState], None]
    handle_event: Callable[[str, object | None], None] = _noop
    # Optional debug line sink
    log: Callable[[str], None] = _noop


def create_default_resolver() -> KeymapResolver:
    registry = KeymapRegistry(logger_name="termedit.keymaps")
    load_default_keymaps(registry)
    return KeymapResolver(registry, logger_name="termedit.keymaps")


class TextualEditorAdapter:
    """Bridges a session and its bus events to a Textual-friendly surface."""

    def __init__(
        self,
        session: EditSession,
        hooks: TextualUIHooks,
        *,
        resolver: Optional[KeymapResolver] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.resolver = resolver or create_default_resolver()
        session.render_sink = hooks.update_view
        self._subscribe_events()
        session.render()

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> Optional[CommandResult]:
        """Resolve a Textual key event and dispatch it; ``None`` if unbound."""

        resolution = self.resolver.resolve(key, character)
        self._log_state("key ->", key=key, character=character, status=resolution.status)
        if resolution.command is None:
            return None
        return self._dispatch(resolution.command)

    def handle_paste(self, text: str) -> Optional[CommandResult]:
        if not text:
            return None
        return self._dispatch(Command("paste", text=text))

    def process_timeouts(self) -> bool:
        fired = self.session.process_timeouts()
        if fired:
            self._log_state("timeout ->", event="typing_burst_closed")
        return fired

    def _dispatch(self, command: Command) -> CommandResult:
        result = self.session.handle(command)
        self._log_state(
            "result <-",
            command=command.name,
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def _subscribe_events(self) -> None:
        for event in SESSION_EVENTS:
            self.session.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.session.buffer
        return {
            "mode": self.session.mode,
            "cursor": buffer.cursor.as_tuple(),
            "lines": buffer.line_count,
            "modified": buffer.modified,
            "version": buffer.document.version,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks", "create_default_resolver"]
