"""Executable Textual app that hosts the edit session."""

from __future__ import annotations

import argparse
import os
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use termedit.adapters.textual.app"
    ) from exc

from termedit.config import EditorConfig
from termedit.runtime import telemetry
from termedit.session import EditSession, RenderState

from .controller import TextualEditorAdapter, TextualUIHooks

GUTTER_STYLE = "yellow"
MATCH_STYLE = "black on yellow"
CURSOR_STYLE = "reverse"
MESSAGE_STYLE = "bold"
PROMPT_STYLE = "reverse"


class AppGeometry:
    """Terminal size as Textual reports it; zero until the first layout."""

    def __init__(self, app: App[Any]) -> None:
        self._app = app

    def rows(self) -> Optional[int]:
        return self._app.size.height or None

    def columns(self) -> Optional[int]:
        return self._app.size.width or None


def render_text(state: RenderState) -> Text:
    """Paint visible lines with the gutter, search highlights and cursor."""

    text = Text(no_wrap=True, overflow="crop")
    cursor_row, cursor_col = state.cursor_screen_pos
    width = state.gutter_width
    for row, line in enumerate(state.visible_lines):
        if row:
            text.append("\n")
        start = len(text)
        text.append(f"{line.number:>{width - 1}} ", style=GUTTER_STYLE)
        body_start = len(text)
        text.append(line.text)
        for span_start, span_end in line.highlights:
            text.stylize(MATCH_STYLE, body_start + span_start, body_start + span_end)
        if row == cursor_row and state.prompt is None:
            column = start + cursor_col
            if column >= len(text):
                text.append(" ", style=CURSOR_STYLE)
            else:
                text.stylize(CURSOR_STYLE, column, column + 1)
    return text


class TermEditApp(App[None]):
    """Single-buffer line editor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		content-align: left top;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#message-line {
		height: 1;
		padding: 0 1;
	}
	"""

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+c", "dispatch_key('ctrl+c')", show=False, priority=True),
        Binding("tab", "dispatch_key('tab')", show=False, priority=True),
    ]

    def __init__(self, session: EditSession) -> None:
        super().__init__()
        self.session = session
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._message_widget: Static | None = None
        self._logger = telemetry.get_logger("termedit.app")

    def compose(self) -> ComposeResult:
        self._buffer_widget = Static("", id="buffer-view")
        self._status_widget = Static("", id="status-line")
        self._message_widget = Static("", id="message-line")
        yield self._buffer_widget
        yield self._status_widget
        yield self._message_widget

    def on_mount(self) -> None:
        self.session.geometry = AppGeometry(self)
        hooks = TextualUIHooks(
            update_view=self._update_view,
            handle_event=self._handle_event,
            log=self._logger.debug,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        self.set_interval(0.1, self._process_timeouts)

    def on_resize(self, event: events.Resize) -> None:
        del event
        self.session.render()

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    def action_dispatch_key(self, key: str) -> None:
        if self.adapter:
            self.adapter.handle_textual_key(key)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result is not None:
            event.stop()
            event.prevent_default()

    def on_paste(self, event: events.Paste) -> None:
        if self.adapter:
            self.adapter.handle_paste(event.text)
        event.stop()

    def _update_view(self, state: RenderState) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_text(state))
        if self._status_widget:
            self._status_widget.update(state.status.describe())
        if self._message_widget:
            style = PROMPT_STYLE if state.prompt is not None else MESSAGE_STYLE
            self._message_widget.update(Text(state.bottom_line, style=style))

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "save.failed":
            self.bell()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a text file in the terminal.")
    parser.add_argument("path", nargs="?", help="File to open (created on save)")
    parser.add_argument(
        "--directory",
        default=telemetry.env("DIRECTORY") or os.getcwd(),
        help="Directory that relative save names resolve against",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help="Quiet period that closes an undo step while typing",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset="tui")
    overrides: dict[str, object] = {"directory": args.directory}
    if args.debounce_ms is not None:
        overrides["debounce_ms"] = args.debounce_ms
    config = EditorConfig.from_env(**overrides)
    if args.path:
        session = EditSession.open(args.path, config=config)
    else:
        session = EditSession(config=config)
    TermEditApp(session).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
