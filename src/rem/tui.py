"""Textual front end for rem.

``RemTui`` owns the screen and the keyboard. Each key press is turned into
one of the key names the state machine understands and passed through
``dispatch``; the widgets are then redrawn from the new state.
"""

from __future__ import annotations

from textual import events
from textual.app import App as TextualApp
from textual.app import ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from rem.app import App, Mode
from rem.editor import EditorBridge
from rem.render import (
    INPUT_TITLE,
    PREVIEW_TITLE,
    draft_text,
    footer_text,
    list_title,
    preview,
    status_text,
)
from rem.runner import dispatch
from rem.task import TaskStatus

# Textual key names that differ from the ones App.handle_key expects.
KEY_NAMES: dict[str, str] = {
    "escape": "esc",
    "enter": "enter",
    "backspace": "backspace",
    "ctrl+h": "backspace",
    "up": "up",
    "down": "down",
    "ctrl+c": "ctrl+c",
}


def key_name(event: events.Key) -> str | None:
    """Map a textual key event to a state machine key, or None to ignore it."""
    if event.key in KEY_NAMES:
        return KEY_NAMES[event.key]
    if event.is_printable and event.character:
        return event.character
    return None


class RemTui(TextualApp):
    """Task board UI."""

    TITLE = "rem"

    CSS = """
    #body {
        height: 1fr;
    }

    #lists {
        width: 30%;
        height: 100%;
    }

    .status-list {
        height: 1fr;
        border: round $secondary;
        border-title-align: left;
    }

    .status-list.collapsed {
        height: 2;
    }

    #preview {
        width: 70%;
        height: 100%;
        border: round $primary;
        border-title-align: left;
        padding: 0 1;
    }

    #draft {
        height: 3;
        border: round $accent;
        border-title-align: left;
        display: none;
    }

    #draft.editing {
        display: block;
    }

    #footer {
        height: auto;
    }
    """

    # Escape and Ctrl+C must reach the board in both modes, so they bypass
    # textual's own handling of those keys.
    BINDINGS = [
        Binding("escape", "board_key('esc')", "Quit / cancel", show=False, priority=True),
        Binding("ctrl+c", "board_key('ctrl+c')", "Quit / cancel", show=False, priority=True),
    ]

    def __init__(self, board: App, editor_command: list[str]) -> None:
        super().__init__()
        self.board = board
        self.bridge = EditorBridge(self, editor_command)

    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            with Vertical(id="lists"):
                for status in TaskStatus:
                    yield Static(id=status.value, classes="status-list")
            yield Static(id="preview")
        yield Static(id="draft")
        yield Static(id="footer")

    def on_mount(self) -> None:
        self.query_one("#preview", Static).border_title = PREVIEW_TITLE
        self.query_one("#draft", Static).border_title = INPUT_TITLE
        self.refresh_board()

    def on_key(self, event: events.Key) -> None:
        key = key_name(event)
        if key is None:
            return
        event.prevent_default()
        event.stop()
        self.feed([key])

    def action_board_key(self, key: str) -> None:
        self.feed([key])

    def feed(self, keys: list[str]) -> None:
        """Dispatch keys to the board, then quit or redraw."""
        try:
            dispatch(self.board, keys, self.bridge)
        except SuspendNotSupported:
            self.board.report_error("This terminal cannot be handed to an editor")

        if self.board.should_quit:
            self.exit()
            return
        self.refresh_board()

    def refresh_board(self) -> None:
        """Redraw every widget from the board state."""
        board = self.board
        selected = board.selected_task()

        for status in TaskStatus:
            widget = self.query_one(f"#{status.value}", Static)
            widget.border_title = list_title(board, status)
            widget.set_class(status not in board.visible_statuses(), "collapsed")
            widget.update(status_text(board, status, selected))

        self.query_one("#preview", Static).update(preview(board))

        draft = self.query_one("#draft", Static)
        draft.set_class(board.input_mode is Mode.EDITING, "editing")
        draft.update(draft_text(board))

        self.query_one("#footer", Static).update(footer_text(board))
