"""Tests for rem.render module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from rich.markdown import Markdown

from rem.app import App
from rem.render import (
    HIDDEN_DONE_TITLE,
    SELECTED_STYLE,
    draft_text,
    footer_text,
    list_title,
    preview,
    status_text,
)
from rem.store import TaskStore
from rem.task import TaskStatus

WriteTask = Callable[..., Path]


class TestListTitle:
    """Tests for list_title function."""

    def test_status_titles(self, store: TaskStore) -> None:
        """Test lists are titled with their status."""
        app = App(store)

        assert list_title(app, TaskStatus.TODO) == " TODO "
        assert list_title(app, TaskStatus.DOING) == " DOING "

    def test_hidden_done(self, store: TaskStore) -> None:
        """Test hidden done tasks get the load hint."""
        app = App(store)

        assert list_title(app, TaskStatus.DONE) == HIDDEN_DONE_TITLE

        app.toggle_done_visibility()
        assert list_title(app, TaskStatus.DONE) == " DONE "


class TestStatusText:
    """Tests for status_text function."""

    def test_one_line_per_task(self, store: TaskStore, write_task: WriteTask) -> None:
        """Test names are listed in order."""
        write_task(TaskStatus.TODO, "Write report")
        write_task(TaskStatus.TODO, "Buy milk")
        app = App(store)

        text = status_text(app, TaskStatus.TODO)

        assert text.plain == "Buy milk\nWrite report"

    def test_marks_selected(self, store: TaskStore, report_and_review: tuple) -> None:
        """Test only the selected task carries the highlight style."""
        app = App(store)

        text = status_text(app, TaskStatus.TODO, app.selected_task())

        assert len(text.spans) == 1
        assert text.spans[0].style == SELECTED_STYLE

    def test_hidden_done_is_empty(self, store: TaskStore, write_task: WriteTask) -> None:
        """Test done tasks are not drawn while hidden, even once loaded."""
        write_task(TaskStatus.DONE, "Finished")
        app = App(store, show_done=True)
        app.toggle_done_visibility()

        assert status_text(app, TaskStatus.DONE).plain == ""


class TestPreview:
    """Tests for preview function."""

    def test_markdown_of_selected(self, store: TaskStore, report_and_review: tuple) -> None:
        """Test the preview renders the selected task's markdown."""
        app = App(store)

        rendered = preview(app)

        assert isinstance(rendered, Markdown)
        assert "Quarterly numbers" in rendered.markup


class TestFooter:
    """Tests for the draft and footer text."""

    def test_help_line(self, store: TaskStore) -> None:
        """Test the key help is shown."""
        plain = footer_text(App(store)).plain

        assert "a: add" in plain
        assert "q: quit" in plain

    def test_error_line(self, store: TaskStore) -> None:
        """Test the last error follows the help in red."""
        app = App(store)
        app.report_error("Could not move 'x'")

        text = footer_text(app)

        assert text.plain.endswith("\n Could not move 'x'")
        assert text.spans[-1].style == "red"

    def test_draft(self, store: TaskStore) -> None:
        """Test the draft shows the input buffer."""
        app = App(store)
        app.start_editing()
        app.input_buffer = "Buy milk"

        assert draft_text(app).plain == "Buy milk"
