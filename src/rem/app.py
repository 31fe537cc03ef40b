"""Application state machine.

The App owns the in-memory task lists, the selection cursor, the input mode
and the visibility flags. It turns key names into store operations and
never touches the terminal or spawns processes: an editor request is left in
``pending_editor_request`` for the outer loop to pick up.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from rem.store import StoreError, TaskStore
from rem.task import Task, TaskStatus

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Input modes."""

    NORMAL = "normal"
    EDITING = "editing"


class Action(Enum):
    """Commands available in normal mode."""

    QUIT = "quit"
    ADD = "add"
    DOWN = "down"
    UP = "up"
    ADVANCE = "advance"
    RETREAT = "retreat"
    TOGGLE_DONE = "toggle_done"
    EDIT = "edit"
    REFRESH = "refresh"


NORMAL_KEYMAP: dict[str, Action] = {
    "q": Action.QUIT,
    "esc": Action.QUIT,
    "ctrl+c": Action.QUIT,
    "a": Action.ADD,
    "j": Action.DOWN,
    "down": Action.DOWN,
    "k": Action.UP,
    "up": Action.UP,
    "n": Action.ADVANCE,
    "N": Action.RETREAT,
    "d": Action.TOGGLE_DONE,
    "e": Action.EDIT,
    "enter": Action.EDIT,
    "r": Action.REFRESH,
}


class App:
    """In-memory state of the task board."""

    def __init__(self, store: TaskStore, show_done: bool = False) -> None:
        self.store = store
        self.tasks_by_status: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
        self.selected_index: int | None = None
        self.input_mode = Mode.NORMAL
        self.input_buffer = ""
        self.show_done = False
        self.done_loaded = False
        self.pending_editor_request: Path | None = None
        self.preview_content = ""
        self.last_error: str | None = None
        self.should_quit = False

        self.tasks_by_status[TaskStatus.TODO] = store.list(TaskStatus.TODO)
        self.tasks_by_status[TaskStatus.DOING] = store.list(TaskStatus.DOING)
        if show_done:
            self.toggle_done_visibility()
        self._clamp_selection()
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    def visible_statuses(self) -> list[TaskStatus]:
        statuses = [TaskStatus.TODO, TaskStatus.DOING]
        if self.show_done:
            statuses.append(TaskStatus.DONE)
        return statuses

    def visible_tasks(self) -> list[Task]:
        """The flattened list the cursor moves over."""
        return [task for status in self.visible_statuses() for task in self.tasks_by_status[status]]

    def selected_task(self) -> Task | None:
        if self.selected_index is None:
            return None
        visible = self.visible_tasks()
        if 0 <= self.selected_index < len(visible):
            return visible[self.selected_index]
        return None

    # ------------------------------------------------------------------
    # Input dispatch
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Dispatch one decoded key according to the input mode."""
        if self.input_mode is Mode.EDITING:
            self._handle_editing_key(key)
            return

        action = NORMAL_KEYMAP.get(key)
        if action is None:
            return

        self.last_error = None

        if action is Action.QUIT:
            self.should_quit = True
        elif action is Action.ADD:
            self.start_editing()
        elif action is Action.DOWN:
            self.select_next()
        elif action is Action.UP:
            self.select_previous()
        elif action is Action.ADVANCE:
            self.advance_status()
        elif action is Action.RETREAT:
            self.retreat_status()
        elif action is Action.TOGGLE_DONE:
            self.toggle_done_visibility()
        elif action is Action.EDIT:
            self.request_external_edit()
        elif action is Action.REFRESH:
            self.refresh()

    def _handle_editing_key(self, key: str) -> None:
        if key == "enter":
            self.commit_draft()
        elif key in ("esc", "ctrl+c"):
            self.cancel_draft()
        elif key == "backspace":
            self.input_buffer = self.input_buffer[:-1]
        elif len(key) == 1 and key.isprintable():
            self.input_buffer += key

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select_next(self) -> None:
        self._move_cursor(1)

    def select_previous(self) -> None:
        self._move_cursor(-1)

    def _move_cursor(self, step: int) -> None:
        count = len(self.visible_tasks())
        if count == 0:
            self.selected_index = None
        elif self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = max(0, min(self.selected_index + step, count - 1))
        self.refresh_preview()

    def _clamp_selection(self) -> None:
        count = len(self.visible_tasks())
        if count == 0:
            self.selected_index = None
        elif self.selected_index is None:
            self.selected_index = 0
        elif self.selected_index >= count:
            self.selected_index = count - 1

    def _reselect(self, task: Task) -> None:
        """Keep the cursor on ``task`` if visible, else clamp it in place."""
        for index, candidate in enumerate(self.visible_tasks()):
            if candidate is task:
                self.selected_index = index
                return
        self._clamp_selection()

    def _position_of(self, task: Task) -> int | None:
        tasks = self.tasks_by_status[task.status]
        for index, candidate in enumerate(tasks):
            if candidate is task:
                return index
        return None

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def advance_status(self) -> None:
        """Move the selected task one status forward. DONE is terminal."""
        task = self.selected_task()
        if task is None:
            return
        target = task.status.next()
        if target is None:
            return
        self._move(task, target)

    def retreat_status(self) -> None:
        """Move the selected task one status back. TODO is terminal."""
        task = self.selected_task()
        if task is None:
            return
        target = task.status.previous()
        if target is None:
            return
        self._move(task, target)

    def _move(self, task: Task, target: TaskStatus) -> None:
        old_status = task.status
        try:
            self.store.move_status(task, target)
        except StoreError as e:
            self.report_error(f"Could not move '{task.name}': {e}")
            return

        old_list = self.tasks_by_status[old_status]
        for index, candidate in enumerate(old_list):
            if candidate is task:
                del old_list[index]
                break
        self.tasks_by_status[target].append(task)

        self._reselect(task)
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Done visibility
    # ------------------------------------------------------------------

    def toggle_done_visibility(self) -> None:
        """Show or hide DONE tasks, loading them from disk the first time."""
        self.show_done = not self.show_done
        if self.show_done and not self.done_loaded:
            self.tasks_by_status[TaskStatus.DONE] = self.store.list(TaskStatus.DONE)
            self.done_loaded = True
        self._clamp_selection()
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Drafting new tasks
    # ------------------------------------------------------------------

    def start_editing(self) -> None:
        self.input_mode = Mode.EDITING
        self.input_buffer = ""

    def commit_draft(self) -> None:
        """Create a task from the draft and return to normal mode."""
        name = self.input_buffer.strip()
        self.input_buffer = ""
        self.input_mode = Mode.NORMAL

        if not name:
            return

        try:
            task = self.store.create(name)
        except StoreError as e:
            self.report_error(f"Could not create '{name}': {e}")
            return

        selected = self.selected_task()
        self.tasks_by_status[TaskStatus.TODO].append(task)
        # Appending to TODO shifts the rows below it, so follow the selection.
        self._reselect(selected if selected is not None else task)
        self.refresh_preview()

    def cancel_draft(self) -> None:
        self.input_buffer = ""
        self.input_mode = Mode.NORMAL

    # ------------------------------------------------------------------
    # External editor hand-off
    # ------------------------------------------------------------------

    def request_external_edit(self) -> None:
        """Ask the outer loop to open the selected task in an editor."""
        task = self.selected_task()
        if task is not None:
            self.pending_editor_request = task.file_path

    def take_editor_request(self) -> Path | None:
        """Return the pending editor request and clear it."""
        path = self.pending_editor_request
        self.pending_editor_request = None
        return path

    def reload_selected_task(self) -> None:
        """Re-read the selected task from disk, keeping the old copy on failure."""
        task = self.selected_task()
        if task is None:
            return

        position = self._position_of(task)
        if position is None:
            return

        try:
            fresh = self.store.load(task.file_path, task.status)
        except StoreError as e:
            self.report_error(f"Could not reload '{task.name}': {e}")
            return

        self.tasks_by_status[task.status][position] = fresh

    def after_external_edit(self) -> None:
        """Reload the edited task and recompute the preview."""
        self.reload_selected_task()
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Full reload
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Reload every loaded status list from disk."""
        selected = self.selected_task()
        self.tasks_by_status[TaskStatus.TODO] = self.store.list(TaskStatus.TODO)
        self.tasks_by_status[TaskStatus.DOING] = self.store.list(TaskStatus.DOING)
        if self.done_loaded:
            self.tasks_by_status[TaskStatus.DONE] = self.store.list(TaskStatus.DONE)

        if selected is not None:
            for index, candidate in enumerate(self.visible_tasks()):
                if candidate.id == selected.id:
                    self.selected_index = index
                    break
        self._clamp_selection()
        self.refresh_preview()

    # ------------------------------------------------------------------
    # Preview and errors
    # ------------------------------------------------------------------

    def refresh_preview(self) -> None:
        """Recompute the preview from the selected in-memory task."""
        task = self.selected_task()
        if task is None:
            self.preview_content = ""
            return

        meta = (
            f"*{task.status.title}* · created {task.created_at:%Y-%m-%d %H:%M} · "
            f"updated {task.updated_at:%Y-%m-%d %H:%M}"
        )
        body = task.body.strip()
        if body:
            self.preview_content = f"{meta}\n\n{body}\n"
        else:
            self.preview_content = f"{meta}\n\n# {task.name}\n"

    def report_error(self, message: str) -> None:
        """Record an absorbed failure for the renderer to show."""
        logger.warning("%s", message)
        self.last_error = message
