"""Renderables for each region of the board.

Left 30%: TODO, DOING and DONE lists (DONE collapsed while hidden).
Right 70%: preview of the selected task.
Bottom: the draft input while adding a task, otherwise the key help.
"""

from __future__ import annotations

from rich.markdown import Markdown
from rich.text import Text

from rem.app import App
from rem.task import Task, TaskStatus

HELP_TEXT = " a: add | j/k: select | n/N: forward/back | d: toggle done | e: edit | r: reload | q: quit "
INPUT_TITLE = " New Task (Enter: confirm, Esc: cancel) "
PREVIEW_TITLE = " Preview "
HIDDEN_DONE_TITLE = " DONE (d to load) "
SELECTED_STYLE = "reverse"


def list_title(app: App, status: TaskStatus) -> str:
    if status is TaskStatus.DONE and not app.show_done:
        return HIDDEN_DONE_TITLE
    return f" {status.title} "


def status_text(app: App, status: TaskStatus, selected: Task | None = None) -> Text:
    """Task names of one status, one per line, the selected row highlighted.

    A hidden status renders empty.
    """
    lines = Text()
    if status not in app.visible_statuses():
        return lines

    for index, task in enumerate(app.tasks_by_status[status]):
        if index:
            lines.append("\n")
        style = SELECTED_STYLE if task is selected else ""
        lines.append(task.name, style=style)

    return lines


def preview(app: App) -> Markdown:
    return Markdown(app.preview_content)


def draft_text(app: App) -> Text:
    return Text(app.input_buffer)


def footer_text(app: App) -> Text:
    """Key help, followed by the last error in red when there is one."""
    footer = Text(HELP_TEXT, style="dim")
    if app.last_error:
        footer.append("\n")
        footer.append(f" {app.last_error}", style="red")
    return footer
