"""Bootstrap and key dispatch for rem.

Keys arrive from the textual UI and are fed into the App one at a time;
whenever the App asks for an external edit the editor bridge runs before
the next key is handled.
"""

from __future__ import annotations

import logging

from rem.app import App
from rem.config import RemConfig
from rem.editor import EditorBridge, resolve_editor_command
from rem.store import TaskStore

logger = logging.getLogger(__name__)


def build_store(config: RemConfig) -> TaskStore:
    """Create the task store and its directories.

    Raises:
        StoreError: If the task directories cannot be created
    """
    store = TaskStore(config.tasks_dir, body_template=config.template.body)
    store.ensure_dirs()
    return store


def dispatch(app: App, keys: list[str], bridge: EditorBridge) -> None:
    """Feed keys to the app, running the editor as soon as one is requested."""
    for key in keys:
        app.handle_key(key)
        if app.pending_editor_request is not None:
            bridge.run_pending(app)
        if app.should_quit:
            return


def run_app(config: RemConfig, store: TaskStore | None = None) -> None:
    """Run the terminal UI until the user quits.

    Raises:
        StoreError: If no store is given and the task directories cannot be created
    """
    from rem.tui import RemTui

    if store is None:
        store = build_store(config)
    app = App(store, show_done=config.ui.show_done)

    logger.info("Starting rem with tasks in %s", store.root)
    RemTui(app, resolve_editor_command(config)).run()
    logger.info("Exiting rem")
