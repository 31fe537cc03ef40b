"""Editor bridge: hands the terminal to an external editor and back."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from rem.config import RemConfig

if TYPE_CHECKING:
    from rem.app import App

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


class TerminalControl(Protocol):
    """What the bridge needs from the UI: hand the terminal out and back."""

    def suspend(self) -> AbstractContextManager[Any]: ...


@dataclass
class EditResult:
    """Result of one editor run."""

    success: bool
    path: Path
    returncode: int | None = None
    error: str | None = None


def resolve_editor_command(config: RemConfig) -> list[str]:
    """Work out the editor argv prefix.

    Order: configured command, then $VISUAL, then $EDITOR, then vi.
    """
    if config.editor.command:
        return shlex.split(config.editor.command) + list(config.editor.args)

    for var in ("VISUAL", "EDITOR"):
        value = os.environ.get(var, "").strip()
        if value:
            return shlex.split(value) + list(config.editor.args)

    return [DEFAULT_EDITOR] + list(config.editor.args)


class EditorBridge:
    """Suspends the UI, runs the editor on a task file, then resumes.

    Leaving the suspend context restores the terminal, and the post-edit
    reload always runs, whatever the editor does.
    """

    def __init__(self, terminal: TerminalControl, command: list[str]) -> None:
        self.terminal = terminal
        self.command = command

    def run_pending(self, app: App) -> EditResult | None:
        """Consume the app's editor request, if any, and run the editor."""
        path = app.take_editor_request()
        if path is None:
            return None

        result = EditResult(success=False, path=path)
        try:
            with self.terminal.suspend():
                result = self._launch(path)
        finally:
            app.after_external_edit()

        if not result.success:
            app.report_error(result.error or f"Editor failed on {path.name}")

        return result

    def _launch(self, path: Path) -> EditResult:
        cmd = self.command + [str(path)]
        logger.info("Running editor: %s", " ".join(cmd))

        try:
            process = subprocess.run(cmd)
        except FileNotFoundError:
            return EditResult(
                success=False,
                path=path,
                error=f"Editor not found: {self.command[0] if self.command else ''}",
            )
        except OSError as e:
            return EditResult(success=False, path=path, error=f"Could not start editor: {e}")

        if process.returncode != 0:
            return EditResult(
                success=False,
                path=path,
                returncode=process.returncode,
                error=f"Editor exited with code {process.returncode}",
            )

        return EditResult(success=True, path=path, returncode=0)
