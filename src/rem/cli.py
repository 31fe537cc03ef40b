"""CLI interface for rem."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console

from rem import __version__
from rem.config import CONFIG_FILENAME, REM_DIR, RemConfig
from rem.logging_setup import setup_logging
from rem.store import StoreError

console = Console()


def _is_interactive() -> bool:
    return sys.stdin.isatty()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", prog_name="rem")
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="REM_HOME",
    help="Directory holding tasks/ and config.json (default ~/.rem-cli)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.json",
)
@click.option("--editor", help="Editor command used to open tasks")
@click.option("--show-done", is_flag=True, help="Show done tasks on startup")
def main(
    base_dir: Path | None,
    config_path: Path | None,
    editor: str | None,
    show_done: bool,
) -> None:
    """rem - a task board of markdown files.

    \b
    Tasks live in <base-dir>/tasks/{todo,doing,done}/<id>.md.

    \b
    Keys:
      a          add a task
      j/k        move the selection
      n / N      move a task forward / back
      d          show or hide done tasks
      e, Enter   open the task in your editor
      r          reload from disk
      q          quit
    """
    from rem.runner import build_store, run_app

    if config_path is None:
        config_path = (base_dir.expanduser() if base_dir else REM_DIR) / CONFIG_FILENAME

    config = RemConfig.load(config_path)
    if base_dir is not None:
        config.base_dir = str(base_dir)
    if editor:
        config.editor.command = editor
    if show_done:
        config.ui.show_done = True

    if not _is_interactive():
        console.print("[red]rem needs an interactive terminal.[/red]")
        sys.exit(1)

    try:
        setup_logging(config.log_path, config.logging.level)
        store = build_store(config)
    except (StoreError, OSError) as e:
        console.print(f"[red]Could not initialise task directories:[/red] {e}")
        sys.exit(1)

    run_app(config, store=store)
