"""Filesystem-backed task store.

Layout::

    <root>/todo/<id>.md
    <root>/doing/<id>.md
    <root>/done/<id>.md

The directory a file sits in is its status. Moving a file between
directories is the only way a task changes status.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from jinja2 import BaseLoader, Environment
from pydantic import ValidationError

from rem.config import DEFAULT_BODY_TEMPLATE
from rem.task import (
    TASK_SUFFIX,
    Task,
    TaskFrontmatter,
    TaskStatus,
    dump_task_file,
    render_task_file,
    split_frontmatter,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for task store failures."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class TaskNotFoundError(StoreError):
    """The task file vanished."""


class StoreIOError(StoreError):
    """Permission or disk-level failure on read, write or rename."""


class TaskParseError(StoreError):
    """The task file header is malformed."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """Reads, writes and moves task files under a root directory."""

    def __init__(self, root: Path, body_template: str = DEFAULT_BODY_TEMPLATE) -> None:
        self.root = Path(root)
        self._template = Environment(
            loader=BaseLoader(), keep_trailing_newline=True
        ).from_string(body_template)

    def status_dir(self, status: TaskStatus) -> Path:
        return self.root / status.value

    def ensure_dirs(self) -> None:
        """Create the status directories.

        Raises:
            StoreIOError: If a directory cannot be created
        """
        for status in TaskStatus:
            directory = self.status_dir(status)
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreIOError(f"Cannot create {directory}: {e}", directory) from e

    def list(self, status: TaskStatus) -> list[Task]:
        """Load every task in a status directory, oldest first.

        Files that cannot be read or parsed are skipped.
        """
        directory = self.status_dir(status)
        if not directory.is_dir():
            return []

        tasks: list[Task] = []
        for path in sorted(directory.glob(f"*{TASK_SUFFIX}")):
            try:
                tasks.append(self.load(path, status))
            except StoreError as e:
                logger.debug("Skipping %s: %s", path, e)

        # Naive timestamps written by hand are read as local time.
        tasks.sort(key=lambda task: (task.created_at.timestamp(), task.name))
        return tasks

    def load(self, path: Path, status: TaskStatus) -> Task:
        """Parse one task file.

        The file is looked up by base name inside the directory of ``status``.

        Raises:
            TaskNotFoundError: If the file does not exist
            StoreIOError: If the file cannot be read
            TaskParseError: If the header is malformed
        """
        file_path = self.status_dir(status) / Path(path).name
        try:
            content = file_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise TaskNotFoundError(f"Task file not found: {file_path}", file_path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Cannot read {file_path}: {e}", file_path) from e

        frontmatter, body = self._parse(content, file_path)

        return Task(
            id=frontmatter.id,
            name=frontmatter.name,
            created_at=frontmatter.created_at,
            updated_at=frontmatter.updated_at,
            file_path=file_path,
            body=body,
        )

    def create(self, name: str) -> Task:
        """Write a new task file into the todo directory.

        Raises:
            StoreIOError: If the file cannot be written
        """
        now = _now()
        task_id = uuid4()
        body = self._template.render(name=name, id=task_id, created_at=now)
        task = Task(
            id=task_id,
            name=name,
            created_at=now,
            updated_at=now,
            file_path=self.status_dir(TaskStatus.TODO) / f"{task_id}{TASK_SUFFIX}",
            body=body,
        )

        try:
            with open(task.file_path, "x", encoding="utf-8") as f:
                f.write(render_task_file(task.frontmatter(), body))
        except OSError as e:
            raise StoreIOError(f"Cannot create {task.file_path}: {e}", task.file_path) from e

        logger.info("Created task %s (%s)", task.id, name)
        return task

    def move_status(self, task: Task, new_status: TaskStatus) -> Task:
        """Move a task's file into another status directory.

        Either the file ends up in the new directory and ``task`` is updated,
        or neither happens.

        Raises:
            TaskNotFoundError: If the task's file has vanished
            StoreIOError: If the rename fails
        """
        source = task.file_path
        destination = self.status_dir(new_status) / source.name

        if not source.exists():
            raise TaskNotFoundError(f"Task file not found: {source}", source)
        if destination.exists():
            raise StoreIOError(f"Destination already exists: {destination}", destination)

        try:
            os.rename(source, destination)
        except OSError as e:
            raise StoreIOError(f"Cannot move {source} to {destination}: {e}", source) from e

        task.file_path = destination
        logger.info("Moved task %s to %s", task.id, new_status.value)

        updated_at = _now()
        try:
            self._touch(destination, updated_at)
        except StoreError as e:
            # The move stands; only the timestamp is stale.
            logger.warning("Could not refresh updated_at for %s: %s", destination, e)
        else:
            task.updated_at = updated_at

        return task

    def _touch(self, path: Path, updated_at: datetime) -> None:
        """Set updated_at in a file's header, keeping every other key and the body."""
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreIOError(f"Cannot read {path}: {e}", path) from e

        # A malformed header is left as it is.
        self._parse(content, path)
        header, body = split_frontmatter(content)
        header["updated_at"] = updated_at.isoformat()

        try:
            path.write_text(dump_task_file(header, body), encoding="utf-8")
        except OSError as e:
            raise StoreIOError(f"Cannot write {path}: {e}", path) from e

    @staticmethod
    def _parse(content: str, path: Path) -> tuple[TaskFrontmatter, str]:
        try:
            header, body = split_frontmatter(content)
            return TaskFrontmatter.model_validate(header), body
        except (ValueError, ValidationError) as e:
            raise TaskParseError(f"Malformed task file {path}: {e}", path) from e
