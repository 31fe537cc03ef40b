"""Shared fixtures for rem tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import pytest

from rem.store import TaskStore
from rem.task import TaskFrontmatter, TaskStatus, render_task_file

WriteTask = Callable[..., Path]


@pytest.fixture
def tasks_root(tmp_path: Path) -> Path:
    """Root of the task directory tree."""
    return tmp_path / "tasks"


@pytest.fixture
def store(tasks_root: Path) -> TaskStore:
    """A task store with its status directories created."""
    task_store = TaskStore(tasks_root)
    task_store.ensure_dirs()
    return task_store


@pytest.fixture
def write_task(store: TaskStore) -> WriteTask:
    """Write a well-formed task file directly to disk and return its path."""

    def _write(
        status: TaskStatus,
        name: str,
        task_id: UUID | None = None,
        body: str = "",
        created_at: datetime | None = None,
    ) -> Path:
        task_id = task_id or uuid4()
        created_at = created_at or datetime(2025, 1, 10, 10, 0, tzinfo=timezone.utc)
        frontmatter = TaskFrontmatter(
            id=task_id,
            name=name,
            created_at=created_at,
            updated_at=created_at,
        )
        path = store.status_dir(status) / f"{task_id}.md"
        path.write_text(render_task_file(frontmatter, body), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def report_and_review(write_task: WriteTask) -> tuple[Path, Path]:
    """todo/<a1>.md "Write report" and doing/<b2>.md "Review PR"."""
    a1 = write_task(TaskStatus.TODO, "Write report", body="Quarterly numbers\n")
    b2 = write_task(TaskStatus.DOING, "Review PR")
    return a1, b2


@pytest.fixture
def mock_subprocess_run(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Mock subprocess.run for testing the editor."""
    mock = MagicMock()
    monkeypatch.setattr("subprocess.run", mock)
    return mock
