"""Task model and the markdown file format.

A task file is a YAML header between two ``---`` lines followed by a free
markdown body. The header carries ``id``, ``name``, ``created_at`` and
``updated_at``; the status is never written, it is the directory the file
lives in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from uuid import UUID

import yaml
from pydantic import BaseModel

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)

TASK_SUFFIX = ".md"


class TaskStatus(Enum):
    """Task status; the value is the name of the status directory."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"

    @property
    def title(self) -> str:
        return self.value.upper()

    def next(self) -> TaskStatus | None:
        """Return the following status, or None for DONE."""
        order = list(TaskStatus)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None

    def previous(self) -> TaskStatus | None:
        """Return the preceding status, or None for TODO."""
        order = list(TaskStatus)
        index = order.index(self)
        return order[index - 1] if index > 0 else None

    @classmethod
    def from_dir_name(cls, name: str) -> TaskStatus:
        return cls(name)


class TaskFrontmatter(BaseModel):
    """Metadata header of a task file."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Task:
    """A task backed by one markdown file."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime
    file_path: Path
    body: str = ""

    @property
    def status(self) -> TaskStatus:
        """Status derived from the directory holding the file."""
        return TaskStatus.from_dir_name(self.file_path.parent.name)

    @property
    def file_name(self) -> str:
        return f"{self.id}{TASK_SUFFIX}"

    def frontmatter(self) -> TaskFrontmatter:
        return TaskFrontmatter(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


def split_frontmatter(content: str) -> tuple[dict, str]:
    """Split file content into the parsed YAML header and the body.

    Raises:
        ValueError: If the header is missing, not valid YAML, or not a mapping
    """
    match = FRONTMATTER_RE.match(content)
    if not match:
        raise ValueError("Task file must start with a --- delimited header")

    try:
        header = yaml.safe_load(match.group("header"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML header: {e}") from e

    if not isinstance(header, dict):
        raise ValueError("Task header must be a mapping")

    return header, match.group("body")


def render_task_file(frontmatter: TaskFrontmatter, body: str = "") -> str:
    """Render a header and body into task file content."""
    data = {
        "id": str(frontmatter.id),
        "name": frontmatter.name,
        "created_at": frontmatter.created_at.isoformat(),
        "updated_at": frontmatter.updated_at.isoformat(),
    }
    return dump_task_file(data, body)


def dump_task_file(header: dict, body: str = "") -> str:
    """Write an already parsed header back out, keys in their original order."""
    text = yaml.safe_dump(header, sort_keys=False, allow_unicode=True)
    return f"---\n{text}---\n{body}"
