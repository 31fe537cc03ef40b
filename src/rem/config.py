"""Configuration models for rem."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_BODY_TEMPLATE = "# {{ name }}\n"


class EditorConfig(BaseModel):
    """Configuration for the external editor."""

    command: str | None = None
    args: list[str] = Field(default_factory=list)


class UiConfig(BaseModel):
    """Configuration for the terminal UI."""

    show_done: bool = False


class TemplateConfig(BaseModel):
    """Configuration for newly created task files."""

    body: str = DEFAULT_BODY_TEMPLATE


class LoggingConfig(BaseModel):
    """Configuration for the log file."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str = "rem.log"


class RemConfig(BaseModel):
    """Main configuration for rem."""

    base_dir: str = "~/.rem-cli"
    editor: EditorConfig = Field(default_factory=EditorConfig)
    ui: UiConfig = Field(default_factory=UiConfig)
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def base_path(self) -> Path:
        return Path(self.base_dir).expanduser()

    @property
    def tasks_dir(self) -> Path:
        return self.base_path / TASKS_DIRNAME

    @property
    def log_path(self) -> Path:
        return self.base_path / self.logging.file

    @classmethod
    def load(cls, path: Path | None = None) -> RemConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)


# Default locations
REM_DIR = Path("~/.rem-cli").expanduser()
CONFIG_FILENAME = "config.json"
CONFIG_FILE = REM_DIR / CONFIG_FILENAME
TASKS_DIRNAME = "tasks"
