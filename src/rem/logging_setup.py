"""Logging configuration for rem.

The terminal belongs to the UI while rem runs, so records only go to a log
file under the base directory.
"""

from __future__ import annotations

import logging
from pathlib import Path


def setup_logging(log_file: str | Path, level: int | str = logging.INFO) -> None:
    """Configure the root logger with a single file handler.

    Call this once, before the terminal session starts.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into the log file as 'py.warnings'
    logging.captureWarnings(True)
