"""rem - a terminal task board backed by markdown files."""

__version__ = "0.1.0"
