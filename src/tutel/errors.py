"""
Error types raised by tutel.

Everything a user can trigger derives from TutelError so the CLI can catch a
single type, print it and exit. InvariantViolation is outside that
hierarchy: it signals a bug, not a user mistake.
"""

from pathlib import Path
from typing import Optional


class TutelError(Exception):
    """Base class for user-facing failures."""


class ProjectNotFound(TutelError):
    def __init__(self, start: Optional[Path] = None):
        self.start = start
        super().__init__("no project found")


class ProjectExists(TutelError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"a project already exists at {path} (use --force to overwrite)")


class ParseError(TutelError):
    """A task-list document is malformed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"invalid project file {path}: {message}"
        super().__init__(message)


class StorageError(TutelError):
    """Reading or writing a task-list file failed."""

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(f"{message}: {path}")


class SelectorMiss(TutelError):
    """A selection query matched nothing."""


class TaskNotFound(SelectorMiss):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"no task with index {index}")


class NodeNotFound(SelectorMiss):
    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"no project matching '{prefix}'")


class NavError(TutelError):
    """The project navigation registry could not satisfy a request."""


class InvariantViolation(RuntimeError):
    """Raised when the project tree is about to be put in an invalid state."""
