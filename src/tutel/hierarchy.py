"""
Project discovery.

Resolving a project is a two-way walk:

1. Upward from the starting directory to the nearest .tutel.toml that is
   not marked as a child list. That file is the root.
2. Downward from the root's directory, attaching every child list found
   within DEPTH_LIMIT levels to the nearest child list (or the root) above it.

Directories without a task-list file are transparent. A non-child list found
below the root is an independent project and is never attached.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from . import codec
from .config import DEPTH_LIMIT, PROJECT_FILE_NAME
from .errors import ParseError, ProjectExists, ProjectNotFound, StorageError
from .models import ProjectNode, TaskList

log = logging.getLogger(__name__)


def find_project_file(directory: Path, file_name: str = PROJECT_FILE_NAME) -> Optional[Path]:
    """
    Check whether a task-list file exists in a directory.

    Returns:
        Path to the file, or None if there is no such (regular) file
    """
    candidate = directory / file_name
    if candidate.is_file():
        return candidate
    return None


def _ancestors(start: Path) -> Iterator[Path]:
    yield start
    yield from start.parents


def load_root(
    start_path: Path,
    file_name: str = PROJECT_FILE_NAME,
    max_depth: int = DEPTH_LIMIT,
) -> ProjectNode:
    """
    Resolve the project governing start_path, with its child lists attached.

    Args:
        start_path: Directory the query starts from
        file_name: Task-list file name to look for
        max_depth: How many levels below the root to search for child lists

    Returns:
        The root ProjectNode. Its steps value is minus the number of
        directories walked up to reach it. It is 0 only when start_path
        holds the root list itself, so steps are relative to the start, not
        to the root.

    Raises:
        ProjectNotFound: if no ancestor holds a non-child list
        StorageError: if an existing ancestor file can't be read
    """
    start = Path(start_path).resolve()

    for distance, directory in enumerate(_ancestors(start)):
        project_file = find_project_file(directory, file_name)
        if project_file is None:
            continue

        try:
            data = codec.load(project_file)
        except ParseError as exc:
            log.warning("Skipping unreadable project file: %s", exc)
            continue

        if data.is_child:
            log.debug("Skipping child list %s while looking for a root", project_file)
            continue

        root = ProjectNode(path=project_file, steps=-distance, data=data)
        log.debug("Resolved root %s (steps=%d)", project_file, root.steps)
        discover_children(root, file_name=file_name, max_depth=max_depth)
        return root

    raise ProjectNotFound(start)


def discover_children(
    node: ProjectNode,
    file_name: str = PROJECT_FILE_NAME,
    max_depth: int = DEPTH_LIMIT,
) -> None:
    """Attach every child list found below node's directory to the tree."""
    _descend(node.directory, node, 1, file_name, max_depth)


def _subdirectories(directory: Path) -> List[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        log.debug("Cannot list %s: %s", directory, exc)
        return []
    # Symlinks are skipped so that no list can be attached twice
    return [p for p in entries if p.is_dir() and not p.is_symlink()]


def _try_load(directory: Path, file_name: str) -> Optional[TaskList]:
    project_file = find_project_file(directory, file_name)
    if project_file is None:
        return None
    try:
        return codec.load(project_file)
    except (ParseError, StorageError) as exc:
        log.debug("Ignoring %s: %s", project_file, exc)
        return None


def _descend(directory: Path, parent: ProjectNode, depth: int, file_name: str, max_depth: int) -> None:
    if depth > max_depth:
        return

    for sub in _subdirectories(directory):
        data = _try_load(sub, file_name)

        if data is not None and data.is_child:
            child = ProjectNode(path=sub / file_name, steps=parent.steps + 1, data=data)
            _descend(sub, child, depth + 1, file_name, max_depth)
            parent.attach(child)
            continue

        if data is not None:
            log.debug("Not attaching independent project %s", sub / file_name)

        _descend(sub, parent, depth + 1, file_name, max_depth)


def new_project(
    directory: Path,
    name: Optional[str] = None,
    is_child: bool = False,
    force: bool = False,
    file_name: str = PROJECT_FILE_NAME,
) -> ProjectNode:
    """
    Create and save an empty project in directory.

    Args:
        directory: Where to create the task-list file
        name: Project name (default: the directory's name)
        is_child: Mark the list as a child of an enclosing project
        force: Overwrite an existing task-list file

    Raises:
        ProjectExists: if a task-list file already exists and force is False
    """
    directory = Path(directory).resolve()
    path = directory / file_name
    if path.exists() and not force:
        raise ProjectExists(path)

    node = ProjectNode(
        path=path,
        steps=0,
        data=TaskList(name=name or directory.name, is_child=is_child),
    )
    node.save()
    log.info("Created project %r at %s", node.name, path)
    return node


def remove_project(node: ProjectNode) -> None:
    """Delete the node's task-list file. Child lists keep their own files."""
    try:
        node.path.unlink()
    except OSError as exc:
        raise StorageError("unable to remove project file", node.path) from exc
    log.info("Removed project file %s", node.path)
