"""
Project navigation registry.

Remembers where named projects live so `tutel nav NAME` can print their
directory (meant to be wrapped by a shell function that cd's there).

The registry is a plain text file with one "name path" entry per line.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .config import PROJECT_FILE_NAME
from .errors import NavError

log = logging.getLogger(__name__)


def _read_lines(nav_file: Path) -> List[str]:
    try:
        return nav_file.read_text(encoding='utf-8').splitlines()
    except OSError as exc:
        raise NavError(f"unable to read nav file {nav_file}: {exc}") from exc


def _write_lines(nav_file: Path, lines: List[str]) -> None:
    try:
        nav_file.parent.mkdir(parents=True, exist_ok=True)
        nav_file.write_text("".join(f"{line}\n" for line in lines), encoding='utf-8')
    except OSError as exc:
        raise NavError(f"unable to write nav file {nav_file}: {exc}") from exc


def find_entry(name: str, lines: List[str]) -> Optional[Tuple[int, str]]:
    """
    Find the entry for a project name.

    Returns:
        (line number, line) or None if there is no entry
    """
    prefix = f"{name} "
    for i, line in enumerate(lines):
        if line.startswith(prefix):
            return i, line
    return None


def query(name: str, nav_file: Path, file_name: str = PROJECT_FILE_NAME) -> Path:
    """
    Look up the directory of a registered project.

    Entries whose project file has disappeared are dropped from the registry.

    Raises:
        NavError: if the registry is empty or has no live entry for name
    """
    if not nav_file.exists():
        raise NavError("no projects added yet")

    lines = _read_lines(nav_file)
    entry = find_entry(name, lines)
    if entry is None:
        raise NavError(f"no project found with name {name}")

    line_number, line = entry
    parts = line.split(" ", 1)
    if len(parts) < 2 or not parts[1].strip():
        raise NavError(f"nav entry is not properly formatted (line {line_number})")

    path = Path(parts[1])
    if not (path / file_name).is_file():
        log.info("Dropping stale nav entry for %s (%s)", name, path)
        del lines[line_number]
        _write_lines(nav_file, lines)
        raise NavError(f"no project found with name {name}")

    return path


def add(name: str, path: Path, nav_file: Path) -> None:
    """
    Register a project directory under name.

    Raises:
        NavError: if the name is taken or can't be stored
    """
    if not name or any(c.isspace() for c in name):
        raise NavError(f"project name {name!r} can't be registered (it contains whitespace)")

    lines = _read_lines(nav_file) if nav_file.exists() else []
    if find_entry(name, lines) is not None:
        raise NavError(f"project with name {name} already exists")

    lines.append(f"{name} {path}")
    _write_lines(nav_file, lines)
    log.debug("Registered %s -> %s", name, path)
