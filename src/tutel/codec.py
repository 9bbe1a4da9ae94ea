"""
Reading and writing .tutel.toml files.

Main API:
- loads(text, path=None) -> TaskList
- dumps(task_list) -> str
- load(path) -> TaskList
- save(path, task_list) -> None

File layout:

    name = "my project"
    is_child = true          # only written when true

    [[tasks]]
    desc = "Write docs"
    completed = false
    index = 0

Older files used `name` instead of `desc` for the task description. Both are
accepted on read; only `desc` is written.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from .errors import ParseError, StorageError
from .models import MAX_INDEX, Task, TaskList

log = logging.getLogger(__name__)


class TaskRecord(BaseModel):
    """On-disk shape of a single task."""

    model_config = ConfigDict(extra="forbid")

    desc: StrictStr
    completed: StrictBool
    index: StrictInt = Field(ge=0, le=MAX_INDEX)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_name(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "name" not in data:
            return data
        if "desc" in data:
            raise ValueError("duplicate field `desc/name`")
        data = dict(data)
        data["desc"] = data.pop("name")
        return data


class TaskListRecord(BaseModel):
    """On-disk shape of a whole task-list file."""

    model_config = ConfigDict(extra="forbid")

    name: StrictStr
    tasks: List[TaskRecord]
    is_child: StrictBool = False


def _describe(error: dict) -> str:
    """Turn one pydantic error into a short, serde-like message."""
    loc = ".".join(str(part) for part in error.get("loc", ()))
    kind = error.get("type")
    if kind == "missing":
        if error["loc"] and error["loc"][-1] == "desc":
            return f"missing field `desc` or `name` at {loc}"
        return f"missing field `{loc}`"
    if kind == "extra_forbidden":
        return f"unknown field `{loc}`"
    if kind == "value_error":
        # pydantic prefixes messages raised in validators with "Value error, "
        msg = error.get("msg", "")
        return msg.split(", ", 1)[-1]
    if loc:
        return f"{loc}: {error.get('msg')}"
    return str(error.get("msg"))


def _record_to_list(record: TaskListRecord) -> TaskList:
    return TaskList(
        name=record.name,
        tasks=[Task(desc=t.desc, index=t.index, completed=t.completed) for t in record.tasks],
        is_child=record.is_child,
    )


def loads(text: str, path: Optional[Path] = None) -> TaskList:
    """
    Parse the contents of a task-list file.

    Args:
        text: TOML document
        path: Where the text came from (only used in error messages)

    Returns:
        The decoded TaskList

    Raises:
        ParseError: on invalid TOML or a missing/duplicate/unknown field
    """
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        # tomllib reports a repeated key as an overwrite
        if str(exc).startswith("Cannot overwrite a value"):
            raise ParseError(f"duplicate field ({exc})", path) from exc
        raise ParseError(f"invalid syntax ({exc})", path) from exc

    try:
        record = TaskListRecord.model_validate(raw)
    except ValidationError as exc:
        message = "; ".join(_describe(e) for e in exc.errors())
        raise ParseError(message, path) from exc

    return _record_to_list(record)


def _quote(value: str) -> str:
    # JSON string escapes are a subset of TOML basic string escapes, apart
    # from DEL which TOML requires to be escaped.
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


def dumps(task_list: TaskList) -> str:
    """Serialize a TaskList into a TOML document."""
    lines = [f"name = {_quote(task_list.name)}"]
    if task_list.is_child:
        lines.append("is_child = true")

    if not task_list.tasks:
        lines.append("tasks = []")

    for task in task_list.tasks:
        lines.append("")
        lines.append("[[tasks]]")
        lines.append(f"desc = {_quote(task.desc)}")
        lines.append(f"completed = {'true' if task.completed else 'false'}")
        lines.append(f"index = {task.index}")

    return "\n".join(lines) + "\n"


def load(path: Path) -> TaskList:
    """
    Read and parse a task-list file.

    Raises:
        StorageError: if the file can't be read
        ParseError: if its contents are invalid
    """
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageError("unable to read project file", path) from exc
    return loads(text, path)


def save(path: Path, task_list: TaskList) -> None:
    """
    Overwrite path with the serialized task list.

    Raises:
        StorageError: if the file can't be written
    """
    try:
        path.write_text(dumps(task_list), encoding='utf-8')
    except OSError as exc:
        raise StorageError("unable to write project file", path) from exc
    log.debug("Saved %d task(s) to %s", len(task_list.tasks), path)
