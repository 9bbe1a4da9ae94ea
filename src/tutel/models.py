"""
Core data models for task lists and project trees.

A TaskList is what lives in a single .tutel.toml file. A ProjectNode binds a
TaskList to the file it came from and to its position in the resolved
project tree.

codec imports this module for its types, so ProjectNode.save() imports codec
at call time.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List

from .errors import InvariantViolation, TaskNotFound

log = logging.getLogger(__name__)

# Indices are rendered with three digits and wrap back to 0 after this.
MAX_INDEX = 999


@dataclass
class Task:
    """A completable task within a task list."""

    desc: str
    index: int
    completed: bool = False

    def __str__(self) -> str:
        return format_task(self)


@dataclass
class TaskList:
    """The part of a project that is saved to and loaded from disk."""

    name: str
    tasks: List[Task] = field(default_factory=list)
    is_child: bool = False

    @property
    def is_complete(self) -> bool:
        """True if every task is completed (vacuously true when empty)."""
        return all(t.completed for t in self.tasks)

    def next_index(self) -> int:
        """
        Calculate the next index to hand out.

        Returns the highest index in use plus one, wrapping around to 0 once
        the highest index reaches MAX_INDEX.
        """
        if not self.tasks:
            return 0

        highest = max(t.index for t in self.tasks)
        if highest >= MAX_INDEX:
            return 0
        return highest + 1

    def get_task(self, index: int) -> Task:
        """
        Look up a task by index.

        Raises:
            TaskNotFound: if no task carries the index
        """
        for t in self.tasks:
            if t.index == index:
                return t
        raise TaskNotFound(index)

    def add(self, desc: str, completed: bool = False) -> Task:
        task = Task(desc=desc, index=self.next_index(), completed=completed)
        self.tasks.append(task)
        return task

    def remove(self, index: int) -> None:
        self.tasks = [t for t in self.tasks if t.index != index]

    def remove_all(self) -> None:
        self.tasks.clear()

    def remove_completed(self) -> None:
        self.tasks = [t for t in self.tasks if not t.completed]

    def mark_completion(self, index: int, completed: bool) -> None:
        self.get_task(index).completed = completed

    def mark_completion_all(self, completed: bool) -> None:
        for t in self.tasks:
            t.completed = completed

    def edit(self, index: int, desc: str) -> None:
        self.get_task(index).desc = desc


@dataclass
class ProjectNode:
    """
    A TaskList bound to its backing file and its place in the tree.

    steps places the node relative to the list the query started from. The
    root gets minus the number of directories walked up to reach it; every
    attached child gets its parent's steps plus one, counting node hops
    rather than directories.
    """

    path: Path
    steps: int
    data: TaskList
    children: List['ProjectNode'] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def directory(self) -> Path:
        return self.path.parent

    def attach(self, child: 'ProjectNode') -> None:
        """
        Attach a resolved child node.

        Raises:
            InvariantViolation: if the child's list is not marked as a child
        """
        if not child.data.is_child:
            raise InvariantViolation(
                f"cannot attach {child.path} under {self.path}: it is not a child list"
            )
        child.steps = self.steps + 1
        self.children.append(child)
        log.debug("Attached %s under %s", child.path, self.path)

    def walk(self) -> Iterator['ProjectNode']:
        """Yield this node and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def save(self) -> None:
        """Write this node and every descendant back to their files."""
        from .codec import save

        save(self.path, self.data)
        for child in self.children:
            child.save()

    # Mutations delegate to the underlying list

    def next_index(self) -> int:
        return self.data.next_index()

    def get_task(self, index: int) -> Task:
        return self.data.get_task(index)

    def add(self, desc: str, completed: bool = False) -> Task:
        return self.data.add(desc, completed)

    def remove(self, index: int) -> None:
        self.data.remove(index)

    def remove_all(self) -> None:
        self.data.remove_all()

    def remove_completed(self) -> None:
        self.data.remove_completed()

    def mark_completion(self, index: int, completed: bool) -> None:
        self.data.mark_completion(index, completed)

    def mark_completion_all(self, completed: bool) -> None:
        self.data.mark_completion_all(completed)

    def edit(self, index: int, desc: str) -> None:
        self.data.edit(index, desc)

    def __str__(self) -> str:
        return format_node(self)


# Formatting functions

def format_marker(completed: bool) -> str:
    return "[✓]" if completed else "[X]"


def format_task(task: Task) -> str:
    """Format a task as a single line, e.g. "003) [X] Write docs"."""
    return f"{task.index:03}) {format_marker(task.completed)}{task.desc}"


def format_headline(data: TaskList) -> str:
    if not data.tasks:
        marker = "[empty]"
    else:
        marker = format_marker(data.is_complete)
    return f"{marker}{data.name}"


def format_node(node: ProjectNode, indent_level: int = 0) -> str:
    """
    Format a project node and its children as plain text.

    Args:
        node: Node to format
        indent_level: Nesting depth (each level indents by 4 spaces)

    Returns:
        Multi-line string with the headline, tasks and children
    """
    indent = "    " * indent_level
    lines = [f"{indent}{format_headline(node.data)}"]
    for task in node.data.tasks:
        lines.append(f"{indent}{format_task(task)}")
    for child in node.children:
        lines.append(format_node(child, indent_level + 1))
    return "\n".join(lines)
