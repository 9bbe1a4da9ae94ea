"""
Task selection.

A selector says which task(s) an operation targets:

    Indexed((1, 4))     tasks 1 and 4 of one node
    All()               every task of one node
    Completed()         every completed task of one node
    Named("api", 3)     task 3 of the first node in the tree whose name
                        starts with "api"

Batch operations walk indices in order and stop at the first one that is
missing. Mutations already applied stay applied; the caller saves once at
the end.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .errors import NodeNotFound
from .models import ProjectNode, Task

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Indexed:
    indices: Tuple[int, ...]


@dataclass(frozen=True)
class All:
    pass


@dataclass(frozen=True)
class Completed:
    pass


@dataclass(frozen=True)
class Named:
    prefix: str
    index: int


Selector = Union[Indexed, All, Completed, Named]


def find_node(root: ProjectNode, prefix: str) -> Optional[ProjectNode]:
    """
    Find the first node whose name starts with prefix.

    The search is depth first: a node is checked before its children, and a
    child's whole subtree is searched before its next sibling.
    """
    if root.name.startswith(prefix):
        return root
    for child in root.children:
        found = find_node(child, prefix)
        if found is not None:
            return found
    return None


def _require_node(root: ProjectNode, prefix: str) -> ProjectNode:
    node = find_node(root, prefix)
    if node is None:
        raise NodeNotFound(prefix)
    return node


def resolve(root: ProjectNode, selector: Selector) -> Tuple[ProjectNode, List[Task]]:
    """
    Resolve a selector to the node it targets and the matching tasks.

    Only Named selectors leave the root; the others apply to root itself.

    Raises:
        TaskNotFound: for the first index that doesn't exist
        NodeNotFound: if a Named prefix matches no node
    """
    if isinstance(selector, Named):
        node = _require_node(root, selector.prefix)
        return node, [node.get_task(selector.index)]

    if isinstance(selector, Indexed):
        return root, [root.get_task(i) for i in selector.indices]

    if isinstance(selector, All):
        return root, list(root.data.tasks)

    if isinstance(selector, Completed):
        return root, [t for t in root.data.tasks if t.completed]

    raise TypeError(f"unknown selector: {selector!r}")


def select(node: ProjectNode, selector: Selector) -> List[Task]:
    """Return the tasks a selector matches, see resolve()."""
    return resolve(node, selector)[1]


def apply_completion(
    node: ProjectNode,
    selector: Selector,
    completed: bool,
    root: Optional[ProjectNode] = None,
) -> List[Task]:
    """
    Mark the selected tasks as completed (or not).

    Named selectors are looked up in the whole tree under root (node itself
    when root is not given); the other kinds apply to node.

    Returns:
        The tasks that were updated

    Raises:
        ValueError: for a Completed selector, which is only meant for removal
        TaskNotFound / NodeNotFound: see resolve()
    """
    if isinstance(selector, Completed):
        raise ValueError("the completed selector can only be used for removal")

    if isinstance(selector, All):
        node.mark_completion_all(completed)
        return list(node.data.tasks)

    if isinstance(selector, Named):
        target = _require_node(node if root is None else root, selector.prefix)
        target.mark_completion(selector.index, completed)
        return [target.get_task(selector.index)]

    updated = []
    for index in selector.indices:
        node.mark_completion(index, completed)
        updated.append(node.get_task(index))
    return updated


def apply_removal(
    node: ProjectNode,
    selector: Selector,
    root: Optional[ProjectNode] = None,
) -> List[Task]:
    """
    Remove the selected tasks.

    Named selectors are looked up under root, as in apply_completion().

    Returns:
        The tasks that were removed

    Raises:
        TaskNotFound / NodeNotFound: see resolve()
    """
    if isinstance(selector, All):
        removed = list(node.data.tasks)
        node.remove_all()
        return removed

    if isinstance(selector, Completed):
        removed = [t for t in node.data.tasks if t.completed]
        node.remove_completed()
        return removed

    if isinstance(selector, Named):
        target = _require_node(node if root is None else root, selector.prefix)
        task = target.get_task(selector.index)
        target.remove(selector.index)
        return [task]

    removed = []
    for index in selector.indices:
        task = node.get_task(index)
        node.remove(index)
        removed.append(task)
    log.debug("Removed %d task(s) from %s", len(removed), node.path)
    return removed
