"""
tutel - task lists that live next to your code.

Main API:
    from tutel import load_root, Named, apply_completion

    # Resolve the project governing a directory
    root = load_root(Path("src/api"))

    # Modify tasks
    root.add("Write docs")
    apply_completion(root, Named("api", 3), True)

    # Write back (children included)
    root.save()
"""

from .codec import dumps, load, loads, save
from .errors import (
    InvariantViolation,
    NavError,
    NodeNotFound,
    ParseError,
    ProjectExists,
    ProjectNotFound,
    SelectorMiss,
    StorageError,
    TaskNotFound,
    TutelError,
)
from .hierarchy import (
    discover_children,
    find_project_file,
    load_root,
    new_project,
    remove_project,
)
from .models import (
    MAX_INDEX,
    ProjectNode,
    Task,
    TaskList,
    format_node,
    format_task,
)
from .selector import (
    All,
    Completed,
    Indexed,
    Named,
    Selector,
    apply_completion,
    apply_removal,
    find_node,
    resolve,
    select,
)

__version__ = "0.4.0"

__all__ = [
    # Models
    'Task',
    'TaskList',
    'ProjectNode',
    'MAX_INDEX',
    # Discovery
    'load_root',
    'discover_children',
    'find_project_file',
    'new_project',
    'remove_project',
    # Selection
    'Selector',
    'Indexed',
    'All',
    'Completed',
    'Named',
    'find_node',
    'resolve',
    'select',
    'apply_completion',
    'apply_removal',
    # Persistence
    'load',
    'loads',
    'dumps',
    'save',
    # Formatting
    'format_task',
    'format_node',
    # Errors
    'TutelError',
    'ProjectNotFound',
    'ProjectExists',
    'ParseError',
    'StorageError',
    'SelectorMiss',
    'TaskNotFound',
    'NodeNotFound',
    'NavError',
    'InvariantViolation',
]
