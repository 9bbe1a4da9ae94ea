"""
tutel - a minimalistic todo app for terminal enthusiasts

Usage:
    tutel [show]
    tutel new [name] [--force] [--child]
    tutel add <description...> [--completed] [--project PREFIX]
    tutel done <index...> | --all [--not] [--project PREFIX]
    tutel rm <index...> | --all | --cleanup | --delete-project [--project PREFIX]
    tutel edit <index> <description...> [--project PREFIX]
    tutel nav <name>

Commands act on the list in the starting directory when it is part of the
resolved tree, and on the root list otherwise. Indices may be written as
PREFIX:INDEX to address a task in the first list of the project tree whose
name starts with PREFIX.

Examples:
    tutel new "website"
    tutel add Fix the login form
    tutel done 3 4
    tutel done api:2
    tutel rm --cleanup
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from . import hierarchy, nav
from .config import load_settings
from .errors import NavError, NodeNotFound, TutelError
from .models import MAX_INDEX, ProjectNode, format_node, format_task
from .selector import (
    All,
    Completed,
    Indexed,
    Named,
    Selector,
    apply_completion,
    apply_removal,
    find_node,
)

log = logging.getLogger(__name__)

PROGRAM_TAG = "[tutel]"


# --- helpers ---

def parse_target(token: str) -> Union[int, Named]:
    """
    Parse an index argument: either "7" or "prefix:7".

    Raises:
        argparse.ArgumentTypeError: if the index part is not 0..999
    """
    prefix, sep, raw_index = token.rpartition(':')
    try:
        index = int(raw_index)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a valid index: {token}")
    if not 0 <= index <= MAX_INDEX:
        raise argparse.ArgumentTypeError(f"not a valid index: {token}")
    if sep:
        return Named(prefix, index)
    return index


def build_selectors(targets: List[Union[int, Named]]) -> List[Selector]:
    """Group plain indices into one Indexed selector, keep named ones separate."""
    indices = tuple(t for t in targets if isinstance(t, int))
    selectors: List[Selector] = [Indexed(indices)] if indices else []
    selectors.extend(t for t in targets if isinstance(t, Named))
    return selectors


def _load_root(args) -> ProjectNode:
    settings = args.settings
    return hierarchy.load_root(
        args.dir,
        file_name=settings.file_name,
        max_depth=settings.max_depth,
    )


def _origin_node(root: ProjectNode, directory: Path) -> ProjectNode:
    """The node whose list lives in directory, or root if there is none."""
    directory = directory.resolve()
    for node in root.walk():
        if node.directory == directory:
            return node
    return root


def _target_node(root: ProjectNode, prefix: Optional[str], directory: Optional[Path] = None) -> ProjectNode:
    if not prefix:
        return root if directory is None else _origin_node(root, directory)
    node = find_node(root, prefix)
    if node is None:
        raise NodeNotFound(prefix)
    return node


# --- show ---

def show_cmd(args):
    """Print the resolved project tree."""
    root = _load_root(args)
    print(format_node(root))


# --- new ---

def new_cmd(args):
    """Create a new project in the working directory."""
    settings = args.settings
    node = hierarchy.new_project(
        args.dir,
        name=args.name,
        is_child=args.child,
        force=args.force,
        file_name=settings.file_name,
    )
    print(f"Created: {node.name}")
    print(f"  File: {node.path}")

    try:
        nav.add(node.name, node.directory, settings.nav_file)
    except NavError as exc:
        print(f"Warning: {exc}")


# --- add ---

def add_cmd(args):
    """Add a task."""
    root = _load_root(args)
    node = _target_node(root, args.project, args.dir)

    task = node.add(" ".join(args.description), completed=args.completed)
    root.save()

    print(f"Added: {format_task(task)}")
    if node is not root:
        print(f"  Project: {node.name}")


# --- done ---

def done_cmd(args):
    """Mark tasks as completed (or not completed with --not)."""
    if args.all and args.targets:
        raise TutelError("--all must be specified on its own")
    if not args.all and not args.targets:
        raise TutelError("one or more task indices are required")

    root = _load_root(args)
    node = _target_node(root, args.project, args.dir)
    completed = not args.negate

    selectors = [All()] if args.all else build_selectors(args.targets)
    updated = []
    for selector in selectors:
        updated.extend(apply_completion(node, selector, completed, root=root))
    root.save()

    for task in updated:
        print(format_task(task))


# --- rm ---

def rm_cmd(args):
    """Remove tasks, or the whole project file."""
    modes = sum(bool(x) for x in (args.targets, args.all, args.cleanup, args.delete_project))
    if modes == 0:
        raise TutelError("one or more task indices are required")
    if modes > 1:
        raise TutelError("indices, --all, --cleanup and --delete-project are exclusive")

    root = _load_root(args)
    node = _target_node(root, args.project, args.dir)

    if args.delete_project:
        hierarchy.remove_project(node)
        print(f"Removed project: {node.name} ({node.path})")
        return

    if args.all:
        selectors = [All()]
    elif args.cleanup:
        selectors = [Completed()]
    else:
        selectors = build_selectors(args.targets)

    removed = []
    for selector in selectors:
        removed.extend(apply_removal(node, selector, root=root))
    root.save()

    print(f"Removed {len(removed)} task(s).")


# --- edit ---

def edit_cmd(args):
    """Replace a task's description."""
    root = _load_root(args)
    node = _target_node(root, args.project, args.dir)

    target = args.target
    if isinstance(target, Named):
        node = _target_node(root, target.prefix)
        target = target.index

    node.edit(target, " ".join(args.description))
    root.save()

    print(f"Updated: {format_task(node.get_task(target))}")


# --- nav ---

def nav_cmd(args):
    """Print the directory of a registered project."""
    settings = args.settings
    print(nav.query(args.name, settings.nav_file, settings.file_name))


# --- main ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tutel",
        description="a minimalistic todo app for terminal enthusiasts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="run without a subcommand to show the todo list",
    )
    parser.add_argument('--dir', type=Path, default=None,
                        help='Directory to resolve the project from (default: current directory)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.set_defaults(func=show_cmd)
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # --- show ---
    show_p = subparsers.add_parser('show', help='Show the todo list')
    show_p.set_defaults(func=show_cmd)

    # --- new ---
    new_p = subparsers.add_parser('new', help='Create a new project in the current directory')
    new_p.add_argument('name', nargs='?', help='Project name (default: directory name)')
    new_p.add_argument('-f', '--force', action='store_true', help='Force project creation')
    new_p.add_argument('--child', action='store_true',
                       help='Mark as a child list of the enclosing project')
    new_p.set_defaults(func=new_cmd)

    # --- add ---
    add_p = subparsers.add_parser('add', aliases=['a'], help='Add a new task')
    add_p.add_argument('description', nargs='+', help='Task description')
    add_p.add_argument('-c', '--completed', action='store_true',
                       help='Mark the task as already completed')
    add_p.add_argument('-p', '--project', help='Name prefix of the list to add to')
    add_p.set_defaults(func=add_cmd)

    # --- done ---
    done_p = subparsers.add_parser('done', aliases=['d'], help='Mark a task as being completed')
    done_p.add_argument('targets', nargs='*', type=parse_target, help='Task indices')
    done_p.add_argument('-a', '--all', action='store_true', help='Select all tasks')
    done_p.add_argument('-n', '--not', dest='negate', action='store_true',
                        help='Mark the task as not being done')
    done_p.add_argument('-p', '--project', help='Name prefix of the list to use')
    done_p.set_defaults(func=done_cmd)

    # --- rm ---
    rm_p = subparsers.add_parser('rm', help='Remove a task')
    rm_p.add_argument('targets', nargs='*', type=parse_target, help='Task indices')
    rm_p.add_argument('-a', '--all', action='store_true', help='Remove all tasks')
    rm_p.add_argument('-c', '--cleanup', action='store_true', help='Remove all completed tasks')
    rm_p.add_argument('--delete-project', action='store_true',
                      help='Remove the whole project file')
    rm_p.add_argument('-p', '--project', help='Name prefix of the list to use')
    rm_p.set_defaults(func=rm_cmd)

    # --- edit ---
    edit_p = subparsers.add_parser('edit', aliases=['e'], help='Edit an existing task')
    edit_p.add_argument('target', type=parse_target, help='Task index')
    edit_p.add_argument('description', nargs='+', help='New description')
    edit_p.add_argument('-p', '--project', help='Name prefix of the list to use')
    edit_p.set_defaults(func=edit_cmd)

    # --- nav ---
    nav_p = subparsers.add_parser('nav', help='Print the directory of a registered project')
    nav_p.add_argument('name', help='Project name')
    nav_p.set_defaults(func=nav_cmd)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    args.settings = load_settings()
    levels = logging.getLevelNamesMapping()
    level = logging.DEBUG if args.verbose else levels.get(args.settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.dir is None:
        args.dir = Path.cwd()
    log.debug("Resolving from %s", args.dir)

    try:
        args.func(args)
    except TutelError as exc:
        print(f"{PROGRAM_TAG} {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
