"""Command-line interface for tasklist.

This module provides an interactive shell that drives a TaskListController.
Commands are read one per line and parsed with argparse:
- add: Create a new task
- done: Toggle a task's completion
- delete: Delete a task (can be restored)
- restore: Restore the most recently deleted task
- edit: Replace a task's text
- move: Move a task to a new position
- search, filter, sort: Change what the list shows
- list: Show the visible tasks and progress
- quit: Leave the shell

Tasks live only as long as the shell runs.
"""

import argparse
import dataclasses
import logging
import shlex
import sys
from typing import Callable, Dict, List, Optional, TextIO

from tasklist.config import SORT_MODES, load_settings
from tasklist.controller import TaskListController, ViewModel
from tasklist.models import Priority, SortKey, StatusFilter
from tasklist.notifications import Notification, NotificationKind

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CommandError(Exception):
    """Raised when a shell command line cannot be parsed."""


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process."""

    def error(self, message):
        raise CommandError(message)

    def exit(self, status=0, message=None):
        raise CommandError(message or "")


def create_parser() -> argparse.ArgumentParser:
    """Create the parser for process-level options.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="tasklist",
        description="Interactive in-memory task list editor"
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: TASKLIST_LOG_LEVEL or WARNING)"
    )
    parser.add_argument(
        "--sort-mode",
        choices=SORT_MODES,
        help="Whether sorting only changes the view or reorders the list"
    )
    parser.add_argument(
        "--undo-capacity",
        type=int,
        help="Maximum number of deleted tasks kept for restore"
    )
    return parser


def create_command_parser() -> CommandParser:
    """Create the parser for one shell command line.

    Returns:
        Configured CommandParser instance
    """
    parser = CommandParser(prog="", add_help=False)
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add a new task", add_help=False)
    add_parser.add_argument("text", nargs="+", help="Task text")
    add_parser.add_argument("--due", default="", help="Due date")
    add_parser.add_argument(
        "--priority",
        choices=[p.value for p in Priority],
        default=Priority.LOW.value,
        help="Task priority (default: low)"
    )
    add_parser.add_argument("--category", default="", help="Task category")

    done_parser = subparsers.add_parser("done", help="Toggle task completion", add_help=False)
    done_parser.add_argument("id", type=int, help="Task ID")

    delete_parser = subparsers.add_parser("delete", help="Delete a task", add_help=False)
    delete_parser.add_argument("id", type=int, help="Task ID")

    subparsers.add_parser("restore", help="Restore the last deleted task", add_help=False)

    edit_parser = subparsers.add_parser("edit", help="Replace a task's text", add_help=False)
    edit_parser.add_argument("id", type=int, help="Task ID")
    edit_parser.add_argument("text", nargs="*", help="New task text")

    move_parser = subparsers.add_parser("move", help="Move a task to a position", add_help=False)
    move_parser.add_argument("id", type=int, help="Task ID")
    move_parser.add_argument("position", type=int, help="New position, starting at 0")

    search_parser = subparsers.add_parser("search", help="Filter by text", add_help=False)
    search_parser.add_argument("term", nargs="*", help="Search term (empty clears)")

    filter_parser = subparsers.add_parser("filter", help="Filter by status", add_help=False)
    filter_parser.add_argument("status", choices=[s.value for s in StatusFilter])

    sort_parser = subparsers.add_parser("sort", help="Sort the list", add_help=False)
    sort_parser.add_argument("key", choices=[k.value for k in SortKey])

    subparsers.add_parser("list", help="Show tasks", add_help=False)
    subparsers.add_parser("help", help="Show commands", add_help=False)
    subparsers.add_parser("quit", help="Leave the shell", add_help=False)
    subparsers.add_parser("exit", help="Leave the shell", add_help=False)

    return parser


def format_view(view: ViewModel, controller: TaskListController) -> List[str]:
    """Render the visible tasks and progress as text lines."""
    store = controller.state.store
    lines = []
    if not view.tasks:
        lines.append("No tasks found.")
    for task in view.tasks:
        status_icon = "x" if task.completed else " "
        line = (
            f"{store.position_of(task.id)}. [{status_icon}] #{task.id} {task.text} "
            f"[{task.priority.value}]"
        )
        if task.category:
            line += f" ({task.category})"
        if task.due_date:
            line += f" due: {task.due_date}"
        lines.append(line)
    lines.append(f"{view.progress}% Complete")
    return lines


class Shell:
    """Read-eval loop that feeds command lines to a controller."""

    def __init__(
        self,
        controller: TaskListController,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.controller = controller
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.parser = create_command_parser()
        self.commands: Dict[str, Callable[[argparse.Namespace], int]] = {
            "add": self.cmd_add,
            "done": self.cmd_done,
            "delete": self.cmd_delete,
            "restore": self.cmd_restore,
            "edit": self.cmd_edit,
            "move": self.cmd_move,
            "search": self.cmd_search,
            "filter": self.cmd_filter,
            "sort": self.cmd_sort,
            "list": self.cmd_list,
            "help": self.cmd_help,
        }
        controller.subscribe_notifications(self.show_notification)

    def print(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def show_notification(self, notification: Notification) -> None:
        if notification.kind is NotificationKind.ERROR:
            print(f"Error: {notification.message}", file=self.stderr)
        elif notification.kind is NotificationKind.UNDO_OFFER:
            self.print(f"{notification.message} Type 'restore' to undo.")
        else:
            self.print(notification.message)

    def execute(self, line: str) -> Optional[int]:
        """Run one command line.

        Returns:
            Exit code of the command, or None if the shell should stop
        """
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            print(f"Error: {exc}", file=self.stderr)
            return 1
        if not argv:
            return 0
        try:
            args = self.parser.parse_args(argv)
        except CommandError as exc:
            print(f"Error: {exc}", file=self.stderr)
            return 1
        if args.command in ("quit", "exit"):
            return None
        return self.commands[args.command](args)

    def run(self, stdin: TextIO) -> int:
        """Process commands until end of input or quit.

        Returns:
            0 if every command succeeded, 1 otherwise
        """
        interactive = stdin.isatty()
        status = 0
        while True:
            if interactive:
                print("> ", end="", file=self.stdout, flush=True)
            line = stdin.readline()
            if not line:
                break
            code = self.execute(line)
            if code is None:
                break
            status = status or code
        return status

    def cmd_add(self, args: argparse.Namespace) -> int:
        task = self.controller.on_add(" ".join(args.text), args.due, args.priority, args.category)
        if task is None:
            return 1
        self.print(f"Task added: #{task.id} {task.text} [{task.priority.value}]")
        return 0

    def cmd_done(self, args: argparse.Namespace) -> int:
        task = self.controller.on_toggle_complete(args.id)
        if task is None:
            print(f"Error: Task #{args.id} not found.", file=self.stderr)
            return 1
        state = "done" if task.completed else "pending"
        self.print(f"Task #{task.id} marked as {state}: {task.text}")
        return 0

    def cmd_delete(self, args: argparse.Namespace) -> int:
        task = self.controller.on_delete(args.id)
        if task is None:
            print(f"Error: Task #{args.id} not found.", file=self.stderr)
            return 1
        return 0

    def cmd_restore(self, args: argparse.Namespace) -> int:
        task = self.controller.on_restore()
        if task is None:
            return 1
        position = self.controller.state.store.position_of(task.id)
        self.print(f"Task #{task.id} restored at position {position}: {task.text}")
        return 0

    def cmd_edit(self, args: argparse.Namespace) -> int:
        controller = self.controller
        if controller.on_edit_start(args.id) is None:
            print(f"Error: Task #{args.id} not found.", file=self.stderr)
            return 1
        if not controller.on_edit_commit(args.id, " ".join(args.text)):
            controller.on_edit_cancel()
            return 1
        self.print(f"Task #{args.id} updated: {controller.state.store.get(args.id).text}")
        return 0

    def cmd_move(self, args: argparse.Namespace) -> int:
        position = self.controller.on_reorder_drop(args.id, args.position)
        if position is None:
            print(f"Error: Task #{args.id} not found.", file=self.stderr)
            return 1
        self.print(f"Task #{args.id} moved to position {position}")
        return 0

    def cmd_search(self, args: argparse.Namespace) -> int:
        return self._show(self.controller.on_filter_change(search_term=" ".join(args.term)))

    def cmd_filter(self, args: argparse.Namespace) -> int:
        return self._show(self.controller.on_filter_change(status_filter=args.status))

    def cmd_sort(self, args: argparse.Namespace) -> int:
        return self._show(self.controller.on_filter_change(sort_key=args.key))

    def cmd_list(self, args: argparse.Namespace) -> int:
        return self._show(self.controller.view())

    def cmd_help(self, args: argparse.Namespace) -> int:
        self.print(self.parser.format_help())
        return 0

    def _show(self, view: ViewModel) -> int:
        for line in format_view(view, self.controller):
            self.print(line)
        return 0


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]
        stdin: Stream to read commands from. If None, uses sys.stdin

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    overrides = {
        "log_level": args.log_level,
        "sort_mode": args.sort_mode,
        "undo_capacity": args.undo_capacity,
    }
    try:
        settings = dataclasses.replace(
            load_settings(),
            **{name: value for name, value in overrides.items() if value is not None}
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    logger.debug("Starting shell with %s", settings)

    shell = Shell(TaskListController(settings))
    return shell.run(stdin or sys.stdin)


if __name__ == "__main__":
    sys.exit(main())
