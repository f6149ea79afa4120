# src/tasklist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import (
    InvalidInputError,
    parse_task_id,
    render_task_list,
    require_text,
)
from ..tasks.task_models import StatusFilter, Task, TaskPriority

CommandConfirm = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandConfirm | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_YES_FLAGS = ("-y", "--yes")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        confirm: CommandConfirm | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Input errors raised by handlers become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, confirm)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except InvalidInputError as e:
            return f"Invalid input: {e}."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Plain text (no leading /) adds a task for the current user.")
        return "\n".join(lines)


registry = CommandRegistry()


def _owned_task(state: AppState, raw_id: str) -> Task:
    """Look up a task of the current user; other users' tasks are invisible."""
    username = require_text(state.current_user, "username (use /user NAME first)")
    task_id = parse_task_id(raw_id)
    task = state.task_store.get(task_id)
    if task is None or task.username != username:
        raise InvalidInputError(f"no task #{task_id} for user {username}")
    return task


def _with_list(state: AppState, message: str) -> str:
    return f"{message}\n{render_task_list(state)}"


def add_from_text(state: AppState, words: list[str]) -> str:
    """
    Add a task from words like ["!high", "#home", "buy", "milk"].

    Leading !priority and #category markers are optional, in any order.
    """
    username = require_text(state.current_user, "username (use /user NAME first)")

    priority: TaskPriority | None = None
    category: str | None = None
    rest = list(words)
    while rest and rest[0][:1] in ("!", "#") and len(rest[0]) > 1:
        marker = rest.pop(0)
        if marker.startswith("!"):
            priority = TaskPriority.from_raw(marker[1:])
            if priority is None:
                choices = ", ".join(p.value for p in TaskPriority)
                raise InvalidInputError(f"unknown priority {marker[1:]!r} (expected {choices})")
        else:
            category = marker[1:]

    content = require_text(" ".join(rest), "task content")
    task = state.task_store.add(content, username, priority, category)
    return _with_list(state, f"Added task #{task.id}.")


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    user = state.current_user or "(none)"
    return (
        "Status:\n"
        f"  User: {user}\n"
        f"  Filter: {state.current_filter.value}\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} "
        f"{getattr(settings, 'storage_path', '')}\n"
        f"  Tasks stored (all users): {state.task_store.count_tasks()}"
    )


def cmd_user(state: AppState, args: list[str]) -> str:
    """
    /user       -> show current user
    /user NAME  -> switch user and show their tasks
    """
    if not args:
        if not state.current_user:
            return "No user selected. Use /user NAME."
        return f"Current user: {state.current_user}"

    state.current_user = require_text(" ".join(args), "username")
    logger.debug("Switched user to %s", state.current_user)
    return render_task_list(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    return add_from_text(state, args)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit ID NEW TEXT"
    task = _owned_task(state, args[0])
    content = require_text(" ".join(args[1:]), "task content")
    state.task_store.edit(task.id, content)
    return _with_list(state, f"Edited task #{task.id}.")


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle ID"
    task = _owned_task(state, args[0])
    state.task_store.toggle_status(task.id)
    return _with_list(state, f"Task #{task.id} is now {task.status.value}.")


def cmd_delete(state: AppState, args: list[str], confirm: CommandConfirm | None) -> str:
    """
    /delete ID     -> asks for confirmation first
    /delete ID -y  -> no confirmation
    """
    ids = [a for a in args if a not in _YES_FLAGS]
    if not ids:
        return "Usage: /delete ID [-y]"
    task = _owned_task(state, ids[0])

    if not any(a in _YES_FLAGS for a in args):
        if confirm is None:
            return f"Confirmation required: /delete {task.id} -y"
        if not confirm(f"Really delete task #{task.id} ({task.content})?"):
            return "Cancelled."

    state.task_store.delete(task.id)
    return _with_list(state, f"Deleted task #{task.id}.")


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Current filter: {state.current_filter.value}. Use /filter all|pending|done."
    try:
        state.current_filter = StatusFilter.from_raw(args[0])
    except ValueError:
        return "Usage: /filter all|pending|done"
    if not state.current_user:
        return f"Filter set to {state.current_filter.value}. Use /user NAME to see tasks."
    return render_task_list(state)


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current user, filter and storage.")
registry.register("user", cmd_user, help_text="Select the user: /user NAME.", aliases=["u"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add [!low|!medium|!high] [#category] TEXT.", aliases=["a"]
)
registry.register("edit", cmd_edit, help_text="Change task text: /edit ID TEXT.", aliases=["e"])
registry.register(
    "toggle", cmd_toggle, help_text="Flip a task between pending and done.", aliases=["done", "t"]
)
registry.register(
    "delete", cmd_delete, help_text="Delete a task (asks first): /delete ID [-y].", aliases=["del", "rm"]
)
registry.register("filter", cmd_filter, help_text="Show tasks by status: /filter all|pending|done.")
registry.register("list", cmd_list, help_text="Show the current user's tasks.", aliases=["ls"])
