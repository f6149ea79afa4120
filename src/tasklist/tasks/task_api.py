# src/tasklist/tasks/task_api.py

from __future__ import annotations

from ..core.state import AppState
from .task_models import StatusFilter, Task


class InvalidInputError(ValueError):
    """User input rejected by the presentation layer (empty username/content, bad id...)."""


def require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInputError(f"{field} is required")
    return text


def parse_task_id(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(f"task id must be a number, got {raw!r}") from None


def visible_tasks(state: AppState) -> list[Task]:
    """
    The current user's tasks narrowed by the current filter, in store order.

    This is what the task list shows; it needs a selected user.
    """
    username = require_text(state.current_user, "username")
    tasks = state.task_store.tasks_for_user(username)
    if state.current_filter is StatusFilter.ALL:
        return tasks
    return [t for t in tasks if state.current_filter.matches(t.status)]


def format_task(task: Task) -> str:
    parts = [f"#{task.id}", task.content, f"[{task.status.value}]"]
    if task.priority is not None:
        parts.append(f"!{task.priority.value}")
    if task.category:
        parts.append(f"#{task.category}")
    return " ".join(parts)


def render_task_list(state: AppState) -> str:
    tasks = visible_tasks(state)
    header = f"Tasks of {state.current_user} ({state.current_filter.value}):"
    if not tasks:
        return f"{header}\n  (none)"
    return "\n".join([header, *(f"  {format_task(t)}" for t in tasks)])
