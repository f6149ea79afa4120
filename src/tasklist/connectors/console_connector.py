# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import add_from_text
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_api import InvalidInputError, render_task_list

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _make_confirm(read: InputFn, write: OutputFn) -> Callable[[str], bool]:
    def confirm(question: str) -> bool:
        try:
            answer = read(f"{question} [y/N] ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            write("")
            return False
        return answer in ("y", "yes")

    return confirm


def handle_line(state: AppState, line: str, confirm: Callable[[str], bool] | None = None) -> str:
    """Route one console line: slash commands to the registry, plain text becomes a new task."""
    reply = command_registry.handle(state, line, confirm=confirm)
    if reply is not None:
        return reply
    try:
        return add_from_text(state, line.split())
    except InvalidInputError as e:
        return f"Invalid input: {e}."


def run_console_loop(
    state: AppState,
    *,
    read: InputFn = input,
    write: OutputFn = print,
) -> None:
    logger.info("Console connector started (user=%s).", state.current_user)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "tasklist"))
    write(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.")

    if state.current_user:
        write(render_task_list(state))
    else:
        write("Pick a user first: /user NAME")

    confirm = _make_confirm(read, write)

    while True:
        prompt = f"{state.current_user or '?'}> "
        try:
            line = read(prompt).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = handle_line(state, line, confirm=confirm)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling the command."

        write(reply)

    logger.info("Console connector finished.")
