# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the configured storage backend and wires a TaskStore into AppState,
- loads the persisted tasks.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import open_storage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    if settings.storage_backend != "memory":
        Path(settings.storage_path).parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings and load stored tasks.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = open_storage(settings.storage_backend, settings.storage_path)
    task_store = TaskStore(storage, key=settings.storage_key)
    task_store.load()

    default_user = (getattr(settings, "default_user", "") or "").strip()
    state = AppState(
        settings=settings,
        task_store=task_store,
        current_user=default_user or None,
    )
    logger.info(
        "State ready backend=%s path=%s tasks=%d user=%s",
        settings.storage_backend,
        settings.storage_path,
        len(task_store),
        state.current_user,
    )
    return state
