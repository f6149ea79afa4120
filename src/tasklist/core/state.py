# src/tasklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_models import StatusFilter
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything the presentation layer needs, passed explicitly.

    Built once by cli.bootstrap; there is no module-level store.
    """

    # Settings object (config.Settings or a test stand-in).
    settings: Any

    task_store: TaskStore

    current_user: str | None = None
    current_filter: StatusFilter = StatusFilter.ALL
