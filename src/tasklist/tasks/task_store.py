# src/tasklist/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from ..core.ports import KeyValueStorage
from ..storage.kv_store import StorageError
from .task_models import StatusFilter, Task, TaskPriority

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class TaskIdFactory:
    """
    Millisecond-timestamp ids that never repeat within one store.

    If the clock has not advanced since the previous id (or went backwards),
    the next id is last + 1.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last = 0

    def observe(self, task_id: int) -> None:
        """Make sure future ids are greater than an id that already exists."""
        self._last = max(self._last, int(task_id))

    def __call__(self) -> int:
        candidate = int(self._clock())
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


class TaskStore:
    """
    In-memory ordered task collection persisted as one JSON blob.

    Persistence model:
    - load() replaces the whole collection from storage
    - every effective mutation rewrites the whole collection (no partial writes)
    - edit/delete/toggle_status on an unknown id return False and write nothing

    Queries (filter_by_status, tasks_for_user) are pure reads over memory.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: TaskIdFactory | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._ids = id_factory or TaskIdFactory()
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- low-level helpers ----

    def _find(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _serialize(self) -> str:
        return json.dumps([t.to_record() for t in self._tasks], ensure_ascii=False)

    def _deserialize(self, raw: str) -> list[Task]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored tasks under key=%s are not valid JSON; starting empty.", self._key)
            return []

        if not isinstance(data, list):
            logger.warning(
                "Stored tasks under key=%s are %s, not a list; starting empty.",
                self._key,
                type(data).__name__,
            )
            return []

        tasks: list[Task] = []
        for i, entry in enumerate(data):
            try:
                tasks.append(Task.from_record(entry))
            except ValueError as e:
                logger.warning("Skipping malformed task entry #%d: %s", i, e)
        return tasks

    # ---- persistence ----

    def save(self) -> bool:
        """Write the entire collection, replacing the previous blob. False if storage failed."""
        payload = self._serialize()
        try:
            self._storage.set_item(self._key, payload)
        except StorageError:
            logger.exception("Failed to save %d tasks under key=%s", len(self._tasks), self._key)
            return False
        logger.debug("Saved %d tasks under key=%s", len(self._tasks), self._key)
        return True

    def load(self) -> int:
        """
        Replace the collection with what storage holds.

        Missing or unreadable data yields an empty collection. Malformed
        entries are skipped so every loaded item is a complete Task.
        Returns the number of loaded tasks.
        """
        try:
            raw = self._storage.get_item(self._key)
        except StorageError:
            logger.exception("Failed to read tasks under key=%s; starting empty.", self._key)
            raw = None

        self._tasks = self._deserialize(raw) if raw else []
        for task in self._tasks:
            self._ids.observe(task.id)

        logger.info("Loaded %d tasks from key=%s", len(self._tasks), self._key)
        return len(self._tasks)

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return self._find(task_id)

    def add(
        self,
        content: str,
        username: str,
        priority: TaskPriority | None = None,
        category: str | None = None,
    ) -> Task:
        task = Task.create(content, username, priority, category, task_id=self._ids())
        self._tasks.append(task)
        self.save()
        logger.debug(
            "Task added id=%s user=%s priority=%s category=%s",
            task.id,
            username,
            priority,
            category,
        )
        return task

    def edit(self, task_id: int, new_content: str) -> bool:
        task = self._find(task_id)
        if task is None:
            logger.debug("edit: no task id=%s", task_id)
            return False
        task.content = new_content
        self.save()
        return True

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if len(self._tasks) == before:
            logger.debug("delete: no task id=%s", task_id)
            return False
        self.save()
        logger.debug("Task deleted id=%s", task_id)
        return True

    def toggle_status(self, task_id: int) -> bool:
        task = self._find(task_id)
        if task is None:
            logger.debug("toggle_status: no task id=%s", task_id)
            return False
        task.toggle_status()
        self.save()
        logger.debug("Task toggled id=%s status=%s", task_id, task.status.value)
        return True

    def filter_by_status(self, status: StatusFilter | str) -> list[Task]:
        """
        Tasks across all users matching status (all | pending | done).

        Raises ValueError for any other status value.
        """
        flt = StatusFilter.from_raw(status)
        if flt is StatusFilter.ALL:
            return list(self._tasks)
        return [t for t in self._tasks if flt.matches(t.status)]

    def tasks_for_user(self, username: str) -> list[Task]:
        return [t for t in self._tasks if t.username == username]
