# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.core.state import AppState
from tasklist.storage.kv_store import MemoryStorage
from tasklist.tasks.task_store import TaskIdFactory, TaskStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        console_enabled=True,
        default_user="",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "tasks.json",
        storage_key="tasks",
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(storage: MemoryStorage, clock: FakeClock) -> TaskStore:
    """
    TaskStore over in-memory storage with a frozen clock.

    A frozen clock is the worst case for timestamp ids, so every test using
    this fixture also exercises id uniqueness.
    """
    return TaskStore(storage, id_factory=TaskIdFactory(clock))


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store, current_user="alice")
