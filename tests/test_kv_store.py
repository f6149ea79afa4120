# tests/test_kv_store.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tasklist.storage.kv_store import (
    JsonFileStorage,
    MemoryStorage,
    SqliteStorage,
    StorageError,
    open_storage,
)
from tasklist.tasks.task_store import TaskStore


@pytest.fixture(params=["memory", "json", "sqlite"])
def backend(request, tmp_path: Path):
    suffix = ".sqlite3" if request.param == "sqlite" else ".json"
    return open_storage(request.param, tmp_path / f"store{suffix}")


def test_get_set_remove(backend) -> None:
    assert backend.get_item("tasks") is None

    backend.set_item("tasks", "[]")
    backend.set_item("other", "x")
    backend.set_item("tasks", '[{"id": 1}]')
    assert backend.get_item("tasks") == '[{"id": 1}]'
    assert backend.get_item("other") == "x"

    backend.remove_item("tasks")
    backend.remove_item("never-existed")
    assert backend.get_item("tasks") is None
    assert backend.get_item("other") == "x"


@pytest.mark.parametrize("backend_name,filename", [("json", "t.json"), ("sqlite", "t.sqlite3")])
def test_file_backends_survive_reopen(tmp_path: Path, backend_name: str, filename: str) -> None:
    path = tmp_path / "nested" / filename
    store = TaskStore(open_storage(backend_name, path))
    store.add("persisted", "alice")

    reopened = TaskStore(open_storage(backend_name, path))
    assert reopened.load() == 1
    assert reopened.all_tasks()[0].content == "persisted"


def test_json_file_is_a_key_to_string_map(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    storage = JsonFileStorage(path)
    storage.set_item("tasks", "[]")

    assert json.loads(path.read_text("utf-8")) == {"tasks": "[]"}
    assert not path.with_suffix(".json.tmp").exists()


def test_json_corrupt_file_reads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    path.write_text("{broken", "utf-8")
    storage = JsonFileStorage(path)

    assert storage.get_item("tasks") is None
    storage.set_item("tasks", "[]")
    assert storage.get_item("tasks") == "[]"


def test_json_non_object_file_reads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    path.write_text('["tasks"]', "utf-8")
    assert JsonFileStorage(path).get_item("tasks") is None


def test_json_write_failure_raises_storage_error(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    storage = JsonFileStorage(path)
    # A directory where the file should go makes os.replace fail.
    path.mkdir()
    with pytest.raises(StorageError):
        storage.set_item("tasks", "[]")


def test_sqlite_upsert_keeps_one_row(tmp_path: Path) -> None:
    storage = SqliteStorage(tmp_path / "kv.sqlite3")
    for i in range(3):
        storage.set_item("tasks", str(i))
    assert storage.get_item("tasks") == "2"


def test_memory_storage_initial_items() -> None:
    assert MemoryStorage({"tasks": "[]"}).get_item("tasks") == "[]"


def test_open_storage_rejects_unknown_backend_and_missing_path(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        open_storage("redis", tmp_path / "x")
    with pytest.raises(ValueError):
        open_storage("json", None)
    assert isinstance(open_storage("memory"), MemoryStorage)


def test_json_non_utf8_file_reads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "kv.json"
    path.write_bytes(b'{"tasks": "\xff\xfe[]"}')
    storage = JsonFileStorage(path)

    assert storage.get_item("tasks") is None
    storage.set_item("tasks", "[]")
    assert storage.get_item("tasks") == "[]"


def test_sqlite_corrupt_file_fails_per_call_not_on_open(tmp_path: Path) -> None:
    path = tmp_path / "kv.sqlite3"
    path.write_bytes(b"this is not a database" * 100)

    storage = SqliteStorage(path)
    with pytest.raises(StorageError):
        storage.get_item("tasks")
    with pytest.raises(StorageError):
        storage.set_item("tasks", "[]")


@pytest.mark.parametrize("backend_name", ["json", "sqlite"])
def test_unencodable_text_raises_storage_error(tmp_path: Path, backend_name: str) -> None:
    storage = open_storage(backend_name, tmp_path / f"kv.{backend_name}")
    with pytest.raises(StorageError):
        storage.set_item("tasks", "lone surrogate \ud800")
    assert not (tmp_path / "kv.json.tmp").exists()


@pytest.mark.parametrize("backend_name", ["json", "sqlite"])
def test_store_save_reports_unencodable_content(tmp_path: Path, backend_name: str) -> None:
    store = TaskStore(open_storage(backend_name, tmp_path / f"kv.{backend_name}"))

    task = store.add("lone surrogate \ud800", "alice")

    assert store.get(task.id) is task
    assert store.save() is False
