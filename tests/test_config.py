# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    import os

    for name in list(os.environ):
        if name.startswith("TASKLIST_"):
            monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env(dotenv=False)
    assert s.app_name == "tasklist"
    assert s.log_level == "WARNING"
    assert s.console_enabled is True
    assert s.default_user == ""
    assert s.storage_backend == "json"
    assert s.storage_path == Path(".local/tasklist") / "tasks.json"
    assert s.storage_key == "tasks"


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKLIST_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKLIST_STORAGE_BACKEND", "SQLite")
    monkeypatch.setenv("TASKLIST_DEFAULT_USER", " alice ")
    monkeypatch.setenv("TASKLIST_CONSOLE_ENABLED", "no")
    monkeypatch.setenv("TASKLIST_LOG_LEVEL", "debug")

    s = Settings.from_env(dotenv=False)
    assert s.storage_backend == "sqlite"
    assert s.storage_path == tmp_path / "tasks.sqlite3"
    assert s.default_user == "alice"
    assert s.console_enabled is False
    assert s.log_level == "DEBUG"


def test_bad_backend_falls_back_to_json(monkeypatch) -> None:
    monkeypatch.setenv("TASKLIST_STORAGE_BACKEND", "redis")
    assert Settings.from_env(dotenv=False).storage_backend == "json"


def test_explicit_storage_path_wins(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKLIST_STORAGE_PATH", str(tmp_path / "mine.json"))
    assert Settings.from_env(dotenv=False).storage_path == tmp_path / "mine.json"


def test_dotenv_file_is_loaded(monkeypatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("TASKLIST_APP_NAME=from-dotenv\n", "utf-8")
    monkeypatch.chdir(tmp_path)
    # load_dotenv writes os.environ directly; registering the name with
    # monkeypatch first makes teardown remove whatever it writes.
    monkeypatch.setenv("TASKLIST_APP_NAME", "placeholder")
    monkeypatch.delenv("TASKLIST_APP_NAME")

    assert Settings.from_env().app_name == "from-dotenv"


def test_unrecognised_bool_falls_back_to_default(monkeypatch) -> None:
    monkeypatch.setenv("TASKLIST_CONSOLE_ENABLED", "maybe")
    assert Settings.from_env(dotenv=False).console_enabled is True

    monkeypatch.setenv("TASKLIST_CONSOLE_ENABLED", "off")
    assert Settings.from_env(dotenv=False).console_enabled is False
