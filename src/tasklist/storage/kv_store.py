# src/tasklist/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
from pathlib import Path

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "json", "sqlite")


class StorageError(RuntimeError):
    """Raised by storage backends when the underlying medium fails."""


class MemoryStorage:
    """Dict-backed storage. Lives as long as the process; used by tests and demos."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """
    One JSON object on disk mapping keys to string values.

    Writes go to a temp file and are moved into place with os.replace,
    so a crash mid-write leaves the previous file intact.
    A missing or corrupt file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileStorage ready path=%s exists=%s", self._path, self._path.exists())

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError are both ValueError.
            logger.warning("Storage file %s is not valid UTF-8 JSON; treating as empty.", self._path)
            return {}
        except OSError as e:
            raise StorageError(f"cannot read {self._path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; treating as empty.", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, UnicodeEncodeError) as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"cannot write {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            # Task contents are personal notes; keep the file private on disk.
            os.chmod(self._path, 0o600)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items)


class SqliteStorage:
    """
    SQLite key-value table.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        # Created on first use, so a corrupt file fails a read or write, not startup.
        self._schema_ready = False
        logger.info("SqliteStorage ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self._db_path}: {e}") from e

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        if self._schema_ready:
            return
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        conn.commit()
        self._schema_ready = True

    def get_item(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            self._ensure_schema(conn)
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        except sqlite3.Error as e:
            raise StorageError(f"cannot read key={key!r}: {e}") from e
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            self._ensure_schema(conn)
            conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            raise StorageError(f"cannot write key={key!r}: {e}") from e
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_conn()
        try:
            self._ensure_schema(conn)
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"cannot delete key={key!r}: {e}") from e
        finally:
            conn.close()


def open_storage(backend: str, path: str | Path | None = None) -> KeyValueStorage:
    """Build a storage backend by name: memory | json | sqlite."""
    name = (backend or "").strip().lower()
    if name == "memory":
        return MemoryStorage()
    if name in ("json", "sqlite") and path is None:
        raise ValueError(f"storage backend {name!r} requires a path")
    if name == "json":
        return JsonFileStorage(path)  # type: ignore[arg-type]
    if name == "sqlite":
        return SqliteStorage(path)  # type: ignore[arg-type]
    raise ValueError(f"unknown storage backend {backend!r}; expected one of {', '.join(BACKENDS)}")
