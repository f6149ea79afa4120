# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on a Protocol instead of a concrete storage backend.
This keeps storage swappable (memory/json/sqlite) and makes testing easier.
"""

from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Flat blob store: string keys to string values.

    Backends raise StorageError on I/O failure. A missing key reads as None.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...

