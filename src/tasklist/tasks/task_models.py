# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status: pending <-> done, no terminal state."""

    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING

    def toggled(self) -> TaskStatus:
        return TaskStatus.DONE if self is TaskStatus.PENDING else TaskStatus.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskPriority | None:
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class StatusFilter(StrEnum):
    """Query side of TaskStatus; ALL matches every task."""

    ALL = "all"
    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_raw(cls, raw: str | StatusFilter | None) -> StatusFilter:
        if raw is None:
            return cls.ALL
        return cls(str(raw).strip().lower())

    def matches(self, status: TaskStatus) -> bool:
        return self is StatusFilter.ALL or self.value == status.value


def format_timestamp(ts: datetime) -> str:
    """UTC, millisecond precision, `Z` suffix (2024-05-01T10:00:00.000Z)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


@dataclass(slots=True)
class Task:
    id: int
    content: str
    username: str
    status: TaskStatus
    created_at: datetime

    priority: TaskPriority | None = None
    category: str | None = None

    @classmethod
    def create(
        cls,
        content: str,
        username: str,
        priority: TaskPriority | None = None,
        category: str | None = None,
        *,
        task_id: int | None = None,
        now: datetime | None = None,
    ) -> Task:
        """
        Build a fresh pending task.

        Content and username are taken as-is; validating them is up to the caller.
        Without an explicit task_id the id is the creation time in milliseconds.
        """
        if now is None:
            now = datetime.now(UTC)
        if task_id is None:
            task_id = int(now.timestamp() * 1000)
        return cls(
            id=int(task_id),
            content=content,
            username=username,
            status=TaskStatus.PENDING,
            created_at=now,
            priority=priority,
            category=category,
        )

    def toggle_status(self) -> None:
        self.status = self.status.toggled()

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
            "username": self.username,
        }
        if self.priority is not None:
            record["priority"] = self.priority.value
        if self.category is not None:
            record["category"] = self.category
        return record

    @classmethod
    def from_record(cls, data: Any) -> Task:
        """
        Rebuild a Task from a stored record.

        Raises ValueError for entries that cannot become a complete Task:
        not a mapping, missing id/content/username/createdAt, non-integer id,
        or an unparsable timestamp.
        """
        if not isinstance(data, dict):
            raise ValueError(f"task record must be an object, got {type(data).__name__}")

        raw_id = data.get("id")
        # bool is an int subclass; a stored `true` is not an id.
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)):
            raise ValueError(f"task id must be a number, got {raw_id!r}")
        if isinstance(raw_id, float) and not raw_id.is_integer():
            raise ValueError(f"task id must be integral, got {raw_id!r}")

        content = data.get("content")
        username = data.get("username")
        if not isinstance(content, str):
            raise ValueError("task content is missing")
        if not isinstance(username, str):
            raise ValueError("task username is missing")

        raw_created = data.get("createdAt")
        if not isinstance(raw_created, str) or not raw_created:
            raise ValueError("task createdAt is missing")
        created_at = parse_timestamp(raw_created)

        category = data.get("category")
        return cls(
            id=int(raw_id),
            content=content,
            username=username,
            status=TaskStatus.from_raw(data.get("status")),
            created_at=created_at,
            priority=TaskPriority.from_raw(data.get("priority")),
            category=category if isinstance(category, str) else None,
        )
