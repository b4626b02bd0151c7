# src/notesave/core/models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class PriorityLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: Any) -> PriorityLevel:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class FilterMode(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_raw(cls, raw: str | None) -> Theme:
        """Stored preference -> Theme. Anything but "light"/"dark" means the default."""
        if raw == cls.DARK.value:
            return cls.DARK
        return cls.LIGHT


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class SubTask:
    id: str
    title: str
    is_completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "isCompleted": self.is_completed}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SubTask:
        return cls(
            id=str(raw.get("id") or new_id()),
            title=str(raw.get("title") or ""),
            is_completed=raw.get("isCompleted") is True,
        )


@dataclass(frozen=True, slots=True)
class Task:
    """
    A to-do item.

    Instances are immutable: every change produces a copy (dataclasses.replace),
    so a collection snapshot handed out to a view never changes under it.
    """

    id: str
    title: str
    created_at: int
    description: str | None = None
    priority: PriorityLevel = PriorityLevel.MEDIUM
    reminder_time: str | None = None
    sub_tasks: tuple[SubTask, ...] = field(default_factory=tuple)
    is_completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Snapshot representation (camelCase keys, optional fields omitted)."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
            "subTasks": [st.to_dict() for st in self.sub_tasks],
            "priority": self.priority.value,
        }
        if self.description is not None:
            out["description"] = self.description
        if self.reminder_time is not None:
            out["reminderTime"] = self.reminder_time
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        subs_raw = raw.get("subTasks")
        subs: list[SubTask] = []
        if isinstance(subs_raw, list):
            subs = [SubTask.from_dict(s) for s in subs_raw if isinstance(s, dict)]

        created_raw = raw.get("createdAt")
        try:
            created_at = int(created_raw) if created_raw is not None else 0
        except (TypeError, ValueError):
            created_at = 0

        description = raw.get("description")
        reminder = raw.get("reminderTime")

        return cls(
            id=str(raw.get("id") or new_id()),
            title=str(raw.get("title") or ""),
            created_at=created_at,
            description=str(description) if description is not None else None,
            priority=PriorityLevel.from_raw(raw.get("priority")),
            reminder_time=str(reminder) if reminder else None,
            sub_tasks=tuple(subs),
            is_completed=raw.get("isCompleted") is True,
        )


@dataclass(frozen=True, slots=True)
class HostUser:
    """Identity reported by the host platform (all fields optional)."""

    display_name: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class SuggestedStep:
    """One generated sub-step candidate; ids are assigned by the caller when merging."""

    title: str
