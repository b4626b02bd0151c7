# src/notesave/tasks/projection.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import FilterMode, Task


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    active: int
    completed: int


def filter_tasks(tasks: Sequence[Task], mode: FilterMode) -> list[Task]:
    """Visible subset for the filter mode, source order preserved."""
    if mode == FilterMode.ACTIVE:
        return [t for t in tasks if not t.is_completed]
    if mode == FilterMode.COMPLETED:
        return [t for t in tasks if t.is_completed]
    return list(tasks)


def count_tasks(tasks: Sequence[Task]) -> TaskCounts:
    completed = sum(1 for t in tasks if t.is_completed)
    return TaskCounts(total=len(tasks), active=len(tasks) - completed, completed=completed)
