# src/notesave/tasks/task_ops.py

"""
Pure operations over a task collection.

Every function takes the current collection (a tuple, newest first) and returns a
new one; the input is never mutated. Unknown ids are a no-op: the same tuple
object comes back, so callers can detect "nothing changed" with `is`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from ..core.models import PriorityLevel, SubTask, Task, new_id, now_ms
from ..errors import ValidationRejected

Tasks = tuple[Task, ...]


def _require_title(title: str) -> None:
    if not title or not title.strip():
        raise ValidationRejected("Task title must not be empty.")


def unique_task_id(tasks: Iterable[Task]) -> str:
    ids = {t.id for t in tasks}
    tid = new_id()
    while tid in ids:
        tid = new_id()
    return tid


def create_task(
    tasks: Tasks,
    *,
    title: str,
    description: str | None = None,
    priority: PriorityLevel = PriorityLevel.MEDIUM,
    reminder_time: str | None = None,
    sub_tasks: Iterable[SubTask] = (),
    created_at: int | None = None,
) -> tuple[Tasks, Task]:
    """Build a new task and prepend it. The title is stored exactly as given."""
    _require_title(title)
    task = Task(
        id=unique_task_id(tasks),
        title=title,
        created_at=now_ms() if created_at is None else created_at,
        description=description,
        priority=priority,
        reminder_time=reminder_time or None,
        sub_tasks=tuple(sub_tasks),
        is_completed=False,
    )
    return (task, *tasks), task


def _replace_matching(tasks: Tasks, task_id: str, fn) -> Tasks:
    for i, t in enumerate(tasks):
        if t.id == task_id:
            updated = fn(t)
            if updated is t:
                return tasks
            return tasks[:i] + (updated,) + tasks[i + 1 :]
    return tasks


def update_task(
    tasks: Tasks,
    task_id: str,
    *,
    title: str,
    description: str | None = None,
    priority: PriorityLevel = PriorityLevel.MEDIUM,
    reminder_time: str | None = None,
    sub_tasks: Iterable[SubTask] = (),
) -> Tasks:
    """Replace all mutable fields; id, created_at and completion state are kept."""
    _require_title(title)
    subs = tuple(sub_tasks)
    return _replace_matching(
        tasks,
        task_id,
        lambda t: replace(
            t,
            title=title,
            description=description,
            priority=priority,
            reminder_time=reminder_time or None,
            sub_tasks=subs,
        ),
    )


def toggle_completed(tasks: Tasks, task_id: str) -> Tasks:
    return _replace_matching(tasks, task_id, lambda t: replace(t, is_completed=not t.is_completed))


def toggle_subtask(tasks: Tasks, task_id: str, subtask_id: str) -> Tasks:
    def flip(t: Task) -> Task:
        if not any(st.id == subtask_id for st in t.sub_tasks):
            return t
        subs = tuple(
            replace(st, is_completed=not st.is_completed) if st.id == subtask_id else st
            for st in t.sub_tasks
        )
        return replace(t, sub_tasks=subs)

    return _replace_matching(tasks, task_id, flip)


def delete_task(tasks: Tasks, task_id: str) -> Tasks:
    if not any(t.id == task_id for t in tasks):
        return tasks
    return tuple(t for t in tasks if t.id != task_id)


def delete_all(tasks: Tasks) -> Tasks:
    return ()


def find_task(tasks: Tasks, task_id: str) -> Task | None:
    for t in tasks:
        if t.id == task_id:
            return t
    return None
