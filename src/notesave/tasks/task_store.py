# src/notesave/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from ..core.models import PriorityLevel, SubTask, Task
from ..core.ports import KeyValueStorage
from ..errors import ValidationRejected
from . import task_ops
from .snapshot import dump_snapshot, parse_snapshot

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task collection, the single source of truth for the running session.

    Mutations are optimistic: the collection changes first, then the full snapshot
    is handed to storage as a fire-and-forget write. A failed write is logged and
    remembered in last_write_ok, never rolled back.

    Must be mutated from inside a running event loop (writes are scheduled on it).
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        tasks: Iterable[Task] = (),
        *,
        key: str = "notesave_db_v1",
    ) -> None:
        self._storage = storage
        self._key = key
        self._tasks: task_ops.Tasks = tuple(tasks)
        self._pending: set[asyncio.Task[bool]] = set()
        self.last_write_ok: bool | None = None
        self.writes_issued = 0

    @classmethod
    async def load(cls, storage: KeyValueStorage, *, key: str = "notesave_db_v1") -> TaskStore:
        raw = await storage.get(key)
        tasks = parse_snapshot(raw)
        logger.info("TaskStore ready key=%s total=%d", key, len(tasks))
        return cls(storage, tasks, key=key)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        return task_ops.find_task(self._tasks, task_id)

    # ---- persistence ----

    def _commit(self, new_tasks: task_ops.Tasks, *, force_write: bool = False) -> bool:
        if new_tasks is self._tasks and not force_write:
            return False
        self._tasks = new_tasks
        self._schedule_write(dump_snapshot(new_tasks))
        return True

    def _schedule_write(self, payload: str) -> None:
        loop = asyncio.get_running_loop()
        self.writes_issued += 1
        fut = loop.create_task(self._write(payload, self.writes_issued))
        self._pending.add(fut)
        fut.add_done_callback(self._pending.discard)

    async def _write(self, payload: str, seq: int) -> bool:
        ok = await self._storage.set(self._key, payload)
        self.last_write_ok = ok
        if ok:
            logger.debug("Snapshot saved key=%s write=%d bytes=%d", self._key, seq, len(payload))
        else:
            logger.warning("Snapshot not persisted key=%s write=%d (kept in memory)", self._key, seq)
        return ok

    async def flush(self) -> None:
        """Wait for every write issued so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ---- operations ----

    def create(
        self,
        title: str,
        description: str | None = None,
        priority: PriorityLevel = PriorityLevel.MEDIUM,
        reminder_time: str | None = None,
        sub_tasks: Iterable[SubTask] = (),
    ) -> Task | None:
        """Prepend a new task. Returns None (and changes nothing) for a blank title."""
        try:
            new_tasks, task = task_ops.create_task(
                self._tasks,
                title=title,
                description=description,
                priority=priority,
                reminder_time=reminder_time,
                sub_tasks=sub_tasks,
            )
        except ValidationRejected:
            logger.debug("create rejected: blank title")
            return None
        self._commit(new_tasks)
        logger.debug("Task created id=%s priority=%s", task.id, task.priority.value)
        return task

    def update(
        self,
        task_id: str,
        title: str,
        description: str | None = None,
        priority: PriorityLevel = PriorityLevel.MEDIUM,
        reminder_time: str | None = None,
        sub_tasks: Iterable[SubTask] = (),
    ) -> bool:
        try:
            new_tasks = task_ops.update_task(
                self._tasks,
                task_id,
                title=title,
                description=description,
                priority=priority,
                reminder_time=reminder_time,
                sub_tasks=sub_tasks,
            )
        except ValidationRejected:
            logger.debug("update rejected: blank title id=%s", task_id)
            return False
        return self._commit(new_tasks)

    def toggle_completed(self, task_id: str) -> bool:
        return self._commit(task_ops.toggle_completed(self._tasks, task_id))

    def toggle_subtask(self, task_id: str, subtask_id: str) -> bool:
        return self._commit(task_ops.toggle_subtask(self._tasks, task_id, subtask_id))

    def delete(self, task_id: str) -> bool:
        return self._commit(task_ops.delete_task(self._tasks, task_id))

    def delete_all(self) -> None:
        removed = len(self._tasks)
        self._commit(task_ops.delete_all(self._tasks), force_write=True)
        logger.info("All tasks deleted (%d removed).", removed)
