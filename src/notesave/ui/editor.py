# src/notesave/ui/editor.py

"""
Edit session: the buffer behind the add/edit sheet.

Nothing touches the task store until commit(). AI suggestions are merged into
the buffer only; a suggestion that arrives after the session ended is dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from ..core.models import PriorityLevel, SubTask, Task, new_id
from ..core.ports import HapticKind, SuggestionProvider
from ..errors import SuggestionFailed
from ..tasks.task_store import TaskStore
from .modal import ModalState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EditFeatures:
    reminders_enabled: bool = True
    ai_suggestions_enabled: bool = True
    toast_on_every_save: bool = False

    @classmethod
    def from_settings(cls, settings) -> EditFeatures:
        return cls(
            reminders_enabled=bool(getattr(settings, "reminders_enabled", True)),
            ai_suggestions_enabled=bool(getattr(settings, "ai_suggestions_enabled", True)),
            toast_on_every_save=bool(getattr(settings, "toast_on_every_save", False)),
        )


@dataclass(slots=True)
class EditBuffer:
    title: str = ""
    description: str = ""
    priority: PriorityLevel = PriorityLevel.MEDIUM
    reminder: str = ""
    sub_tasks: list[SubTask] = field(default_factory=list)

    @classmethod
    def from_task(cls, task: Task) -> EditBuffer:
        return cls(
            title=task.title,
            description=task.description or "",
            priority=task.priority,
            reminder=task.reminder_time or "",
            sub_tasks=list(task.sub_tasks),
        )


def _noop_notify(_text: str) -> None:
    return


def _noop_haptic(_kind: HapticKind) -> None:
    return


class EditSession:
    def __init__(
        self,
        store: TaskStore,
        suggestions: SuggestionProvider | None,
        *,
        task: Task | None = None,
        features: EditFeatures | None = None,
        modal: ModalState | None = None,
        notify: Callable[[str], None] = _noop_notify,
        haptic: Callable[[HapticKind], None] = _noop_haptic,
    ) -> None:
        self._store = store
        self._suggestions = suggestions
        self.features = features or EditFeatures()
        self.modal = modal or ModalState("editor")
        self._notify = notify
        self._haptic = haptic

        self.editing_id: str | None = task.id if task is not None else None
        self.buffer = EditBuffer.from_task(task) if task is not None else EditBuffer()
        self.suggesting = False
        self._closed = False

        self.modal.open()

    @property
    def is_edit(self) -> bool:
        return self.editing_id is not None

    @property
    def is_active(self) -> bool:
        return not self._closed

    @property
    def can_save(self) -> bool:
        return bool(self.buffer.title.strip())

    # ---- fields ----

    def set_title(self, title: str) -> None:
        self.buffer.title = title

    def set_description(self, description: str) -> None:
        self.buffer.description = description

    def set_priority(self, priority: PriorityLevel) -> None:
        self.buffer.priority = priority

    def set_reminder(self, reminder: str) -> bool:
        """ISO-8601 date/time, or "" to clear. False when disabled or unparsable."""
        if not self.features.reminders_enabled:
            return False
        value = reminder.strip()
        if value:
            try:
                datetime.fromisoformat(value)
            except ValueError:
                return False
        self.buffer.reminder = value
        return True

    # ---- steps ----

    def add_step(self, title: str = "") -> SubTask:
        step = SubTask(id=new_id(), title=title, is_completed=False)
        self.buffer.sub_tasks.append(step)
        return step

    def remove_step(self, step_id: str) -> bool:
        before = len(self.buffer.sub_tasks)
        self.buffer.sub_tasks = [st for st in self.buffer.sub_tasks if st.id != step_id]
        return len(self.buffer.sub_tasks) != before

    def rename_step(self, step_id: str, title: str) -> bool:
        for i, st in enumerate(self.buffer.sub_tasks):
            if st.id == step_id:
                self.buffer.sub_tasks[i] = SubTask(id=st.id, title=title, is_completed=st.is_completed)
                return True
        return False

    # ---- AI ----

    async def suggest(self) -> int:
        """
        Append generated steps to the buffer. Returns how many were added.

        SuggestionFailed never escapes: it becomes a notice and the buffer stays as is.
        """
        if not self.features.ai_suggestions_enabled or self._suggestions is None:
            return 0
        title = self.buffer.title.strip()
        if not title:
            self._notify("Enter a task title first.")
            return 0
        if self.suggesting:
            return 0

        self.suggesting = True
        try:
            steps = await self._suggestions.suggest(title)
        except SuggestionFailed as e:
            logger.info("Sub-step suggestion failed: %s", e)
            if not self._closed:
                self._notify(str(e) or "Could not generate sub-steps.")
            return 0
        finally:
            self.suggesting = False

        if self._closed:
            logger.debug("Suggestion result ignored: edit session already closed.")
            return 0

        for step in steps:
            self.add_step(step.title)
        if steps:
            self._haptic("success")
        logger.debug("Merged %d suggested steps into edit buffer.", len(steps))
        return len(steps)

    # ---- lifecycle ----

    def commit(self) -> Task | None:
        """Save into the store and close. None (session stays open) for a blank title."""
        if self._closed or not self.can_save:
            return None

        b = self.buffer
        steps = [st for st in b.sub_tasks if st.title.strip()]
        reminder = b.reminder or None
        description = b.description

        saved: Task | None
        if self.editing_id is not None:
            updated = self._store.update(
                self.editing_id,
                b.title,
                description,
                b.priority,
                reminder,
                steps,
            )
            saved = self._store.get(self.editing_id) if updated else None
            if saved is None:
                # Deleted while the editor was open; the caller reports it.
                logger.info("Edit target %s no longer exists; nothing saved.", self.editing_id)
            else:
                self._haptic("success")
                self._notify("Task saved" if self.features.toast_on_every_save else "Task updated")
        else:
            saved = self._store.create(b.title, description, b.priority, reminder, steps)
            self._haptic("success")
            if self.features.toast_on_every_save:
                self._notify("Task saved")
            elif reminder:
                self._notify("Reminder set")

        self.close()
        return saved

    def close(self) -> None:
        self._closed = True
        self.modal.close()

    cancel = close
