# src/notesave/core/actions.py

"""
User actions.

Each function is one user gesture of the app: it mutates the task store or the
view state on AppState, fires host feedback (haptics, theme) and queues toasts.
Host calls are best-effort and never break an action.
"""

from __future__ import annotations

import asyncio
import logging
import time

from ..tasks.projection import TaskCounts, count_tasks, filter_tasks
from ..ui.alert import AlertButton, AlertDescriptor, ButtonStyle
from ..ui.editor import EditSession
from ..ui.modal import ModalState
from .models import FilterMode, Task, Theme
from .ports import HapticKind
from .state import AppState, Toast

logger = logging.getLogger(__name__)

THEME_COLORS = {Theme.LIGHT: "#F2F2F7", Theme.DARK: "#000000"}

# Keep fire-and-forget tasks referenced until done.
_background: set[asyncio.Task] = set()


def haptic(state: AppState, kind: HapticKind) -> None:
    try:
        state.bridge.haptic(kind)
    except Exception:
        logger.debug("haptic(%s) failed.", kind, exc_info=True)


def notify(state: AppState, text: str) -> None:
    """Show a transient notice (toast)."""
    seconds = float(getattr(state.settings, "toast_seconds", 3.0))
    now = time.monotonic()
    state.prune_toasts(now)
    state.toasts.append(Toast(text=text, expires_at=now + seconds))
    state.pending_notices.append(text)
    logger.info("Toast: %s", text)


def take_notices(state: AppState) -> list[str]:
    out = list(state.pending_notices)
    state.pending_notices.clear()
    return out


# ---- projection ----


def visible_tasks(state: AppState) -> list[Task]:
    return filter_tasks(state.task_store.tasks, state.filter_mode)


def counts(state: AppState) -> TaskCounts:
    return count_tasks(state.task_store.tasks)


def set_filter(state: AppState, mode: FilterMode) -> None:
    haptic(state, "light")
    state.filter_mode = mode


# ---- editing ----


def _new_session(state: AppState, task: Task | None) -> EditSession:
    if state.editor is not None and state.editor.is_active:
        state.editor.close()
    animation = float(getattr(state.settings, "modal_animation_seconds", 0.0))
    session = EditSession(
        state.task_store,
        state.suggestions,
        task=task,
        features=state.features,
        modal=ModalState("editor", animation_seconds=animation),
        notify=lambda text: notify(state, text),
        haptic=lambda kind: haptic(state, kind),
    )
    state.editor = session
    return session


def open_add(state: AppState) -> EditSession:
    haptic(state, "light")
    return _new_session(state, None)


def open_edit(state: AppState, task_id: str) -> EditSession | None:
    task = state.task_store.get(task_id)
    if task is None:
        return None
    haptic(state, "light")
    return _new_session(state, task)


def close_editor(state: AppState) -> None:
    if state.editor is not None:
        state.editor.close()
    state.editor = None


def commit_editor(state: AppState) -> Task | None:
    session = state.editor
    if session is None or not session.is_active:
        return None
    saved = session.commit()
    if not session.is_active:
        state.editor = None
    return saved


# ---- task gestures ----


def toggle_task(state: AppState, task_id: str) -> bool:
    task = state.task_store.get(task_id)
    if task is None:
        return False
    state.task_store.toggle_completed(task_id)
    haptic(state, "light" if task.is_completed else "success")
    return True


def toggle_subtask(state: AppState, task_id: str, subtask_id: str) -> bool:
    haptic(state, "light")
    return state.task_store.toggle_subtask(task_id, subtask_id)


def request_delete(state: AppState, task_id: str) -> None:
    haptic(state, "medium")

    def confirm() -> None:
        state.task_store.delete(task_id)
        haptic(state, "success")
        state.alert.close()

    state.alert.request(
        AlertDescriptor(
            title="Delete task?",
            message="This action cannot be undone.",
            buttons=(
                AlertButton("Cancel", state.alert.close, ButtonStyle.CANCEL),
                AlertButton("Delete", confirm, ButtonStyle.DESTRUCTIVE),
            ),
        )
    )


def request_delete_all(state: AppState) -> None:
    haptic(state, "medium")

    def confirm() -> None:
        state.task_store.delete_all()
        state.settings_modal.close()
        haptic(state, "success")
        notify(state, "All tasks deleted")
        state.alert.close()

    state.alert.request(
        AlertDescriptor(
            title="Delete all tasks?",
            message="This will delete all of your tasks. It cannot be undone.",
            buttons=(
                AlertButton("Cancel", state.alert.close, ButtonStyle.CANCEL),
                AlertButton("Delete all", confirm, ButtonStyle.DESTRUCTIVE),
            ),
        )
    )


# ---- settings / theme ----


def open_settings(state: AppState) -> None:
    haptic(state, "light")
    state.settings_modal.open()


def close_settings(state: AppState) -> None:
    state.settings_modal.close()


def apply_theme(state: AppState, theme: Theme) -> None:
    state.theme = theme
    try:
        state.bridge.apply_theme(theme, THEME_COLORS[theme])
    except Exception:
        logger.debug("apply_theme(%s) failed.", theme.value, exc_info=True)


def set_theme(state: AppState, theme: Theme) -> None:
    """Apply and persist the theme preference (fire-and-forget write)."""
    apply_theme(state, theme)
    key = str(getattr(state.settings, "theme_key", "notesave_theme_pref"))
    fut = asyncio.get_running_loop().create_task(state.storage.set(key, theme.value))
    _background.add(fut)
    fut.add_done_callback(_background.discard)
