# src/notesave/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures local (gitignored) directories exist,
- selects the storage backend once (host capability check),
- wires concrete implementations into AppState (storage/tasks/suggestions/UI),
- loads the task snapshot and the theme preference concurrently.
"""

from __future__ import annotations

import asyncio
import logging

from ..bridge.local import LocalHostBridge
from ..config import get_settings
from ..core.actions import apply_theme
from ..core.models import Theme
from ..core.ports import HostBridge, KeyValueBackend, SuggestionProvider
from ..core.state import AppState
from ..llm.client import OpenRouterSuggestionClient, friendly_suggestion_error_message
from ..llm.offline import OfflineSuggestionClient
from ..storage.adapter import StorageAdapter, select_backend
from ..storage.backends import LocalFileBackend, MemoryBackend
from ..tasks.task_store import TaskStore
from ..ui.alert import AlertController
from ..ui.editor import EditFeatures
from ..ui.modal import ModalState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.local_storage_path.parent.mkdir(parents=True, exist_ok=True)


def build_suggestion_provider(settings) -> SuggestionProvider | None:
    if not getattr(settings, "ai_suggestions_enabled", True):
        return None
    try:
        return OpenRouterSuggestionClient(settings)
    except Exception as e:
        # Fallback for local runs without external services.
        reason = friendly_suggestion_error_message(e)
        logger.info("AI suggestions offline: %s", reason)
        return OfflineSuggestionClient(reason)


async def create_initial_state(
    *,
    settings=None,
    bridge: HostBridge | None = None,
    local_backend: KeyValueBackend | None = None,
    suggestions: SuggestionProvider | None = None,
) -> AppState:
    """
    Build AppState and load persisted data.

    Everything is injectable for tests; missing pieces come from settings.
    Startup waits for both reads (tasks + theme) before returning.
    """
    if settings is None:
        settings = get_settings()
    if bridge is None:
        bridge = LocalHostBridge()
    preference = str(getattr(settings, "storage_backend", "auto"))
    if local_backend is None:
        if preference == "memory":
            local_backend = MemoryBackend()
        else:
            _ensure_local_dirs(settings)
            local_backend = LocalFileBackend(settings.local_storage_path)
    if suggestions is None:
        suggestions = build_suggestion_provider(settings)

    backend = select_backend(
        bridge,
        local_backend,
        min_version=str(getattr(settings, "remote_storage_min_version", "6.9")),
        preference="local" if preference == "memory" else preference,
    )
    storage = StorageAdapter(backend, ordered_writes=bool(getattr(settings, "ordered_writes", False)))

    tasks_key = str(getattr(settings, "tasks_key", "notesave_db_v1"))
    theme_key = str(getattr(settings, "theme_key", "notesave_theme_pref"))

    task_store, raw_theme = await asyncio.gather(
        TaskStore.load(storage, key=tasks_key),
        storage.get(theme_key),
    )

    animation = float(getattr(settings, "modal_animation_seconds", 0.0))
    state = AppState(
        settings=settings,
        bridge=bridge,
        storage=storage,
        task_store=task_store,
        suggestions=suggestions,
        features=EditFeatures.from_settings(settings),
        alert=AlertController(animation_seconds=animation),
        settings_modal=ModalState("settings", animation_seconds=animation),
    )
    # Applied, not persisted: the stored value is already the source.
    apply_theme(state, Theme.from_raw(raw_theme))

    logger.info(
        "State ready: backend=%s tasks=%d theme=%s",
        storage.backend_name,
        len(task_store.tasks),
        state.theme.value,
    )
    return state


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown: let outstanding snapshot writes land."""
    try:
        await state.task_store.flush()
    except Exception:
        logger.exception("Failed to flush pending task writes.")
