# src/notesave/core/state.py

from __future__ import annotations

import time
from dataclasses import dataclass, field

from ..storage.adapter import StorageAdapter
from ..tasks.task_store import TaskStore
from ..ui.alert import AlertController
from ..ui.editor import EditFeatures, EditSession
from ..ui.modal import ModalState
from .models import FilterMode, Theme
from .ports import HostBridge, SuggestionProvider


@dataclass(slots=True)
class Toast:
    text: str
    expires_at: float  # monotonic


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: object

    bridge: HostBridge
    storage: StorageAdapter
    task_store: TaskStore
    suggestions: SuggestionProvider | None
    features: EditFeatures
    alert: AlertController
    settings_modal: ModalState

    theme: Theme = Theme.LIGHT
    filter_mode: FilterMode = FilterMode.ACTIVE
    editor: EditSession | None = None
    toasts: list[Toast] = field(default_factory=list)
    pending_notices: list[str] = field(default_factory=list)

    def prune_toasts(self, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        self.toasts = [t for t in self.toasts if t.expires_at > now]

    def current_toast(self, now: float | None = None) -> str | None:
        """Newest toast that has not expired yet."""
        self.prune_toasts(now)
        return self.toasts[-1].text if self.toasts else None
