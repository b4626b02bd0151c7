# src/notesave/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the host platform, storage backends and the LLM provider swappable
and makes testing easier.
"""

from typing import Literal, Protocol

from .models import HostUser, SuggestedStep, Theme

HapticKind = Literal["light", "medium", "success"]


class KeyValueBackend(Protocol):
    """
    Raw async key-value store.

    Backends may raise; the StorageAdapter turns every failure into
    "no value" (get) or False (set).
    """

    name: str

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> bool: ...


class KeyValueStorage(Protocol):
    """Best-effort storage contract seen by the task store: never raises."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> bool: ...


class HostBridge(Protocol):
    """
    Host platform capabilities.

    Every method is an optional side effect: implementations must be cheap and
    callers must never let a bridge failure break the primary operation.
    """

    platform_version: str

    def is_version_at_least(self, version: str) -> bool: ...

    def user(self) -> HostUser | None: ...

    def haptic(self, kind: HapticKind) -> None: ...

    def apply_theme(self, theme: Theme, color: str) -> None: ...

    def remote_storage(self) -> KeyValueBackend | None: ...


class SuggestionProvider(Protocol):
    """Produces candidate sub-step titles for a task title."""

    async def suggest(self, task_title: str) -> list[SuggestedStep]: ...
