# tests/test_bootstrap.py

from __future__ import annotations

import json

import pytest

from notesave.cli.bootstrap import build_suggestion_provider, create_initial_state, shutdown
from notesave.core.models import FilterMode, Theme
from notesave.llm.client import OpenRouterSuggestionClient
from notesave.llm.offline import OfflineSuggestionClient

from .fakes import FakeBackend, FakeBridge, FakeSuggestionProvider

_SNAPSHOT = json.dumps([{"id": "t1", "title": "Saved", "isCompleted": False, "createdAt": 1, "subTasks": []}])


@pytest.mark.asyncio
async def test_startup_loads_tasks_and_theme_from_remote(settings) -> None:
    remote = FakeBackend({"notesave_db_v1": _SNAPSHOT, "notesave_theme_pref": "dark"})
    local = FakeBackend()
    bridge = FakeBridge(platform_version="7.0", remote=remote)

    state = await create_initial_state(
        settings=settings, bridge=bridge, local_backend=local, suggestions=FakeSuggestionProvider()
    )

    assert [t.title for t in state.task_store.tasks] == ["Saved"]
    assert state.theme is Theme.DARK
    assert bridge.themes == [(Theme.DARK, "#000000")]
    assert state.filter_mode is FilterMode.ACTIVE
    assert sorted(remote.get_calls) == ["notesave_db_v1", "notesave_theme_pref"]
    assert local.get_calls == []
    # Applying the stored theme is not a new write.
    assert remote.set_calls == []


@pytest.mark.asyncio
async def test_old_host_uses_local_storage(settings) -> None:
    remote = FakeBackend({"notesave_theme_pref": "dark"})
    local = FakeBackend()
    bridge = FakeBridge(platform_version="6.8", remote=remote)

    state = await create_initial_state(settings=settings, bridge=bridge, local_backend=local, suggestions=None)

    assert state.storage.backend_name == "fake"
    assert remote.get_calls == []
    assert state.theme is Theme.LIGHT
    assert state.task_store.tasks == ()


@pytest.mark.asyncio
async def test_default_wiring_persists_to_local_file(settings) -> None:
    state = await create_initial_state(settings=settings, suggestions=None)
    state.task_store.create("On disk")
    await shutdown(state)

    data = json.loads(settings.local_storage_path.read_text("utf-8"))
    assert json.loads(data["notesave_db_v1"])[0]["title"] == "On disk"


def test_suggestion_provider_selection(settings) -> None:
    assert isinstance(build_suggestion_provider(settings), OpenRouterSuggestionClient)

    settings.openrouter_api_key = ""
    offline = build_suggestion_provider(settings)
    assert isinstance(offline, OfflineSuggestionClient)
    assert "missing API key" in offline.reason

    settings.ai_suggestions_enabled = False
    assert build_suggestion_provider(settings) is None


@pytest.mark.asyncio
async def test_memory_mode_writes_nothing_to_disk(settings) -> None:
    settings.storage_backend = "memory"
    state = await create_initial_state(settings=settings, bridge=FakeBridge(remote=FakeBackend()), suggestions=None)
    state.task_store.create("Ephemeral")
    await shutdown(state)

    assert state.storage.backend_name == "memory"
    assert not settings.local_storage_path.exists()
