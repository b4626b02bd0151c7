# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from notesave.core.state import AppState
from notesave.llm import client as llm_client
from notesave.storage.adapter import StorageAdapter
from notesave.tasks.task_store import TaskStore
from notesave.ui.alert import AlertController
from notesave.ui.editor import EditFeatures
from notesave.ui.modal import ModalState

from .fakes import FakeBackend, FakeBridge, FakeSuggestionProvider


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    A SimpleNamespace instead of the real config keeps tests independent of
    the environment and .env files.
    """
    return SimpleNamespace(
        app_name="notesave",
        data_dir=tmp_path,
        local_storage_path=tmp_path / "local_storage.json",
        tasks_key="notesave_db_v1",
        theme_key="notesave_theme_pref",
        storage_backend="auto",
        remote_storage_min_version="6.9",
        ordered_writes=False,
        # Features
        reminders_enabled=True,
        ai_suggestions_enabled=True,
        toast_on_every_save=False,
        # UI timing: no animations in tests
        modal_animation_seconds=0.0,
        toast_seconds=3.0,
        # LLM
        suggestion_language="English",
        llm_models=["model-a", "model-b"],
        openrouter_api_key="test-key",
        openrouter_base_url="https://example.invalid/api/v1",
        extra_headers={},
        matrix_rooms=[],
    )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture()
def suggestions() -> FakeSuggestionProvider:
    return FakeSuggestionProvider(["Step one", "Step two", "Step three"])


@pytest.fixture()
def state(settings, backend, bridge, suggestions) -> AppState:
    """AppState wired with fakes and an empty task list (no startup load)."""
    storage = StorageAdapter(backend)
    return AppState(
        settings=settings,
        bridge=bridge,
        storage=storage,
        task_store=TaskStore(storage, key=settings.tasks_key),
        suggestions=suggestions,
        features=EditFeatures.from_settings(settings),
        alert=AlertController(),
        settings_modal=ModalState("settings"),
    )


@pytest.fixture(autouse=True)
def _reset_bad_models():
    llm_client._BAD_MODELS.clear()
    yield
    llm_client._BAD_MODELS.clear()
