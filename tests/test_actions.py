# tests/test_actions.py

from __future__ import annotations

import asyncio

import pytest

from notesave.core import actions
from notesave.core.models import FilterMode, Theme


@pytest.mark.asyncio
async def test_toggle_haptics_depend_on_previous_state(state, bridge) -> None:
    task = state.task_store.create("A")
    assert task is not None

    assert actions.toggle_task(state, task.id)
    assert actions.toggle_task(state, task.id)
    assert bridge.haptics == ["success", "light"]
    assert actions.toggle_task(state, "missing") is False


@pytest.mark.asyncio
async def test_delete_requires_confirmation(state, bridge) -> None:
    task = state.task_store.create("A")
    assert task is not None

    actions.request_delete(state, task.id)
    assert state.alert.is_open
    assert state.task_store.get(task.id) is not None

    # Cancel
    assert state.alert.press(0)
    assert not state.alert.is_open
    assert state.task_store.get(task.id) is not None

    actions.request_delete(state, task.id)
    assert state.alert.press(1)
    assert state.task_store.tasks == ()
    assert not state.alert.is_open
    assert bridge.haptics[-1] == "success"


@pytest.mark.asyncio
async def test_delete_all_confirm_closes_settings_and_persists(state, backend) -> None:
    state.task_store.create("A")
    state.task_store.create("B")
    actions.open_settings(state)

    actions.request_delete_all(state)
    state.alert.press(1)
    await state.task_store.flush()

    assert state.task_store.tasks == ()
    assert backend.data["notesave_db_v1"] == "[]"
    assert not state.settings_modal.is_open
    assert actions.take_notices(state) == ["All tasks deleted"]
    assert state.current_toast() == "All tasks deleted"


@pytest.mark.asyncio
async def test_dismiss_runs_no_action(state) -> None:
    state.task_store.create("A")
    actions.request_delete_all(state)
    state.alert.dismiss()

    assert len(state.task_store.tasks) == 1


@pytest.mark.asyncio
async def test_set_theme_applies_and_persists(state, bridge, backend) -> None:
    actions.set_theme(state, Theme.DARK)
    await asyncio.sleep(0.01)

    assert state.theme is Theme.DARK
    assert bridge.themes == [(Theme.DARK, "#000000")]
    assert backend.data["notesave_theme_pref"] == "dark"


@pytest.mark.asyncio
async def test_bridge_failures_never_break_actions(state, bridge) -> None:
    bridge.fail_effects = True
    task = state.task_store.create("A")
    assert task is not None

    assert actions.toggle_task(state, task.id)
    actions.set_filter(state, FilterMode.COMPLETED)
    actions.apply_theme(state, Theme.DARK)

    assert state.task_store.get(task.id).is_completed
    assert state.filter_mode is FilterMode.COMPLETED
    assert state.theme is Theme.DARK


@pytest.mark.asyncio
async def test_open_edit_replaces_running_session(state) -> None:
    task = state.task_store.create("A")
    assert task is not None

    first = actions.open_add(state)
    second = actions.open_edit(state, task.id)

    assert not first.is_active
    assert second is state.editor
    assert actions.open_edit(state, "missing") is None


def test_visible_tasks_follow_filter(state) -> None:
    assert state.filter_mode is FilterMode.ACTIVE
    assert actions.visible_tasks(state) == []
    assert actions.counts(state).total == 0


def test_expired_toasts_are_dropped_on_notify(state) -> None:
    state.settings.toast_seconds = 0

    for i in range(500):
        actions.notify(state, f"Toast {i}")

    assert len(state.toasts) <= 1
    assert len(state.pending_notices) == 500


def test_current_toast_prunes_expired_entries(state) -> None:
    actions.notify(state, "old")
    actions.notify(state, "new")
    last = state.toasts[-1].expires_at

    assert state.current_toast(now=last - 0.001) == "new"
    assert state.current_toast(now=last) is None
    assert state.toasts == []
