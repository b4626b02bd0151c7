# tests/test_commands.py

from __future__ import annotations

import pytest

from notesave.cli.commands import CommandRegistry, dispatch
from notesave.core.models import FilterMode, PriorityLevel, Theme


@pytest.mark.asyncio
async def test_command_registry_routes_4_and_5_params(state) -> None:
    reg = CommandRegistry()
    called = {"h4": 0, "h5": 0}

    def h4(state, args, user_id, room_id):
        called["h4"] += 1
        return "h4"

    async def h5(state, args, user_id, room_id, emit):
        called["h5"] += 1
        if emit is not None:
            emit("note")
        return "h5"

    reg.register("a", h4, "a")
    reg.register("b", h5, "b")

    assert await reg.handle(state, "/a x", user_id="u", room_id="r") == "h4"
    assert await reg.handle(state, "/b y", user_id="u", room_id="r", emit=lambda _: None) == "h5"
    assert called["h4"] == 1
    assert called["h5"] == 1


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_add_and_list(state, bridge) -> None:
    reply = await dispatch(state, "/add Buy milk")
    assert reply == "Added: Buy milk"

    listing = await dispatch(state, "/list")
    assert "Alice" in listing
    assert "1 left" in listing
    assert "1. [ ] Buy milk" in listing


@pytest.mark.asyncio
async def test_done_moves_task_between_filters(state) -> None:
    await dispatch(state, "/add A")
    await dispatch(state, "/done 1")

    assert state.task_store.tasks[0].is_completed
    assert "No active tasks." in await dispatch(state, "/list")
    assert "1. [x] A" in await dispatch(state, "/filter completed")
    assert state.filter_mode is FilterMode.COMPLETED


@pytest.mark.asyncio
async def test_editor_flow_with_steps_and_suggestions(state) -> None:
    await dispatch(state, "/new Trip")
    await dispatch(state, "/priority high")
    await dispatch(state, "/step add Pack bags")
    reply = await dispatch(state, "/suggest")
    assert "Added 3 step(s)." in reply

    await dispatch(state, "/step rm 1")
    saved = await dispatch(state, "/save")
    assert saved.startswith("Saved: Trip")

    (task,) = state.task_store.tasks
    assert task.priority is PriorityLevel.HIGH
    assert [s.title for s in task.sub_tasks] == ["Step one", "Step two", "Step three"]
    assert state.editor is None


@pytest.mark.asyncio
async def test_save_without_title_is_refused(state) -> None:
    await dispatch(state, "/new")
    assert await dispatch(state, "/save") == "Title is required."
    assert state.task_store.tasks == ()
    assert await dispatch(state, "/cancel") == "Edit cancelled."
    assert "No task is being edited" in await dispatch(state, "/save")


@pytest.mark.asyncio
async def test_edit_existing_task_reports_update_notice(state) -> None:
    await dispatch(state, "/add Old")
    await dispatch(state, "/edit 1")
    await dispatch(state, "/title New name")
    reply = await dispatch(state, "/save")

    assert reply.startswith("* Task updated")
    assert state.task_store.tasks[0].title == "New name"


@pytest.mark.asyncio
async def test_check_toggles_a_step(state) -> None:
    await dispatch(state, "/new A")
    await dispatch(state, "/step add one")
    await dispatch(state, "/save")

    reply = await dispatch(state, "/check 1 1")
    assert "[x] one" in reply
    assert "No step 5" in await dispatch(state, "/check 1 5")


@pytest.mark.asyncio
async def test_delete_goes_through_confirmation(state) -> None:
    await dispatch(state, "/add A")

    prompt = await dispatch(state, "/del 1")
    assert "Delete task?" in prompt
    assert "/press 2 - Delete" in prompt

    await dispatch(state, "/press 2")
    assert state.task_store.tasks == ()
    assert await dispatch(state, "/press 1") == "Nothing to confirm."


@pytest.mark.asyncio
async def test_clear_and_dismiss(state) -> None:
    await dispatch(state, "/add A")
    await dispatch(state, "/clear")
    assert await dispatch(state, "/dismiss") == "Dismissed."
    assert len(state.task_store.tasks) == 1

    await dispatch(state, "/clear")
    reply = await dispatch(state, "/press 2")
    assert reply.startswith("* All tasks deleted")
    assert state.task_store.tasks == ()


@pytest.mark.asyncio
async def test_theme_and_status(state, backend) -> None:
    assert await dispatch(state, "/theme dark") == "Theme: dark."
    assert state.theme is Theme.DARK
    assert await dispatch(state, "/theme sepia") == "Usage: /theme light|dark"

    status = await dispatch(state, "/status")
    assert "Storage: fake" in status
    assert "Theme: dark" in status


@pytest.mark.asyncio
async def test_unknown_task_reference(state) -> None:
    assert await dispatch(state, "/done 3") == "No task 3."
    assert await dispatch(state, "/edit zz") == "No task zz."


@pytest.mark.asyncio
async def test_handler_crash_is_reported(state, monkeypatch) -> None:
    from notesave.cli import commands

    def boom(*_args):
        raise RuntimeError("boom")

    monkeypatch.setitem(commands.registry._handlers, "status", boom)
    assert await dispatch(state, "/status") == "Internal error while handling a command."


@pytest.mark.asyncio
async def test_saving_an_edit_of_a_deleted_task_reports_only_that(state, bridge) -> None:
    await dispatch(state, "/add A")
    await dispatch(state, "/edit 1")
    state.task_store.delete(state.task_store.tasks[0].id)
    bridge.haptics.clear()

    reply = await dispatch(state, "/save")

    assert reply == "Task no longer exists."
    assert state.editor is None
    assert state.task_store.tasks == ()
    assert bridge.haptics == []
