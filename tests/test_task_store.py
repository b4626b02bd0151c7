# tests/test_task_store.py

from __future__ import annotations

import json

import pytest

from notesave.storage.adapter import StorageAdapter
from notesave.tasks.task_store import TaskStore

from .fakes import FakeBackend

KEY = "notesave_db_v1"


def _saved(backend: FakeBackend) -> list[dict]:
    return json.loads(backend.data[KEY])


@pytest.mark.asyncio
async def test_every_mutation_writes_full_snapshot() -> None:
    backend = FakeBackend()
    store = TaskStore(StorageAdapter(backend))

    a = store.create("A")
    b = store.create("B")
    assert a is not None and b is not None
    assert store.toggle_completed(a.id)
    await store.flush()

    assert [t["title"] for t in _saved(backend)] == ["B", "A"]
    assert _saved(backend)[1]["isCompleted"] is True
    assert store.writes_issued == 3
    assert store.last_write_ok is True


@pytest.mark.asyncio
async def test_noop_mutations_do_not_write() -> None:
    backend = FakeBackend()
    store = TaskStore(StorageAdapter(backend))

    assert store.create("   ") is None
    assert store.toggle_completed("missing") is False
    assert store.delete("missing") is False
    await store.flush()

    assert backend.set_calls == []
    assert store.tasks == ()


@pytest.mark.asyncio
async def test_blank_title_update_is_rejected_without_writing() -> None:
    backend = FakeBackend()
    store = TaskStore(StorageAdapter(backend))
    task = store.create("A")
    assert task is not None
    await store.flush()
    before = store.tasks
    calls = len(backend.set_calls)

    assert store.update(task.id, "   ", "changed") is False
    await store.flush()

    assert store.tasks == before
    assert len(backend.set_calls) == calls
    assert [t["title"] for t in _saved(backend)] == ["A"]


@pytest.mark.asyncio
async def test_delete_all_always_writes_empty_array() -> None:
    backend = FakeBackend()
    store = TaskStore(StorageAdapter(backend))

    store.delete_all()
    await store.flush()
    assert backend.data[KEY] == "[]"

    store.create("A")
    store.delete_all()
    await store.flush()
    assert backend.data[KEY] == "[]"
    assert store.tasks == ()


@pytest.mark.asyncio
async def test_failed_write_keeps_memory_state() -> None:
    backend = FakeBackend()
    backend.fail_set = True
    store = TaskStore(StorageAdapter(backend))

    task = store.create("Kept in memory")
    await store.flush()

    assert store.tasks == (task,)
    assert store.last_write_ok is False
    assert KEY not in backend.data


@pytest.mark.asyncio
async def test_raising_backend_never_breaks_the_mutation() -> None:
    backend = FakeBackend()
    backend.raise_set = True
    store = TaskStore(StorageAdapter(backend))

    store.create("A")
    await store.flush()

    assert len(store.tasks) == 1
    assert store.last_write_ok is False


@pytest.mark.asyncio
async def test_load_cold_start_and_existing_snapshot() -> None:
    empty = await TaskStore.load(StorageAdapter(FakeBackend()), key=KEY)
    assert empty.tasks == ()

    raw = json.dumps([{"id": "x", "title": "Saved", "isCompleted": False, "createdAt": 1, "subTasks": []}])
    store = await TaskStore.load(StorageAdapter(FakeBackend({KEY: raw})), key=KEY)
    assert [t.title for t in store.tasks] == ["Saved"]


@pytest.mark.asyncio
async def test_load_survives_corrupt_data_and_read_errors() -> None:
    corrupt = await TaskStore.load(StorageAdapter(FakeBackend({KEY: "]]"})), key=KEY)
    assert corrupt.tasks == ()

    backend = FakeBackend({KEY: "[]"})
    backend.raise_get = True
    broken = await TaskStore.load(StorageAdapter(backend), key=KEY)
    assert broken.tasks == ()


@pytest.mark.asyncio
async def test_reload_after_writes_matches_memory() -> None:
    backend = FakeBackend()
    store = TaskStore(StorageAdapter(backend))
    a = store.create("A", description="d", reminder_time="2025-01-01T10:00")
    assert a is not None
    store.update(a.id, "A2", "d2")
    await store.flush()

    reloaded = await TaskStore.load(StorageAdapter(backend), key=KEY)
    assert reloaded.tasks == store.tasks
