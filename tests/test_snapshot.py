# tests/test_snapshot.py

from __future__ import annotations

import json

from notesave.core.models import PriorityLevel, SubTask, Task, Theme
from notesave.tasks.snapshot import dump_snapshot, parse_snapshot


def _task(**kw) -> Task:
    base = dict(id="t1", title="Buy milk", created_at=1_700_000_000_000)
    base.update(kw)
    return Task(**base)


def test_dump_uses_camel_case_and_omits_absent_optionals() -> None:
    payload = json.loads(dump_snapshot([_task(sub_tasks=(SubTask("s1", "Go to shop"),))]))

    assert payload == [
        {
            "id": "t1",
            "title": "Buy milk",
            "isCompleted": False,
            "createdAt": 1_700_000_000_000,
            "subTasks": [{"id": "s1", "title": "Go to shop", "isCompleted": False}],
            "priority": "medium",
        }
    ]


def test_snapshot_round_trip_keeps_every_field() -> None:
    tasks = (
        _task(
            description="2%",
            priority=PriorityLevel.HIGH,
            reminder_time="2025-05-01T09:30",
            sub_tasks=(SubTask("s1", "a", True), SubTask("s2", "b")),
            is_completed=True,
        ),
        _task(id="t2", title="Молоко"),
    )
    assert parse_snapshot(dump_snapshot(tasks)) == tasks


def test_missing_or_corrupt_snapshot_is_a_cold_start() -> None:
    assert parse_snapshot(None) == ()
    assert parse_snapshot("") == ()
    assert parse_snapshot("{not json") == ()
    assert parse_snapshot('{"id": "t1"}') == ()


def test_loading_is_tolerant_of_bad_entries() -> None:
    raw = json.dumps(
        [
            "junk",
            {"id": "a", "title": "A", "priority": "urgent", "createdAt": "x"},
            {"id": "a", "title": "duplicate"},
            {"title": "no id"},
        ]
    )
    tasks = parse_snapshot(raw)

    assert [t.title for t in tasks] == ["A", "no id"]
    assert tasks[0].priority is PriorityLevel.MEDIUM
    assert tasks[0].created_at == 0
    assert tasks[1].id  # fresh id assigned


def test_only_json_true_marks_completion() -> None:
    raw = json.dumps(
        [
            {
                "id": "a",
                "title": "A",
                "isCompleted": "false",
                "subTasks": [
                    {"id": "s1", "title": "x", "isCompleted": "false"},
                    {"id": "s2", "title": "y", "isCompleted": 1},
                    {"id": "s3", "title": "z", "isCompleted": True},
                ],
            },
            {"id": "b", "title": "B", "isCompleted": "true"},
            {"id": "c", "title": "C", "isCompleted": True},
        ]
    )
    a, b, c = parse_snapshot(raw)

    assert a.is_completed is False
    assert [st.is_completed for st in a.sub_tasks] == [False, False, True]
    assert b.is_completed is False
    assert c.is_completed is True


def test_theme_from_raw_defaults_to_light() -> None:
    assert Theme.from_raw("dark") is Theme.DARK
    assert Theme.from_raw("light") is Theme.LIGHT
    assert Theme.from_raw(None) is Theme.LIGHT
    assert Theme.from_raw("sepia") is Theme.LIGHT
