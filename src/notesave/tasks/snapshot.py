# src/notesave/tasks/snapshot.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from ..core.models import Task

logger = logging.getLogger(__name__)


def dump_snapshot(tasks: Iterable[Task]) -> str:
    """Full-collection snapshot as a JSON array (camelCase field names)."""
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, separators=(",", ":"))


def parse_snapshot(raw: str | None) -> tuple[Task, ...]:
    """
    Parse a stored snapshot.

    Missing, unparsable or non-array data means "no saved data" (cold start).
    Non-object entries are skipped; a repeated id keeps its first occurrence.
    """
    if not raw:
        return ()

    try:
        data: Any = json.loads(raw)
    except ValueError:
        logger.warning("Stored snapshot is not valid JSON; starting empty.")
        return ()

    if not isinstance(data, list):
        logger.warning("Stored snapshot is not a JSON array (%s); starting empty.", type(data).__name__)
        return ()

    out: list[Task] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            task = Task.from_dict(item)
        except Exception:
            logger.exception("Skipping unreadable task entry in snapshot.")
            continue
        if task.id in seen:
            logger.warning("Duplicate task id in snapshot: %s (dropped)", task.id)
            continue
        seen.add(task.id)
        out.append(task)

    return tuple(out)
