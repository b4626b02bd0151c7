# src/notesave/storage/backends.py

"""
Local key-value backends.

LocalFileBackend is the fallback used when the host offers no remote storage:
one JSON object on disk mapping key -> string value (the localStorage analogue).
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


def _atomic_write_json(path: Path, data: dict[str, str]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(Exception):
        # Best-effort: task notes are personal, keep the file private on disk.
        os.chmod(path, 0o600)


class LocalFileBackend:
    """
    JSON-file key-value store.

    The file is read once (lazily) into memory; every set rewrites the whole file
    atomically from a copy of the in-memory map. Disk I/O runs in a worker thread
    so the event loop is never blocked.
    """

    name = "local"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None
        self._io_lock = threading.Lock()

    def _read_file(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            # Start empty; the next set_item rewrites the file.
            logger.warning("Local storage %s is unreadable (%r); starting empty.", self._path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Local storage %s is not a JSON object; ignoring its content.", self._path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write_file(self, data: dict[str, str]) -> None:
        with self._io_lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write_json(self._path, data)

    async def _ensure_loaded(self) -> dict[str, str]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read_file)
            logger.debug("Local storage loaded path=%s keys=%d", self._path, len(self._data))
        return self._data

    async def get_item(self, key: str) -> str | None:
        data = await self._ensure_loaded()
        return data.get(key)

    async def set_item(self, key: str, value: str) -> bool:
        data = await self._ensure_loaded()
        data[key] = value
        await asyncio.to_thread(self._write_file, dict(data))
        return True


class MemoryBackend:
    """Dict-backed backend: no persistence across runs."""

    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True
