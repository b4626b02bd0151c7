# src/notesave/storage/adapter.py

"""
Storage adapter.

Uniform best-effort get/set over one backend chosen at startup:
- get: missing key and backend error both collapse into None
- set: failure is a False return, never an exception

Writes are issued immediately and independently (no queue, no debounce).
With ordered_writes=True, writes for the same key are serialized and a write
that has been overtaken by a newer one for the same key is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from ..core.ports import HostBridge, KeyValueBackend

logger = logging.getLogger(__name__)


class StorageAdapter:
    def __init__(self, backend: KeyValueBackend, *, ordered_writes: bool = False) -> None:
        self._backend = backend
        self._ordered = ordered_writes
        self._issued: dict[str, int] = defaultdict(int)
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def backend_name(self) -> str:
        return str(getattr(self._backend, "name", type(self._backend).__name__))

    async def get(self, key: str) -> str | None:
        try:
            return await self._backend.get_item(key)
        except Exception:
            logger.exception("Storage get failed backend=%s key=%s", self.backend_name, key)
            return None

    async def set(self, key: str, value: str) -> bool:
        if not self._ordered:
            return await self._write(key, value)

        self._issued[key] += 1
        seq = self._issued[key]
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            if seq < self._issued[key]:
                logger.debug("Storage write superseded key=%s seq=%d latest=%d", key, seq, self._issued[key])
                return True
            return await self._write(key, value)

    async def _write(self, key: str, value: str) -> bool:
        try:
            ok = bool(await self._backend.set_item(key, value))
        except Exception:
            logger.exception("Storage set failed backend=%s key=%s", self.backend_name, key)
            return False
        if not ok:
            logger.warning("Storage set returned failure backend=%s key=%s size=%d", self.backend_name, key, len(value))
        return ok


def select_backend(
    bridge: HostBridge | None,
    local: KeyValueBackend,
    *,
    min_version: str,
    preference: str = "auto",
) -> KeyValueBackend:
    """
    Capability check: use the host's remote store when it exists and the host
    version is recent enough, else the local backend.

    preference="local" forces local; "remote" only logs louder when it cannot be honoured.
    """
    if preference == "local":
        logger.info("Storage backend forced to local (%s).", getattr(local, "name", "local"))
        return local

    remote: KeyValueBackend | None = None
    if bridge is not None:
        try:
            if bridge.is_version_at_least(min_version):
                remote = bridge.remote_storage()
            else:
                logger.info(
                    "Host version %s < %s: remote storage not supported.",
                    getattr(bridge, "platform_version", "?"),
                    min_version,
                )
        except Exception:
            logger.exception("Host capability check failed; using local storage.")
            remote = None

    if remote is not None:
        logger.info("Storage backend: %s (remote).", getattr(remote, "name", "remote"))
        return remote

    if preference == "remote":
        logger.warning("Remote storage requested but unavailable; falling back to local.")
    else:
        logger.info("Storage backend: %s (local fallback).", getattr(local, "name", "local"))
    return local
