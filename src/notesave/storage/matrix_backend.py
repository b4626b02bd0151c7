# src/notesave/storage/matrix_backend.py

from __future__ import annotations

import logging

from nio import AsyncClient, RoomGetStateEventResponse, RoomPutStateResponse

logger = logging.getLogger(__name__)

KV_EVENT_TYPE = "org.notesave.kv"


class MatrixRoomStateBackend:
    """
    Remote key-value store on top of Matrix room state.

    Each key is one state event (type org.notesave.kv, state_key = key) in a
    private room; the value lives in content["value"]. The homeserver keeps only
    the latest event per (type, state_key), which gives last-write-wins per key.
    """

    name = "matrix"

    def __init__(self, client: AsyncClient, room_id: str) -> None:
        self._client = client
        self._room_id = room_id

    async def get_item(self, key: str) -> str | None:
        resp = await self._client.room_get_state_event(self._room_id, KV_EVENT_TYPE, state_key=key)
        if not isinstance(resp, RoomGetStateEventResponse):
            # M_NOT_FOUND for a never-written key lands here as well.
            logger.debug("Matrix state read failed key=%s: %r", key, resp)
            return None
        value = (resp.content or {}).get("value")
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> bool:
        resp = await self._client.room_put_state(
            self._room_id,
            KV_EVENT_TYPE,
            {"value": value},
            state_key=key,
        )
        if isinstance(resp, RoomPutStateResponse):
            return True
        logger.warning("Matrix state write failed key=%s: %r", key, resp)
        return False
