# src/notesave/connectors/matrix_connector.py

from __future__ import annotations

import asyncio
import logging
import time

from nio import AsyncClient, MatrixRoom, RoomMessageText, exceptions

from ..cli.commands import dispatch
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> set[str] | None:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _send_text(client: AsyncClient, *, room_id: str, text: str) -> None:
    await client.room_send(
        room_id=room_id,
        message_type="m.room.message",
        content={"msgtype": "m.text", "body": text},
        ignore_unverified_devices=True,
    )


def make_message_callback(state: AppState, client: AsyncClient, *, startup_ts: int, allowed_rooms: set[str] | None):
    """
    Build the RoomMessageText callback.

    Messages from before startup, our own replies and rooms outside the
    allowlist are ignored. Commands run as separate tasks so a slow /suggest
    does not stall the sync loop.
    """
    running: set[asyncio.Task] = set()

    async def handle(room_id: str, sender: str, body: str) -> None:
        resp = await dispatch(state, body, user_id=sender, room_id=room_id)
        if not resp:
            return
        try:
            await _send_text(client, room_id=room_id, text=resp)
        except exceptions.OlmUnverifiedDeviceError:
            logger.warning("Cannot send command reply: unverified device.")
        except Exception:
            logger.exception("Failed to send command reply.")

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return

        if event.sender == client.user_id:
            return

        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body.startswith("/"):
            return

        logger.info("Matrix <%s> %s: %r", room.display_name, event.sender, body)
        task = asyncio.create_task(handle(room.room_id, event.sender, body))
        running.add(task)
        task.add_done_callback(running.discard)

    return message_callback


async def run_matrix_connector(state: AppState, client: AsyncClient, stop_event: asyncio.Event) -> None:
    """
    Serve slash commands from Matrix rooms until stop_event is set.

    The caller owns the client (it is also the host bridge) and has already
    done the initial sync; we only attach the callback and keep syncing.
    """
    settings = state.settings
    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client.add_event_callback(
        make_message_callback(state, client, startup_ts=_ms_now(), allowed_rooms=allowed_rooms),
        RoomMessageText,
    )

    logger.info("Matrix sync loop started.")
    try:
        while not stop_event.is_set():
            sync = asyncio.create_task(client.sync(timeout=30000, full_state=False))
            stop = asyncio.create_task(stop_event.wait())
            done, _ = await asyncio.wait({sync, stop}, return_when=asyncio.FIRST_COMPLETED)
            if sync not in done:
                sync.cancel()
            stop.cancel()
            if sync in done and sync.exception() is not None:
                logger.warning("Matrix sync failed: %r", sync.exception())
                await asyncio.sleep(5.0)
    except asyncio.CancelledError:
        logger.info("Matrix connector cancelled.")
        raise
    finally:
        logger.info("Matrix connector stopped.")
