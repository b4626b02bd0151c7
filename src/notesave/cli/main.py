# src/notesave/cli/main.py

"""
CLI entrypoint.

Initializes logging, connects to the host (Matrix, when enabled), builds
AppState, then runs connectors on one event loop:
- console REPL (optional),
- Matrix sync loop (optional).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..bridge.matrix import MatrixHostBridge
from ..cli.bootstrap import create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.ports import HostBridge
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _connect_matrix(settings):
    """Log in, do the initial sync and build the host bridge. None on failure."""
    from ..connectors.matrix_client import create_matrix_client

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; continuing without Matrix.")
        return None, None

    try:
        logger.info("Matrix initial sync...")
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix initial sync done. Joined rooms: %d", len(client.rooms))
    except Exception:
        logger.exception("Matrix initial sync failed; continuing without Matrix.")
        await client.close()
        return None, None

    bridge = MatrixHostBridge(
        client,
        storage_room_id=settings.matrix_storage_room,
        platform_version=settings.host_version,
    )
    await bridge.refresh_identity()
    return client, bridge


async def run(settings=None) -> None:
    settings = settings or get_settings()
    logger.info("Starting %s...", getattr(settings, "app_name", "notesave"))

    client = None
    bridge: HostBridge | None = None
    if settings.matrix_enabled:
        client, bridge = await _connect_matrix(settings)

    state = await create_initial_state(settings=settings, bridge=bridge)

    stop_event = asyncio.Event()
    if not settings.console_enabled:
        # With the console on, Ctrl+C interrupts the REPL instead.
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, stop_event.set)

    runners: list[asyncio.Task] = []
    if client is not None:
        from ..connectors.matrix_connector import run_matrix_connector

        runners.append(asyncio.create_task(run_matrix_connector(state, client, stop_event)))

    try:
        if settings.console_enabled:
            await run_console_loop(state, stop_event)
            stop_event.set()
        else:
            logger.info("Console disabled. Running background connectors only. Press Ctrl+C to stop.")
            await stop_event.wait()
    finally:
        stop_event.set()
        for r in runners:
            r.cancel()
        await asyncio.gather(*runners, return_exceptions=True)

        await shutdown(state)
        if client is not None:
            with contextlib.suppress(Exception):
                await client.close()
        logger.info("Bye.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=getattr(settings, "data_dir", ".local/notesave"), console_level=console_level)
    logger.debug("Full log: %s", log_file)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")


if __name__ == "__main__":
    main()
