# src/notesave/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import dispatch, render_list
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _run_line(state: AppState, line: str) -> None:
    reply = await dispatch(state, line, emit=_print_ts)
    if reply is not None:
        _print_ts(reply)


async def run_console_loop(state: AppState, stop_event: asyncio.Event | None = None) -> None:
    """
    Interactive REPL on stdin.

    input() runs in a worker thread so the event loop keeps serving Matrix and
    pending writes. Each command runs as its own task: a slow /suggest does not
    block /cancel typed after it.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")
    _print_ts(render_list(state))

    running: set[asyncio.Task] = set()

    while stop_event is None or not stop_event.is_set():
        try:
            line = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            _print_ts("Commands start with '/'. Try /add <title> or /help.")
            continue

        task = asyncio.create_task(_run_line(state, line))
        running.add(task)
        task.add_done_callback(running.discard)

    if running:
        await asyncio.gather(*running, return_exceptions=True)
    logger.info("Console connector finished.")
