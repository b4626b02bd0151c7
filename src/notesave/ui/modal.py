# src/notesave/ui/modal.py

"""
Modal lifecycle.

closed -> opening -> open -> closing -> closed

The transient phases (opening/closing) last `animation_seconds` and are advanced
by an event-loop timer. With a zero duration, or without a running loop, the
transition completes immediately.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


class ModalPhase(StrEnum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


class ModalState:
    def __init__(self, name: str, *, animation_seconds: float = 0.0) -> None:
        self.name = name
        self.animation_seconds = max(0.0, float(animation_seconds))
        self.phase = ModalPhase.CLOSED
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_open(self) -> bool:
        """Logically open (accepting input)."""
        return self.phase in (ModalPhase.OPENING, ModalPhase.OPEN)

    @property
    def is_visible(self) -> bool:
        """On screen, including the closing animation."""
        return self.phase != ModalPhase.CLOSED

    def open(self) -> None:
        if self.is_open:
            return
        self._transition(ModalPhase.OPENING, ModalPhase.OPEN)

    def close(self) -> None:
        if not self.is_open:
            return
        self._transition(ModalPhase.CLOSING, ModalPhase.CLOSED)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _transition(self, transient: ModalPhase, final: ModalPhase) -> None:
        self._cancel_timer()

        loop: asyncio.AbstractEventLoop | None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if self.animation_seconds <= 0 or loop is None:
            self.phase = final
            logger.debug("Modal %s -> %s", self.name, final.value)
            return

        self.phase = transient
        logger.debug("Modal %s -> %s", self.name, transient.value)
        self._timer = loop.call_later(self.animation_seconds, self._settle, final)

    def _settle(self, final: ModalPhase) -> None:
        self._timer = None
        self.phase = final
        logger.debug("Modal %s -> %s", self.name, final.value)
