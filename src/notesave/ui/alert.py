# src/notesave/ui/alert.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from .modal import ModalState

logger = logging.getLogger(__name__)


class ButtonStyle(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
    CANCEL = "cancel"


@dataclass(frozen=True, slots=True)
class AlertButton:
    label: str
    action: Callable[[], None]
    style: ButtonStyle = ButtonStyle.DEFAULT


@dataclass(frozen=True, slots=True)
class AlertDescriptor:
    title: str
    buttons: tuple[AlertButton, ...] = field(default_factory=tuple)
    message: str | None = None


class AlertController:
    """
    Modal confirmation sheet.

    - request(): open with a descriptor; while open, a new request replaces it.
    - dismiss(): backdrop tap, closes without running any action.
    - press(i): runs button i. It does not close: each action calls close() itself.
    """

    def __init__(self, *, animation_seconds: float = 0.0) -> None:
        self.modal = ModalState("alert", animation_seconds=animation_seconds)
        self._descriptor: AlertDescriptor | None = None

    @property
    def is_open(self) -> bool:
        return self.modal.is_open

    @property
    def descriptor(self) -> AlertDescriptor | None:
        """The open descriptor, or None when closed."""
        return self._descriptor if self.modal.is_open else None

    def request(self, descriptor: AlertDescriptor) -> None:
        if self.modal.is_open:
            logger.debug("Alert replaced: %r -> %r", self._descriptor and self._descriptor.title, descriptor.title)
        self._descriptor = descriptor
        self.modal.open()

    def close(self) -> None:
        self.modal.close()

    def dismiss(self) -> None:
        if self.modal.is_open:
            logger.debug("Alert dismissed (backdrop).")
        self.modal.close()

    def press(self, index: int) -> bool:
        """Run button `index` (0-based). Returns False when closed or out of range."""
        desc = self.descriptor
        if desc is None or not 0 <= index < len(desc.buttons):
            return False
        button = desc.buttons[index]
        logger.debug("Alert button pressed: %s (%s)", button.label, button.style.value)
        button.action()
        return True
