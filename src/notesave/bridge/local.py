# src/notesave/bridge/local.py

from __future__ import annotations

import getpass
import logging
import re

from ..core.models import HostUser, Theme
from ..core.ports import HapticKind, KeyValueBackend

logger = logging.getLogger(__name__)

_NUM_RE = re.compile(r"\d+")


def _version_tuple(version: str) -> tuple[int, ...]:
    return tuple(int(p) for p in _NUM_RE.findall(version or ""))


def version_at_least(current: str, required: str) -> bool:
    """Dotted numeric comparison: "7.0" >= "6.9", "6.10" >= "6.9"."""
    cur = _version_tuple(current)
    req = _version_tuple(required)
    width = max(len(cur), len(req))
    return cur + (0,) * (width - len(cur)) >= req + (0,) * (width - len(req))


class LocalHostBridge:
    """
    Host bridge for running outside a messaging platform (console).

    No remote storage, no haptics; the identity is the OS user.
    """

    platform_version = "0"

    def __init__(self, display_name: str | None = None) -> None:
        if display_name is None:
            try:
                display_name = getpass.getuser()
            except Exception:
                display_name = None
        self._user = HostUser(display_name=display_name)
        self.theme: Theme | None = None

    def is_version_at_least(self, version: str) -> bool:
        return version_at_least(self.platform_version, version)

    def user(self) -> HostUser | None:
        return self._user

    def haptic(self, kind: HapticKind) -> None:
        logger.debug("haptic(%s) ignored: local host", kind)

    def apply_theme(self, theme: Theme, color: str) -> None:
        self.theme = theme
        logger.debug("Theme applied: %s (%s)", theme.value, color)

    def remote_storage(self) -> KeyValueBackend | None:
        return None
