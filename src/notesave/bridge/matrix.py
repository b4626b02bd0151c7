# src/notesave/bridge/matrix.py

from __future__ import annotations

import logging

from nio import AsyncClient, ProfileGetResponse

from ..core.models import HostUser, Theme
from ..core.ports import HapticKind, KeyValueBackend
from ..storage.matrix_backend import MatrixRoomStateBackend
from .local import version_at_least

logger = logging.getLogger(__name__)


class MatrixHostBridge:
    """
    Host bridge backed by a logged-in Matrix client.

    - identity: the owner's Matrix profile (display name, avatar mxc:// URL)
    - remote storage: room state in the configured storage room
    - haptics/theme: no visual surface to drive, recorded and logged only

    platform_version is the mini-app API level the host advertises
    (NOTESAVE_HOST_VERSION); it gates remote storage like any other host.
    """

    def __init__(
        self,
        client: AsyncClient,
        *,
        storage_room_id: str = "",
        platform_version: str = "7.0",
    ) -> None:
        self._client = client
        self._storage_room_id = storage_room_id.strip()
        self.platform_version = platform_version
        self._user: HostUser | None = None
        self.theme: Theme | None = None

    async def refresh_identity(self, user_id: str | None = None) -> HostUser | None:
        uid = user_id or self._client.user_id
        try:
            resp = await self._client.get_profile(uid)
        except Exception:
            logger.warning("Matrix profile lookup failed for %s.", uid, exc_info=True)
            return self._user
        if isinstance(resp, ProfileGetResponse):
            self._user = HostUser(display_name=resp.displayname, avatar_url=resp.avatar_url)
            logger.info("Matrix identity: %s", resp.displayname or uid)
        else:
            logger.warning("Matrix profile lookup failed for %s: %r", uid, resp)
        return self._user

    def is_version_at_least(self, version: str) -> bool:
        return version_at_least(self.platform_version, version)

    def user(self) -> HostUser | None:
        return self._user

    def haptic(self, kind: HapticKind) -> None:
        logger.debug("haptic(%s): no haptics over Matrix", kind)

    def apply_theme(self, theme: Theme, color: str) -> None:
        self.theme = theme
        logger.debug("Theme preference set: %s (%s)", theme.value, color)

    def remote_storage(self) -> KeyValueBackend | None:
        if not self._storage_room_id:
            return None
        return MatrixRoomStateBackend(self._client, self._storage_room_id)
