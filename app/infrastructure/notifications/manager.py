"""Connection management helpers for notification websockets."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

AudienceKey = tuple[str, str | None]


class NotificationConnectionManager:
    """Manage active websocket connections grouped by role and identity.

    A connection registered without ``recipient_id`` follows every message
    addressed to its role.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[AudienceKey, Set[WebSocket]] = defaultdict(set)

    async def connect(
        self, websocket: WebSocket, role: str, recipient_id: str | None = None
    ) -> None:
        """Accept the websocket connection and register it for the audience."""

        await websocket.accept()
        self._connections[(role, recipient_id or None)].add(websocket)

    def disconnect(
        self, websocket: WebSocket, role: str, recipient_id: str | None = None
    ) -> None:
        """Remove ``websocket`` from the pool of its audience."""

        key = (role, recipient_id or None)
        connections = self._connections.get(key)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(key, None)

    def audience(
        self, role: str | None = None, recipient_id: str | None = None
    ) -> list[tuple[AudienceKey, WebSocket]]:
        """Return the connections that should receive a message.

        ``role=None`` targets every connection; a role without
        ``recipient_id`` is a broadcast to everyone holding the role.
        """

        selected: list[tuple[AudienceKey, WebSocket]] = []
        for key, connections in list(self._connections.items()):
            key_role, key_recipient = key
            if role is not None and key_role != role:
                continue
            if recipient_id and key_recipient not in (None, recipient_id):
                continue
            selected.extend((key, connection) for connection in list(connections))
        return selected

    async def send_to_audience(
        self,
        message: dict[str, Any],
        role: str | None = None,
        recipient_id: str | None = None,
    ) -> None:
        """Send ``message`` to every active connection in the audience."""

        for (key_role, key_recipient), connection in self.audience(role, recipient_id):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - closed by the client
                self.disconnect(connection, key_role, key_recipient)


__all__ = ["NotificationConnectionManager"]
