"""Utility helpers to push fired notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from anyio import from_thread

from app.domain.entities import Notification

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Deliver trigger payloads to the websocket audience they address.

    ``dispatch`` may be called from the event loop, from an anyio worker
    thread (synchronous FastAPI endpoints) or from a scheduler thread; in the
    last case the loop captured by :meth:`bind_loop` is used.
    """

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind_loop(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self._loop = loop

    def dispatch(self, payload: dict[str, Any]) -> None:
        """Schedule ``payload`` for delivery to its audience."""

        message = {
            "type": payload.get("kind", "notification"),
            "data": copy.deepcopy(payload),
        }
        role = payload.get("recipientRole")
        recipient_ids = payload.get("recipientIds")
        if recipient_ids:
            seen: set[str] = set()
            for recipient_id in recipient_ids:
                if not recipient_id or recipient_id in seen:
                    continue
                seen.add(recipient_id)
                self._schedule_send(message, role, recipient_id)
            return
        self._schedule_send(message, role, payload.get("recipientId"))

    def _schedule_send(
        self, message: dict[str, Any], role: str | None, recipient_id: str | None
    ) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.create_task(self._manager.send_to_audience(message, role, recipient_id))
            return

        if self._loop is not None and self._loop.is_running():
            asyncio.run_coroutine_threadsafe(
                self._manager.send_to_audience(message, role, recipient_id), self._loop
            )
            return

        try:
            from_thread.run(self._manager.send_to_audience, message, role, recipient_id)
        except RuntimeError:
            logger.debug("No event loop available; realtime message '%s' dropped", message["type"])


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "recipientRole": notification.recipient_role,
        "recipientId": notification.recipient_id,
        "senderRole": notification.sender_role,
        "senderId": notification.sender_id,
        "marketId": notification.market_id,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


__all__ = ["NotificationPublisher", "serialize_notification"]
