"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.domain.entities import Notification
from app.infrastructure.record_store import RecordStore

from .serialization import compact, ensure_list, iso_or_none, optional_str, require_datetime

NOTIFICATIONS_KEY = "app_notifications"

_OPTIONAL_FIELDS = ("recipientId", "senderId", "marketId")


class NotificationRepository:
    """Load and save the complete :class:`Notification` collection."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_all(self) -> list[Notification]:
        return self.store.load(NOTIFICATIONS_KEY, [], decoder=self._decode)

    def save_all(self, notifications: Sequence[Notification]) -> None:
        self.store.save(
            NOTIFICATIONS_KEY, [self._to_record(item) for item in notifications]
        )

    @classmethod
    def _decode(cls, payload: Any) -> list[Notification]:
        records = ensure_list(payload, collection="notifications")
        return [cls._to_entity(record) for record in records]

    @staticmethod
    def _to_record(notification: Notification) -> dict[str, Any]:
        record = {
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
            "createdAt": iso_or_none(notification.created_at),
        }
        return compact(record, _OPTIONAL_FIELDS)

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> Notification:
        return Notification(
            id=str(record["id"]),
            type=str(record["type"]),
            title=str(record["title"]),
            message=str(record["message"]),
            recipient_role=str(record["recipientRole"]),
            recipient_id=optional_str(record.get("recipientId")),
            sender_role=str(record["senderRole"]),
            sender_id=optional_str(record.get("senderId")),
            market_id=optional_str(record.get("marketId")),
            is_read=bool(record.get("isRead", False)),
            created_at=require_datetime(record.get("createdAt"), field_name="createdAt"),
        )


__all__ = ["NotificationRepository", "NOTIFICATIONS_KEY"]
