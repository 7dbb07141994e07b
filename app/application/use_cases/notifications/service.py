"""Create, query and mutate role-addressed notifications."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from app.domain.entities import (
    USER_ROLES,
    AppliedTemplate,
    Notification,
    NotificationTemplate,
)
from app.infrastructure.notifications import AlertPlayer, TriggerScheduler
from app.infrastructure.repositories import NotificationRepository, TemplateRepository
from app.utils import epoch_millis, now_in_app_timezone

from .templates import apply_template, filter_templates

logger = logging.getLogger(__name__)


def validate_role(value: str | None, *, field_name: str) -> str:
    """Return ``value`` if it is a known role, raising ``ValueError`` otherwise."""

    if not value:
        raise ValueError(f"{field_name} is required")
    if value not in USER_ROLES:
        raise ValueError(f"Unknown {field_name} '{value}'")
    return value


class NotificationService:
    """Single owner of the in-memory notification and template collections.

    Every mutation is a read-modify-write of the whole collection followed by
    a whole-collection save; the in-memory list only changes after the save
    succeeds. Persistence errors (``RecordStoreError``) reach the caller,
    while alert playback and platform surfacing are best-effort.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        template_repository: TemplateRepository,
        *,
        triggers: TriggerScheduler,
        alerts: AlertPlayer,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._repository = repository
        self._template_repository = template_repository
        self._triggers = triggers
        self._alerts = alerts
        self._clock = clock
        self._lock = threading.RLock()
        self._notifications: list[Notification] | None = None
        self._templates: list[NotificationTemplate] | None = None
        self._has_unviewed = False
        self._last_issued_id = 0

    def reload(self) -> None:
        """Discard the in-memory state and load it again from the store."""

        with self._lock:
            self._notifications = self._repository.list_all()
            self._templates = self._template_repository.list_all()

    @property
    def notifications(self) -> list[Notification]:
        with self._lock:
            return list(self._snapshot())

    @property
    def templates(self) -> list[NotificationTemplate]:
        with self._lock:
            return list(self._template_snapshot())

    def send(
        self,
        type: str,
        title: str,
        message: str,
        recipient_role: str,
        sender_role: str,
        recipient_id: str | None = None,
        sender_id: str | None = None,
        market_id: str | None = None,
    ) -> str:
        """Persist a new notification and return its id."""

        validate_role(recipient_role, field_name="recipient_role")
        validate_role(sender_role, field_name="sender_role")

        with self._lock:
            current = self._snapshot()
            notification = Notification(
                id=self._next_id(current),
                type=type,
                title=title,
                message=message,
                recipient_role=recipient_role,
                recipient_id=recipient_id or None,
                sender_role=sender_role,
                sender_id=sender_id or None,
                market_id=market_id or None,
                is_read=False,
                created_at=self._clock(),
            )
            self._commit([notification, *current])
            self._has_unviewed = True

        logger.info(
            "Notification %s sent to %s%s",
            notification.id,
            recipient_role,
            f"/{recipient_id}" if recipient_id else "",
        )
        self._deliver(
            title,
            message,
            recipient_role=recipient_role,
            recipient_id=notification.recipient_id,
            data={"notificationId": notification.id},
        )
        return notification.id

    def send_to_many(
        self,
        type: str,
        title: str,
        message: str,
        recipient_role: str,
        sender_role: str,
        recipient_ids: Iterable[str],
        sender_id: str | None = None,
        market_id: str | None = None,
    ) -> list[str]:
        """Persist one notification per distinct recipient in a single batch."""

        validate_role(recipient_role, field_name="recipient_role")
        validate_role(sender_role, field_name="sender_role")

        unique_ids: list[str] = []
        for recipient_id in recipient_ids:
            if recipient_id and recipient_id not in unique_ids:
                unique_ids.append(recipient_id)
        if not unique_ids:
            return []

        with self._lock:
            current = self._snapshot()
            existing = {item.id for item in current}
            base = self._next_id(current)
            while any(f"{base}-{recipient_id}" in existing for recipient_id in unique_ids):
                base = self._next_id(current)
            created_at = self._clock()
            batch = [
                Notification(
                    id=f"{base}-{recipient_id}",
                    type=type,
                    title=title,
                    message=message,
                    recipient_role=recipient_role,
                    recipient_id=recipient_id,
                    sender_role=sender_role,
                    sender_id=sender_id or None,
                    market_id=market_id or None,
                    is_read=False,
                    created_at=created_at,
                )
                for recipient_id in unique_ids
            ]
            self._commit([*batch, *current])
            self._has_unviewed = True

        ids = [item.id for item in batch]
        logger.info("Broadcast %d notifications to %s", len(ids), recipient_role)
        self._deliver(
            title,
            message,
            recipient_role=recipient_role,
            recipient_ids=unique_ids,
            data={"notificationIds": ids},
        )
        return ids

    def mark_read(self, notification_id: str) -> None:
        with self._lock:
            current = self._snapshot()
            if not any(item.id == notification_id and not item.is_read for item in current):
                return
            self._commit(
                [
                    replace(item, is_read=True) if item.id == notification_id else item
                    for item in current
                ]
            )

    def mark_all_read(self, recipient_role: str, recipient_id: str | None = None) -> None:
        with self._lock:
            current = self._snapshot()
            targets = {
                item.id
                for item in current
                if not item.is_read and item.matches(recipient_role, recipient_id)
            }
            if not targets:
                return
            self._commit(
                [replace(item, is_read=True) if item.id in targets else item for item in current]
            )

    def delete(self, notification_id: str) -> None:
        with self._lock:
            current = self._snapshot()
            remaining = [item for item in current if item.id != notification_id]
            if len(remaining) != len(current):
                self._commit(remaining)

    def delete_all(self, recipient_role: str, recipient_id: str | None = None) -> None:
        with self._lock:
            current = self._snapshot()
            remaining = [
                item for item in current if not item.matches(recipient_role, recipient_id)
            ]
            if len(remaining) != len(current):
                self._commit(remaining)

    def query(self, recipient_role: str, recipient_id: str | None = None) -> list[Notification]:
        """Return the audience's notifications, newest first."""

        with self._lock:
            matching = [
                item for item in self._snapshot() if item.matches(recipient_role, recipient_id)
            ]
        return sorted(matching, key=lambda item: item.created_at, reverse=True)

    def unread_count(self, recipient_role: str, recipient_id: str | None = None) -> int:
        with self._lock:
            return sum(
                1
                for item in self._snapshot()
                if not item.is_read and item.matches(recipient_role, recipient_id)
            )

    def templates_for(
        self, sender_role: str, recipient_role: str | None = None
    ) -> list[NotificationTemplate]:
        with self._lock:
            return filter_templates(self._template_snapshot(), sender_role, recipient_role)

    def get_template(self, template_id: str) -> NotificationTemplate | None:
        with self._lock:
            for template in self._template_snapshot():
                if template.id == template_id:
                    return template
        return None

    @staticmethod
    def apply_template(
        template: NotificationTemplate, variables: Mapping[str, object]
    ) -> AppliedTemplate:
        return apply_template(template, variables)

    def has_unviewed(self) -> bool:
        """Whether notifications were sent since the list was last opened."""

        return self._has_unviewed

    def mark_viewed(self) -> None:
        self._has_unviewed = False

    def _snapshot(self) -> list[Notification]:
        if self._notifications is None:
            self._notifications = self._repository.list_all()
        return self._notifications

    def _template_snapshot(self) -> list[NotificationTemplate]:
        if self._templates is None:
            self._templates = self._template_repository.list_all()
        return self._templates

    def _commit(self, updated: list[Notification]) -> None:
        self._repository.save_all(updated)
        self._notifications = updated

    def _next_id(self, current: Sequence[Notification]) -> str:
        existing = {item.id for item in current}
        candidate = max(epoch_millis(self._clock()), self._last_issued_id + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_issued_id = candidate
        return str(candidate)

    def _deliver(
        self,
        title: str,
        body: str,
        *,
        recipient_role: str,
        recipient_id: str | None = None,
        recipient_ids: Sequence[str] | None = None,
        data: dict[str, Any],
    ) -> None:
        try:
            self._alerts.play()
        except Exception:
            logger.warning("Notification sound playback skipped", exc_info=True)

        if not self._triggers.supports_triggers():
            return

        payload: dict[str, Any] = {
            "kind": "notification",
            "title": title,
            "body": body,
            "recipientRole": recipient_role,
            "data": data,
        }
        if recipient_ids:
            payload["recipientIds"] = list(recipient_ids)
        elif recipient_id:
            payload["recipientId"] = recipient_id
        try:
            self._triggers.register_trigger(None, payload)
        except Exception:
            logger.warning("Failed to surface platform notification", exc_info=True)


__all__ = ["NotificationService", "validate_role"]
