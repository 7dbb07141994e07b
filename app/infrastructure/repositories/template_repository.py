"""Persistence helpers for notification templates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.domain.entities import NotificationTemplate
from app.infrastructure.record_store import RecordStore

from .serialization import ensure_list

TEMPLATES_KEY = "notification_templates"

logger = logging.getLogger(__name__)


class TemplateRepository:
    """Provide the template collection, seeding ``defaults`` when needed."""

    def __init__(
        self, store: RecordStore, defaults: Sequence[NotificationTemplate]
    ) -> None:
        self.store = store
        self.defaults = tuple(defaults)

    def list_all(self) -> list[NotificationTemplate]:
        """Return stored templates, reseeding the defaults if none are readable."""

        templates = self.store.load(TEMPLATES_KEY, [], decoder=self._decode)
        if templates:
            return templates
        self.seed_defaults()
        return list(self.defaults)

    def seed_defaults(self) -> None:
        logger.info("Seeding %d default notification templates", len(self.defaults))
        self.store.save(TEMPLATES_KEY, [self._to_record(item) for item in self.defaults])

    @classmethod
    def _decode(cls, payload: Any) -> list[NotificationTemplate]:
        records = ensure_list(payload, collection="templates")
        return [cls._to_entity(record) for record in records]

    @staticmethod
    def _to_record(template: NotificationTemplate) -> dict[str, Any]:
        return {
            "id": template.id,
            "type": template.type,
            "senderRole": template.sender_role,
            "recipientRole": template.recipient_role,
            "title": template.title,
            "message": template.message,
        }

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> NotificationTemplate:
        return NotificationTemplate(
            id=str(record["id"]),
            type=str(record["type"]),
            sender_role=str(record["senderRole"]),
            recipient_role=str(record["recipientRole"]),
            title=str(record["title"]),
            message=str(record["message"]),
        )


__all__ = ["TemplateRepository", "TEMPLATES_KEY"]
