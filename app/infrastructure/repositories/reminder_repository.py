"""Persistence helpers for debt reminders."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.domain.entities import DebtReminder
from app.infrastructure.record_store import RecordStore

from .serialization import compact, ensure_list, iso_or_none, optional_str, require_datetime

REMINDERS_KEY = "debt_reminders"


class ReminderRepository:
    """Load and save the complete :class:`DebtReminder` collection."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_all(self) -> list[DebtReminder]:
        return self.store.load(REMINDERS_KEY, [], decoder=self._decode)

    def save_all(self, reminders: Sequence[DebtReminder]) -> None:
        self.store.save(REMINDERS_KEY, [self._to_record(item) for item in reminders])

    @classmethod
    def _decode(cls, payload: Any) -> list[DebtReminder]:
        records = ensure_list(payload, collection="reminders")
        return [cls._to_entity(record) for record in records]

    @staticmethod
    def _to_record(reminder: DebtReminder) -> dict[str, Any]:
        record = {
            "id": reminder.id,
            "debtorId": reminder.debtor_id,
            "debtorName": reminder.debtor_name,
            "amount": reminder.amount,
            "dueDate": iso_or_none(reminder.due_date),
            "message": reminder.message,
            "externalTriggerHandle": reminder.external_trigger_handle,
            "isActive": reminder.is_active,
            "createdAt": iso_or_none(reminder.created_at),
        }
        return compact(record, ("externalTriggerHandle",))

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> DebtReminder:
        # Records written by older clients kept the trigger id as ``notificationId``.
        handle = record.get("externalTriggerHandle", record.get("notificationId"))
        return DebtReminder(
            id=str(record["id"]),
            debtor_id=str(record["debtorId"]),
            debtor_name=str(record["debtorName"]),
            amount=float(record["amount"]),
            due_date=require_datetime(record.get("dueDate"), field_name="dueDate"),
            message=str(record.get("message", "")),
            external_trigger_handle=optional_str(handle),
            is_active=bool(record.get("isActive", True)),
            created_at=require_datetime(record.get("createdAt"), field_name="createdAt"),
        )


__all__ = ["ReminderRepository", "REMINDERS_KEY"]
