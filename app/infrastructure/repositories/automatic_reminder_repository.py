"""Persistence helpers for automatic reminder settings and history."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from app.domain.entities import (
    REMINDER_FREQUENCIES,
    AutomaticReminderSettings,
    ReminderHistoryEntry,
)
from app.infrastructure.record_store import RecordStore
from app.utils import parse_app_datetime

from .serialization import compact, ensure_list, iso_or_none, optional_str, require_datetime

SETTINGS_KEY = "automatic_reminder_settings"
LAST_RUN_KEY = "last_automatic_reminder_date"
HISTORY_KEY = "reminder_history"

HISTORY_LIMIT = 1000


class AutomaticReminderRepository:
    """Store the automatic reminder configuration, run marker and history."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def get_settings(self) -> AutomaticReminderSettings:
        return self.store.load(
            SETTINGS_KEY, AutomaticReminderSettings(), decoder=self._settings_to_entity
        )

    def save_settings(self, settings: AutomaticReminderSettings) -> None:
        self.store.save(SETTINGS_KEY, self._settings_to_record(settings))

    def get_last_run(self) -> datetime | None:
        return self.store.load(LAST_RUN_KEY, None, decoder=parse_app_datetime)

    def save_last_run(self, value: datetime) -> None:
        self.store.save(LAST_RUN_KEY, value.isoformat())

    def list_history(self) -> list[ReminderHistoryEntry]:
        return self.store.load(HISTORY_KEY, [], decoder=self._decode_history)

    def prepend_history(self, entries: Sequence[ReminderHistoryEntry]) -> None:
        """Add ``entries`` (newest first) ahead of the stored history."""

        if not entries:
            return
        combined = [*entries, *self.list_history()][:HISTORY_LIMIT]
        self.store.save(HISTORY_KEY, [self._history_to_record(item) for item in combined])

    def clear_history(self) -> None:
        self.store.erase(HISTORY_KEY)

    @staticmethod
    def _settings_to_record(settings: AutomaticReminderSettings) -> dict[str, Any]:
        record = {
            "enabled": settings.enabled,
            "frequency": settings.frequency,
            "timeOfDay": settings.time_of_day,
            "dayOfWeek": settings.day_of_week,
            "dayOfMonth": settings.day_of_month,
            "customMessage": settings.custom_message,
            "onlyWithDebt": settings.only_with_debt,
            "minimumDebtAmount": settings.minimum_debt_amount,
            "overdueOnly": settings.overdue_only,
            "overdueDays": settings.overdue_days,
        }
        return compact(
            record,
            ("dayOfWeek", "dayOfMonth", "customMessage", "minimumDebtAmount", "overdueDays"),
        )

    @staticmethod
    def _settings_to_entity(record: dict[str, Any]) -> AutomaticReminderSettings:
        if not isinstance(record, dict):
            raise TypeError("Automatic reminder settings must be an object")
        frequency = str(record.get("frequency", "weekly"))
        if frequency not in REMINDER_FREQUENCIES:
            raise ValueError(f"Unknown reminder frequency '{frequency}'")
        minimum = record.get("minimumDebtAmount")
        return AutomaticReminderSettings(
            enabled=bool(record.get("enabled", False)),
            frequency=frequency,
            time_of_day=str(record.get("timeOfDay", "09:00")),
            day_of_week=_optional_int(record.get("dayOfWeek")),
            day_of_month=_optional_int(record.get("dayOfMonth")),
            custom_message=optional_str(record.get("customMessage")),
            only_with_debt=bool(record.get("onlyWithDebt", True)),
            minimum_debt_amount=float(minimum) if minimum is not None else None,
            overdue_only=bool(record.get("overdueOnly", False)),
            overdue_days=_optional_int(record.get("overdueDays")),
        )

    @classmethod
    def _decode_history(cls, payload: Any) -> list[ReminderHistoryEntry]:
        records = ensure_list(payload, collection="reminder history")
        return [cls._history_to_entity(record) for record in records]

    @staticmethod
    def _history_to_record(entry: ReminderHistoryEntry) -> dict[str, Any]:
        record = {
            "id": entry.id,
            "debtorId": entry.debtor_id,
            "debtorName": entry.debtor_name,
            "amount": entry.amount,
            "sentAt": iso_or_none(entry.sent_at),
            "method": entry.method,
            "status": entry.status,
            "errorMessage": entry.error_message,
        }
        return compact(record, ("errorMessage",))

    @staticmethod
    def _history_to_entity(record: dict[str, Any]) -> ReminderHistoryEntry:
        return ReminderHistoryEntry(
            id=str(record["id"]),
            debtor_id=str(record["debtorId"]),
            debtor_name=str(record["debtorName"]),
            amount=float(record["amount"]),
            sent_at=require_datetime(record.get("sentAt"), field_name="sentAt"),
            method=str(record["method"]),
            status=str(record["status"]),
            error_message=optional_str(record.get("errorMessage")),
        )


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


__all__ = ["AutomaticReminderRepository", "HISTORY_LIMIT"]
