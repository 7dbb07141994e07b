"""Schedule, cancel and list time-triggered debt reminders."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Callable

from app.domain.entities import ROLE_MANAGER, DebtReminder
from app.infrastructure.notifications import TriggerScheduler
from app.infrastructure.record_store import RecordStoreError
from app.infrastructure.repositories import ReminderRepository
from app.utils import epoch_millis, now_in_app_timezone, parse_app_datetime

logger = logging.getLogger(__name__)

REMINDER_TITLE = "یادەوەری قەرز"


class ReminderScheduler:
    """Persist debt reminders and mirror them in the trigger facility.

    Reminders are always stored locally; the external trigger is an optional
    extra. When the facility is missing the reminders can only be surfaced
    through :meth:`upcoming` and :meth:`overdue`.
    """

    def __init__(
        self,
        repository: ReminderRepository,
        *,
        triggers: TriggerScheduler,
        recipient_role: str = ROLE_MANAGER,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._repository = repository
        self._triggers = triggers
        self._recipient_role = recipient_role
        self._clock = clock
        self._lock = threading.RLock()
        self._reminders: list[DebtReminder] | None = None
        self._last_issued_id = 0

    def reload(self) -> None:
        with self._lock:
            self._reminders = self._repository.list_all()

    def reminders(self) -> list[DebtReminder]:
        with self._lock:
            return list(self._snapshot())

    def schedule(
        self,
        debtor_id: str,
        debtor_name: str,
        amount: float,
        due_date: datetime | str,
        message: str,
    ) -> bool:
        """Store a reminder and register its trigger when possible.

        Returns ``False`` only when the reminder could not be persisted.
        """

        due = parse_app_datetime(due_date)
        if due is None:
            raise ValueError("due_date is required")
        now = self._clock()

        with self._lock:
            current = self._snapshot()
            reminder = DebtReminder(
                id=self._next_id(current, now),
                debtor_id=debtor_id,
                debtor_name=debtor_name,
                amount=amount,
                due_date=due,
                message=message,
                is_active=True,
                created_at=now,
            )
            reminder.external_trigger_handle = self._register(reminder, now)
            try:
                self._commit([*current, reminder])
            except RecordStoreError:
                logger.error("Error scheduling reminder for debtor %s", debtor_id, exc_info=True)
                if reminder.external_trigger_handle:
                    self._cancel_trigger(reminder.external_trigger_handle)
                return False

        logger.info(
            "Reminder %s scheduled for %s (trigger: %s)",
            reminder.id,
            due.isoformat(),
            reminder.external_trigger_handle or "none",
        )
        return True

    def cancel(self, reminder_id: str) -> bool:
        """Remove a reminder; returns whether one was found."""

        with self._lock:
            current = self._snapshot()
            reminder = next((item for item in current if item.id == reminder_id), None)
            if reminder is None:
                return False
            self._commit([item for item in current if item.id != reminder_id])
            if reminder.external_trigger_handle:
                self._cancel_trigger(reminder.external_trigger_handle)
        logger.info("Reminder %s cancelled", reminder_id)
        return True

    def upcoming(self, within_days: int = 30) -> list[DebtReminder]:
        """Active reminders due after now and no later than ``within_days`` ahead."""

        now = self._clock()
        horizon = now + timedelta(days=within_days)
        with self._lock:
            selected = [
                item
                for item in self._snapshot()
                if item.is_active and now < item.due_date <= horizon
            ]
        return sorted(selected, key=lambda item: item.due_date)

    def overdue(self) -> list[DebtReminder]:
        now = self._clock()
        with self._lock:
            selected = [item for item in self._snapshot() if item.is_overdue(now)]
        return sorted(selected, key=lambda item: item.due_date)

    def restore_triggers(self) -> int:
        """Re-register triggers for active future reminders after a restart.

        Trigger handles do not outlive the process that issued them, so every
        pending reminder receives a fresh handle. Returns the number restored.
        """

        if not self._triggers.supports_triggers():
            return 0
        now = self._clock()
        with self._lock:
            current = self._snapshot()
            restored = 0
            updated: list[DebtReminder] = []
            for item in current:
                if item.is_active and item.due_date > now:
                    handle = self._register(item, now)
                    if handle is not None:
                        restored += 1
                    item = replace(item, external_trigger_handle=handle)
                updated.append(item)
            if restored:
                self._commit(updated)
        if restored:
            logger.info("Restored %d reminder triggers", restored)
        return restored

    def _register(self, reminder: DebtReminder, now: datetime) -> str | None:
        if not self._triggers.supports_triggers():
            return None
        delay = reminder.due_date - now
        payload: dict[str, Any] = {
            "kind": "reminder",
            "title": f"{REMINDER_TITLE} - {reminder.debtor_name}",
            "body": reminder.message,
            "recipientRole": self._recipient_role,
            "data": {
                "reminderId": reminder.id,
                "debtorId": reminder.debtor_id,
                "amount": reminder.amount,
            },
        }
        fire_at = reminder.due_date if delay > timedelta(0) else None
        try:
            return self._triggers.register_trigger(fire_at, payload)
        except Exception:
            logger.error("Error scheduling trigger for reminder %s", reminder.id, exc_info=True)
            return None

    def _cancel_trigger(self, handle: str) -> None:
        try:
            self._triggers.cancel_trigger(handle)
        except Exception:
            logger.error("Error canceling trigger %s", handle, exc_info=True)

    def _snapshot(self) -> list[DebtReminder]:
        if self._reminders is None:
            self._reminders = self._repository.list_all()
        return self._reminders

    def _commit(self, updated: list[DebtReminder]) -> None:
        self._repository.save_all(updated)
        self._reminders = updated

    def _next_id(self, current: Sequence[DebtReminder], now: datetime) -> str:
        existing = {item.id for item in current}
        candidate = max(epoch_millis(now), self._last_issued_id + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_issued_id = candidate
        return str(candidate)


__all__ = ["ReminderScheduler", "REMINDER_TITLE"]
