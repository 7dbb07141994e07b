"""Domain entity representing a scheduled debt reminder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DebtReminder:
    """Time-anchored obligation, optionally backed by an external trigger.

    ``external_trigger_handle`` is the opaque id returned by the trigger
    facility; it stays ``None`` when no trigger could be registered.
    """

    id: str
    debtor_id: str
    debtor_name: str
    amount: float
    due_date: datetime
    message: str
    created_at: datetime
    external_trigger_handle: str | None = None
    is_active: bool = True

    def is_overdue(self, now: datetime) -> bool:
        return self.is_active and self.due_date <= now


__all__ = ["DebtReminder"]
