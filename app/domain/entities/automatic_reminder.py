"""Domain entities for periodic, automatically sent debt reminders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

REMINDER_FREQUENCY_DAILY = "daily"
REMINDER_FREQUENCY_WEEKLY = "weekly"
REMINDER_FREQUENCY_BIWEEKLY = "biweekly"
REMINDER_FREQUENCY_MONTHLY = "monthly"

REMINDER_FREQUENCIES = (
    REMINDER_FREQUENCY_DAILY,
    REMINDER_FREQUENCY_WEEKLY,
    REMINDER_FREQUENCY_BIWEEKLY,
    REMINDER_FREQUENCY_MONTHLY,
)

REMINDER_STATUS_SENT = "sent"
REMINDER_STATUS_FAILED = "failed"

REMINDER_METHOD_APP = "app"


@dataclass
class AutomaticReminderSettings:
    """User preferences controlling when automatic reminders go out.

    ``day_of_week`` follows the 0=Sunday convention used by the stored
    settings of existing clients.
    """

    enabled: bool = False
    frequency: str = REMINDER_FREQUENCY_WEEKLY
    time_of_day: str = "09:00"
    day_of_week: int | None = 1
    day_of_month: int | None = None
    custom_message: str | None = None
    only_with_debt: bool = True
    minimum_debt_amount: float | None = None
    overdue_only: bool = False
    overdue_days: int | None = None


@dataclass
class ReminderHistoryEntry:
    """Outcome of a single automatic reminder delivery attempt."""

    id: str
    debtor_id: str
    debtor_name: str
    amount: float
    sent_at: datetime
    method: str
    status: str
    error_message: str | None = None


@dataclass
class DebtorSnapshot:
    """Read-only view of a debtor supplied by the business layer."""

    id: str
    name: str
    total_debt: float
    user_id: str | None = None
    phone: str | None = None
    last_debt_at: datetime | None = None


__all__ = [
    "AutomaticReminderSettings",
    "DebtorSnapshot",
    "ReminderHistoryEntry",
    "REMINDER_FREQUENCIES",
    "REMINDER_FREQUENCY_DAILY",
    "REMINDER_FREQUENCY_WEEKLY",
    "REMINDER_FREQUENCY_BIWEEKLY",
    "REMINDER_FREQUENCY_MONTHLY",
    "REMINDER_METHOD_APP",
    "REMINDER_STATUS_SENT",
    "REMINDER_STATUS_FAILED",
]
