"""Reminder use cases: scheduled debt reminders and automatic reminders."""

from .automatic import (
    AutomaticReminderService,
    build_reminder_message,
    calculate_next_reminder_date,
    select_debtors,
    validate_settings,
)
from .scheduler import REMINDER_TITLE, ReminderScheduler

__all__ = [
    "AutomaticReminderService",
    "REMINDER_TITLE",
    "ReminderScheduler",
    "build_reminder_message",
    "calculate_next_reminder_date",
    "select_debtors",
    "validate_settings",
]
