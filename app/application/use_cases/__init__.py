"""Aggregate application use cases."""

from .notifications import NotificationService, apply_template, substitute_placeholders
from .reminders import AutomaticReminderService, ReminderScheduler

__all__ = [
    "AutomaticReminderService",
    "NotificationService",
    "ReminderScheduler",
    "apply_template",
    "substitute_placeholders",
]
