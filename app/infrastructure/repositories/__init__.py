"""Repository implementations for infrastructure layer."""

from .automatic_reminder_repository import AutomaticReminderRepository
from .notification_repository import NotificationRepository
from .reminder_repository import ReminderRepository
from .template_repository import TemplateRepository

__all__ = [
    "AutomaticReminderRepository",
    "NotificationRepository",
    "ReminderRepository",
    "TemplateRepository",
]
