"""Domain entities exposed by the application."""

from .automatic_reminder import (
    REMINDER_FREQUENCIES,
    REMINDER_FREQUENCY_BIWEEKLY,
    REMINDER_FREQUENCY_DAILY,
    REMINDER_FREQUENCY_MONTHLY,
    REMINDER_FREQUENCY_WEEKLY,
    REMINDER_METHOD_APP,
    REMINDER_STATUS_FAILED,
    REMINDER_STATUS_SENT,
    AutomaticReminderSettings,
    DebtorSnapshot,
    ReminderHistoryEntry,
)
from .notification import (
    NOTIFICATION_TYPE_CUSTOMER_INFO,
    NOTIFICATION_TYPE_EMPLOYEE_GUIDE,
    NOTIFICATION_TYPE_GENERAL,
    NOTIFICATION_TYPE_REMINDER,
    NOTIFICATION_TYPE_SUBSCRIPTION,
    ROLE_CUSTOMER,
    ROLE_EMPLOYEE,
    ROLE_MANAGER,
    ROLE_OWNER,
    USER_ROLES,
    Notification,
)
from .reminder import DebtReminder
from .template import AppliedTemplate, NotificationTemplate

__all__ = [
    "AppliedTemplate",
    "AutomaticReminderSettings",
    "DebtReminder",
    "DebtorSnapshot",
    "Notification",
    "NotificationTemplate",
    "ReminderHistoryEntry",
    "NOTIFICATION_TYPE_CUSTOMER_INFO",
    "NOTIFICATION_TYPE_EMPLOYEE_GUIDE",
    "NOTIFICATION_TYPE_GENERAL",
    "NOTIFICATION_TYPE_REMINDER",
    "NOTIFICATION_TYPE_SUBSCRIPTION",
    "REMINDER_FREQUENCIES",
    "REMINDER_FREQUENCY_BIWEEKLY",
    "REMINDER_FREQUENCY_DAILY",
    "REMINDER_FREQUENCY_MONTHLY",
    "REMINDER_FREQUENCY_WEEKLY",
    "REMINDER_METHOD_APP",
    "REMINDER_STATUS_FAILED",
    "REMINDER_STATUS_SENT",
    "ROLE_CUSTOMER",
    "ROLE_EMPLOYEE",
    "ROLE_MANAGER",
    "ROLE_OWNER",
    "USER_ROLES",
]
