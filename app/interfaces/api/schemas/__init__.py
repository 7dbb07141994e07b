from .notification import (
    NotificationAudience,
    NotificationBroadcast,
    NotificationBroadcastResult,
    NotificationCreate,
    NotificationCreated,
    NotificationRead,
    UnreadCountRead,
    UnviewedRead,
)
from .reminder import (
    AutomaticReminderRun,
    AutomaticReminderRunResult,
    AutomaticReminderSettingsSchema,
    AutomaticReminderStatus,
    DebtorSnapshotSchema,
    ReminderCreate,
    ReminderHistoryRead,
    ReminderRead,
    ReminderScheduled,
)
from .template import AppliedTemplateRead, TemplateApply, TemplateRead

__all__ = [
    "AppliedTemplateRead",
    "AutomaticReminderRun",
    "AutomaticReminderRunResult",
    "AutomaticReminderSettingsSchema",
    "AutomaticReminderStatus",
    "DebtorSnapshotSchema",
    "NotificationAudience",
    "NotificationBroadcast",
    "NotificationBroadcastResult",
    "NotificationCreate",
    "NotificationCreated",
    "NotificationRead",
    "ReminderCreate",
    "ReminderHistoryRead",
    "ReminderRead",
    "ReminderScheduled",
    "TemplateApply",
    "TemplateRead",
    "UnreadCountRead",
    "UnviewedRead",
]
