"""Domain entity representing a role-addressed notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_OWNER = "owner"
ROLE_MANAGER = "manager"
ROLE_EMPLOYEE = "employee"
ROLE_CUSTOMER = "customer"

USER_ROLES = (ROLE_OWNER, ROLE_MANAGER, ROLE_EMPLOYEE, ROLE_CUSTOMER)

# Notification types are an open set; these are the ones the application uses.
NOTIFICATION_TYPE_SUBSCRIPTION = "subscription"
NOTIFICATION_TYPE_EMPLOYEE_GUIDE = "employee_guide"
NOTIFICATION_TYPE_CUSTOMER_INFO = "customer_info"
NOTIFICATION_TYPE_REMINDER = "reminder"
NOTIFICATION_TYPE_GENERAL = "general"


@dataclass
class Notification:
    """Message addressed to every identity holding ``recipient_role``.

    When ``recipient_id`` is set the notification is narrowed to that single
    identity; otherwise it is a broadcast to the whole role.
    """

    id: str
    type: str
    title: str
    message: str
    recipient_role: str
    sender_role: str
    created_at: datetime
    recipient_id: str | None = None
    sender_id: str | None = None
    market_id: str | None = None
    is_read: bool = False

    def matches(self, recipient_role: str, recipient_id: str | None = None) -> bool:
        """Return whether the notification belongs to the given audience."""

        if self.recipient_role != recipient_role:
            return False
        return not recipient_id or self.recipient_id == recipient_id


__all__ = [
    "Notification",
    "ROLE_OWNER",
    "ROLE_MANAGER",
    "ROLE_EMPLOYEE",
    "ROLE_CUSTOMER",
    "USER_ROLES",
    "NOTIFICATION_TYPE_SUBSCRIPTION",
    "NOTIFICATION_TYPE_EMPLOYEE_GUIDE",
    "NOTIFICATION_TYPE_CUSTOMER_INFO",
    "NOTIFICATION_TYPE_REMINDER",
    "NOTIFICATION_TYPE_GENERAL",
]
