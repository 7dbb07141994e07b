"""Domain entity representing a canned notification template."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationTemplate:
    """Role-scoped message whose ``{placeholder}`` tokens are filled at send time."""

    id: str
    type: str
    sender_role: str
    recipient_role: str
    title: str
    message: str


@dataclass(frozen=True)
class AppliedTemplate:
    """Result of resolving a template against a set of variables."""

    title: str
    message: str
    type: str


__all__ = ["NotificationTemplate", "AppliedTemplate"]
