"""Notification use cases: templates and the notification service."""

from .service import NotificationService, validate_role
from .templates import (
    DEFAULT_TEMPLATES,
    apply_template,
    filter_templates,
    substitute_placeholders,
)

__all__ = [
    "DEFAULT_TEMPLATES",
    "NotificationService",
    "apply_template",
    "filter_templates",
    "substitute_placeholders",
    "validate_role",
]
