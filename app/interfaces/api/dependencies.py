"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from app.application.container import NotificationCenter
from app.application.use_cases.notifications import NotificationService
from app.application.use_cases.reminders import AutomaticReminderService, ReminderScheduler


def get_notification_center(request: Request) -> NotificationCenter:
    """Return the notification center created during application startup."""

    center = getattr(request.app.state, "notification_center", None)
    if center is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification center is not running",
        )
    return center


def get_notification_service(request: Request) -> NotificationService:
    return get_notification_center(request).notifications


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    return get_notification_center(request).reminders


def get_automatic_reminder_service(request: Request) -> AutomaticReminderService:
    return get_notification_center(request).automatic
