"""Endpoints for scheduled debt reminders and automatic reminders."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from app.application.use_cases.reminders import AutomaticReminderService, ReminderScheduler
from app.domain.entities import AutomaticReminderSettings, DebtorSnapshot
from app.interfaces.api.dependencies import (
    get_automatic_reminder_service,
    get_notification_center,
    get_reminder_scheduler,
)
from app.interfaces.api.routes_helpers import service_errors
from app.interfaces.api.schemas import (
    AutomaticReminderRun,
    AutomaticReminderRunResult,
    AutomaticReminderSettingsSchema,
    AutomaticReminderStatus,
    ReminderCreate,
    ReminderHistoryRead,
    ReminderRead,
    ReminderScheduled,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _status(service: AutomaticReminderService) -> AutomaticReminderStatus:
    return AutomaticReminderStatus(
        settings=AutomaticReminderSettingsSchema.model_validate(service.settings()),
        next_run_at=service.next_reminder_date(),
        last_run_at=service.last_run_at(),
    )


@router.post("/", response_model=ReminderScheduled, status_code=status.HTTP_201_CREATED)
def schedule_reminder(
    payload: ReminderCreate,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> ReminderScheduled:
    """Persist a debt reminder and register its trigger when available."""

    with service_errors():
        scheduled = scheduler.schedule(
            payload.debtor_id,
            payload.debtor_name,
            payload.amount,
            payload.due_date,
            payload.message,
        )
    if not scheduled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reminder could not be stored",
        )
    return ReminderScheduled(scheduled=True)


@router.get("/", response_model=list[ReminderRead])
def list_reminders(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> list[ReminderRead]:
    return [ReminderRead.model_validate(item) for item in scheduler.reminders()]


@router.get("/upcoming", response_model=list[ReminderRead])
def upcoming_reminders(
    request: Request,
    days: int | None = Query(default=None, gt=0),
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> list[ReminderRead]:
    """Active reminders due within ``days`` (defaults to the configured window)."""

    window = days or get_notification_center(request).settings.default_upcoming_days
    return [ReminderRead.model_validate(item) for item in scheduler.upcoming(window)]


@router.get("/overdue", response_model=list[ReminderRead])
def overdue_reminders(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> list[ReminderRead]:
    return [ReminderRead.model_validate(item) for item in scheduler.overdue()]


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_reminder(
    reminder_id: str,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> Response:
    with service_errors():
        found = scheduler.cancel(reminder_id)
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/automatic/settings", response_model=AutomaticReminderStatus)
def get_automatic_settings(
    service: AutomaticReminderService = Depends(get_automatic_reminder_service),
) -> AutomaticReminderStatus:
    return _status(service)


@router.put("/automatic/settings", response_model=AutomaticReminderStatus)
def update_automatic_settings(
    payload: AutomaticReminderSettingsSchema,
    service: AutomaticReminderService = Depends(get_automatic_reminder_service),
) -> AutomaticReminderStatus:
    with service_errors():
        service.save_settings(AutomaticReminderSettings(**payload.model_dump()))
        return _status(service)


@router.post("/automatic/run", response_model=AutomaticReminderRunResult)
def run_automatic_reminders(
    payload: AutomaticReminderRun,
    service: AutomaticReminderService = Depends(get_automatic_reminder_service),
) -> AutomaticReminderRunResult:
    """Send automatic reminders now, or only when the schedule says so."""

    debtors = [DebtorSnapshot(**item.model_dump()) for item in payload.debtors]
    with service_errors():
        if payload.force:
            entries = service.send_automatic_reminders(debtors)
            return AutomaticReminderRunResult(
                sent=bool(entries),
                entries=[ReminderHistoryRead.model_validate(entry) for entry in entries],
            )
        sent = service.check_and_send(debtors)
    return AutomaticReminderRunResult(sent=sent)


@router.get("/automatic/history", response_model=list[ReminderHistoryRead])
def automatic_history(
    limit: int = Query(default=100, gt=0, le=1000),
    service: AutomaticReminderService = Depends(get_automatic_reminder_service),
) -> list[ReminderHistoryRead]:
    return [ReminderHistoryRead.model_validate(entry) for entry in service.history(limit)]


@router.delete("/automatic/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_automatic_history(
    service: AutomaticReminderService = Depends(get_automatic_reminder_service),
) -> Response:
    with service_errors():
        service.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
