"""Endpoints exposing canned notification templates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.application.use_cases.notifications import NotificationService
from app.interfaces.api.dependencies import get_notification_service
from app.interfaces.api.routes_helpers import require_role, service_errors
from app.interfaces.api.schemas import AppliedTemplateRead, TemplateApply, TemplateRead

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("/", response_model=list[TemplateRead])
def list_templates(
    sender_role: str = Query(...),
    recipient_role: str | None = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
) -> list[TemplateRead]:
    """Return the templates a sender may use, optionally for one recipient role."""

    require_role(sender_role, field_name="sender_role")
    with service_errors():
        templates = service.templates_for(sender_role, recipient_role or None)
    return [TemplateRead.model_validate(template) for template in templates]


@router.post("/{template_id}/apply", response_model=AppliedTemplateRead)
def apply_template(
    template_id: str,
    payload: TemplateApply,
    service: NotificationService = Depends(get_notification_service),
) -> AppliedTemplateRead:
    with service_errors():
        template = service.get_template(template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )
    applied = service.apply_template(template, payload.variables)
    return AppliedTemplateRead.model_validate(applied)
