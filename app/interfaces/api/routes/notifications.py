"""Endpoints and websocket handler for role-addressed notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from app.application.use_cases.notifications import NotificationService, validate_role
from app.infrastructure.notifications import serialize_notification
from app.interfaces.api.dependencies import get_notification_service
from app.interfaces.api.routes_helpers import require_role, service_errors
from app.interfaces.api.schemas import (
    NotificationAudience,
    NotificationBroadcast,
    NotificationBroadcastResult,
    NotificationCreate,
    NotificationCreated,
    NotificationRead,
    UnreadCountRead,
    UnviewedRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    role: str = Query(...),
    recipient_id: str | None = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationRead]:
    """Return the audience's notifications, newest first."""

    require_role(role)
    return [
        NotificationRead.model_validate(notification)
        for notification in service.query(role, recipient_id)
    ]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    role: str = Query(...),
    recipient_id: str | None = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountRead:
    require_role(role)
    return UnreadCountRead(count=service.unread_count(role, recipient_id))


@router.post("/", response_model=NotificationCreated, status_code=status.HTTP_201_CREATED)
def send_notification(
    payload: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationCreated:
    with service_errors():
        notification_id = service.send(
            payload.type,
            payload.title,
            payload.message,
            payload.recipient_role,
            payload.sender_role,
            recipient_id=payload.recipient_id,
            sender_id=payload.sender_id,
            market_id=payload.market_id,
        )
    return NotificationCreated(id=notification_id)


@router.post(
    "/broadcast",
    response_model=NotificationBroadcastResult,
    status_code=status.HTTP_201_CREATED,
)
def broadcast_notification(
    payload: NotificationBroadcast,
    service: NotificationService = Depends(get_notification_service),
) -> NotificationBroadcastResult:
    """Send one notification per distinct recipient id."""

    with service_errors():
        ids = service.send_to_many(
            payload.type,
            payload.title,
            payload.message,
            payload.recipient_role,
            payload.sender_role,
            payload.recipient_ids,
            sender_id=payload.sender_id,
            market_id=payload.market_id,
        )
    return NotificationBroadcastResult(ids=ids)


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
def mark_all_read(
    payload: NotificationAudience,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    require_role(payload.role)
    with service_errors():
        service.mark_all_read(payload.role, payload.recipient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    with service_errors():
        service.mark_read(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    with service_errors():
        service.delete(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_notifications(
    role: str = Query(...),
    recipient_id: str | None = Query(default=None),
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    require_role(role)
    with service_errors():
        service.delete_all(role, recipient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/unviewed", response_model=UnviewedRead)
def has_unviewed(
    service: NotificationService = Depends(get_notification_service),
) -> UnviewedRead:
    return UnviewedRead(has_unviewed=service.has_unviewed())


@router.post("/viewed", status_code=status.HTTP_204_NO_CONTENT)
def mark_viewed(
    service: NotificationService = Depends(get_notification_service),
) -> Response:
    service.mark_viewed()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to one audience."""

    center = getattr(websocket.app.state, "notification_center", None)
    role = websocket.query_params.get("role")
    recipient_id = websocket.query_params.get("recipient_id") or None
    try:
        validate_role(role, field_name="role")
    except ValueError:
        await websocket.close(code=1008)
        return
    if center is None:
        await websocket.close(code=1011)
        return

    service = center.notifications
    manager = center.manager
    notifications = await run_in_threadpool(service.query, role, recipient_id)
    pending = [item for item in notifications if not item.is_read]

    await manager.connect(websocket, role, recipient_id)
    try:
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(item) for item in pending]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        if isinstance(notification_id, str) and notification_id:
                            await run_in_threadpool(service.mark_read, notification_id)
                continue
    except WebSocketDisconnect:
        manager.disconnect(websocket, role, recipient_id)
    except Exception:
        manager.disconnect(websocket, role, recipient_id)
        raise
