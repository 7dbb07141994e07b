"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    """Payload used to send a notification to a role or a single recipient."""

    type: str = Field(..., min_length=1)
    title: str
    message: str
    recipient_role: str
    sender_role: str
    recipient_id: str | None = None
    sender_id: str | None = None
    market_id: str | None = None


class NotificationBroadcast(BaseModel):
    """Payload used to send the same notification to many recipients."""

    type: str = Field(..., min_length=1)
    title: str
    message: str
    recipient_role: str
    sender_role: str
    recipient_ids: list[str] = Field(default_factory=list)
    sender_id: str | None = None
    market_id: str | None = None


class NotificationAudience(BaseModel):
    """Role (and optional identity) whose notifications are affected."""

    role: str
    recipient_id: str | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    type: str
    title: str
    message: str
    recipient_role: str
    recipient_id: str | None = None
    sender_role: str
    sender_id: str | None = None
    market_id: str | None = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationCreated(BaseModel):
    id: str


class NotificationBroadcastResult(BaseModel):
    ids: list[str]


class UnreadCountRead(BaseModel):
    count: int


class UnviewedRead(BaseModel):
    has_unviewed: bool


__all__ = [
    "NotificationAudience",
    "NotificationBroadcast",
    "NotificationBroadcastResult",
    "NotificationCreate",
    "NotificationCreated",
    "NotificationRead",
    "UnreadCountRead",
    "UnviewedRead",
]
