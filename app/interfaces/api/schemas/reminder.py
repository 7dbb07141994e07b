"""Schemas for debt reminder and automatic reminder endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReminderCreate(BaseModel):
    """Payload required to schedule a debt reminder."""

    debtor_id: str = Field(..., min_length=1)
    debtor_name: str
    amount: float
    due_date: datetime
    message: str


class ReminderRead(BaseModel):
    id: str
    debtor_id: str
    debtor_name: str
    amount: float
    due_date: datetime
    message: str
    is_active: bool
    created_at: datetime
    external_trigger_handle: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReminderScheduled(BaseModel):
    scheduled: bool


class AutomaticReminderSettingsSchema(BaseModel):
    """Automatic reminder preferences; ``day_of_week`` uses 0 for Sunday."""

    enabled: bool = False
    frequency: str = "weekly"
    time_of_day: str = "09:00"
    day_of_week: int | None = Field(default=1, ge=0, le=6)
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    custom_message: str | None = None
    only_with_debt: bool = True
    minimum_debt_amount: float | None = Field(default=None, ge=0)
    overdue_only: bool = False
    overdue_days: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class AutomaticReminderStatus(BaseModel):
    settings: AutomaticReminderSettingsSchema
    next_run_at: datetime | None = None
    last_run_at: datetime | None = None


class DebtorSnapshotSchema(BaseModel):
    id: str
    name: str
    total_debt: float
    user_id: str | None = None
    phone: str | None = None
    last_debt_at: datetime | None = None


class AutomaticReminderRun(BaseModel):
    """Debtors to consider; ``force`` skips the schedule window check."""

    debtors: list[DebtorSnapshotSchema] = Field(default_factory=list)
    force: bool = True


class ReminderHistoryRead(BaseModel):
    id: str
    debtor_id: str
    debtor_name: str
    amount: float
    sent_at: datetime
    method: str
    status: str
    error_message: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AutomaticReminderRunResult(BaseModel):
    sent: bool
    entries: list[ReminderHistoryRead] = Field(default_factory=list)


__all__ = [
    "AutomaticReminderRun",
    "AutomaticReminderRunResult",
    "AutomaticReminderSettingsSchema",
    "AutomaticReminderStatus",
    "DebtorSnapshotSchema",
    "ReminderCreate",
    "ReminderHistoryRead",
    "ReminderRead",
    "ReminderScheduled",
]
