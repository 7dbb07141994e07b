"""Schemas for notification template endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TemplateRead(BaseModel):
    id: str
    type: str
    sender_role: str
    recipient_role: str
    title: str
    message: str

    model_config = ConfigDict(from_attributes=True)


class TemplateApply(BaseModel):
    """Values substituted into the template's ``{placeholder}`` tokens."""

    variables: dict[str, Any] = Field(default_factory=dict)


class AppliedTemplateRead(BaseModel):
    title: str
    message: str
    type: str

    model_config = ConfigDict(from_attributes=True)


__all__ = ["AppliedTemplateRead", "TemplateApply", "TemplateRead"]
