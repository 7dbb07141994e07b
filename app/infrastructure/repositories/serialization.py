"""Shared helpers for converting entities into persisted record shapes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from app.utils import parse_app_datetime


def iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def require_datetime(value: Any, *, field_name: str) -> datetime:
    """Parse a mandatory timestamp, raising ``ValueError`` when absent."""

    parsed = parse_app_datetime(value)
    if parsed is None:
        raise ValueError(f"Missing timestamp '{field_name}'")
    return parsed


def optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def compact(record: dict[str, Any], optional_keys: Iterable[str]) -> dict[str, Any]:
    """Drop ``optional_keys`` whose value is ``None`` from ``record``."""

    for key in optional_keys:
        if record.get(key) is None:
            record.pop(key, None)
    return record


def ensure_list(payload: Any, *, collection: str) -> list[Any]:
    if not isinstance(payload, list):
        raise TypeError(f"Stored {collection} must be a list, got {type(payload).__name__}")
    return payload


__all__ = ["compact", "ensure_list", "iso_or_none", "optional_str", "require_datetime"]
