"""Helper utilities shared across API route handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from app.application.use_cases.notifications import validate_role
from app.infrastructure.record_store import RecordStoreError

logger = logging.getLogger(__name__)


@contextmanager
def service_errors() -> Iterator[None]:
    """Translate engine exceptions into HTTP errors."""

    try:
        yield
    except RecordStoreError as exc:
        logger.error("Storage unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification storage is unavailable",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def require_role(value: str | None, *, field_name: str = "role") -> str:
    """Validate a role taken from the query string."""

    try:
        return validate_role(value, field_name=field_name)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


__all__ = ["require_role", "service_errors"]
