"""Timezone-aware clock and timestamp parsing helpers."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

FALLBACK_TIMEZONE: Final[str] = "Asia/Baghdad"

# Accepts "UTC+3", "GMT-04:30" and "UTC+0530".
_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def resolve_timezone(name: str | None) -> tzinfo:
    """Turn an IANA name or a ``UTC±HH:MM`` label into a ``tzinfo``.

    Unknown names resolve to :data:`FALLBACK_TIMEZONE`.
    """

    label = (name or "").strip() or FALLBACK_TIMEZONE
    try:
        return ZoneInfo(label)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    offset = _UTC_OFFSET.match(label)
    if offset is None:
        return ZoneInfo(FALLBACK_TIMEZONE)
    delta = timedelta(
        hours=int(offset.group("hours")), minutes=int(offset.group("minutes") or 0)
    )
    return timezone(-delta if offset.group("sign") == "-" else delta)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone configured through ``APP_TIMEZONE``."""

    return resolve_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in app time; naive values are assumed to already be app time."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def parse_app_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 string (or pass a datetime through) into app time.

    A trailing ``Z`` is accepted because persisted records written by other
    clients use the JavaScript ``toISOString`` format.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_app_timezone(value)
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = f"{text[:-1]}+00:00"
    return ensure_app_timezone(datetime.fromisoformat(text))


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch, the base of generated record ids."""

    return int(value.timestamp() * 1000)
