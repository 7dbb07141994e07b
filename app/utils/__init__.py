"""Utility helpers shared across the notification engine."""

from .datetime import (
    FALLBACK_TIMEZONE,
    ensure_app_timezone,
    epoch_millis,
    get_app_timezone,
    now_in_app_timezone,
    parse_app_datetime,
    resolve_timezone,
)

__all__ = [
    "FALLBACK_TIMEZONE",
    "ensure_app_timezone",
    "epoch_millis",
    "get_app_timezone",
    "now_in_app_timezone",
    "parse_app_datetime",
    "resolve_timezone",
]
