"""Realtime delivery, alert and trigger helpers for the infrastructure layer."""

from .alerts import AlertPlayer, NullAlertPlayer, RealtimeAlertPlayer
from .manager import NotificationConnectionManager
from .publisher import NotificationPublisher, serialize_notification
from .triggers import (
    APSchedulerTriggerScheduler,
    NullTriggerScheduler,
    TriggerPayload,
    TriggerScheduler,
    TriggerSchedulerError,
)

__all__ = [
    "AlertPlayer",
    "NullAlertPlayer",
    "RealtimeAlertPlayer",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "serialize_notification",
    "APSchedulerTriggerScheduler",
    "NullTriggerScheduler",
    "TriggerPayload",
    "TriggerScheduler",
    "TriggerSchedulerError",
]
