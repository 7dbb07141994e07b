"""Time-based trigger facilities used to fire reminders and platform alerts."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable
from uuid import uuid4

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from app.utils import get_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

TriggerPayload = dict[str, Any]


class TriggerSchedulerError(RuntimeError):
    """Raised when a trigger cannot be registered."""


class TriggerScheduler(ABC):
    """Capability the notification engine consumes to fire things later."""

    def supports_triggers(self) -> bool:
        return True

    @abstractmethod
    def register_trigger(self, fire_at: datetime | None, payload: TriggerPayload) -> str:
        """Fire ``payload`` at ``fire_at`` (immediately when ``None`` or past).

        Returns an opaque handle accepted by :meth:`cancel_trigger`.
        """

    @abstractmethod
    def cancel_trigger(self, handle: str) -> bool:
        """Cancel a pending trigger; ``False`` when it is unknown or already fired."""

    def start(self) -> None:
        return None

    def shutdown(self) -> None:
        return None


class NullTriggerScheduler(TriggerScheduler):
    """Trigger facility for runtimes without one; reminders stay poll-only."""

    def supports_triggers(self) -> bool:
        return False

    def register_trigger(self, fire_at: datetime | None, payload: TriggerPayload) -> str:
        raise TriggerSchedulerError("No trigger facility is available on this runtime")

    def cancel_trigger(self, handle: str) -> bool:
        return False


class APSchedulerTriggerScheduler(TriggerScheduler):
    """Register one APScheduler date job per trigger.

    Jobs live in memory only; persisted reminders re-register their triggers
    on startup.
    """

    def __init__(
        self,
        deliver: Callable[[TriggerPayload], None],
        *,
        scheduler: BaseScheduler | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._deliver = deliver
        self._scheduler = scheduler or BackgroundScheduler(timezone=get_app_timezone())
        self._clock = clock

    def start(self) -> None:
        if self._scheduler.running:
            logger.info("Trigger scheduler already running, skipping start")
            return
        self._scheduler.start()
        logger.info("Trigger scheduler started")

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Trigger scheduler stopped")

    def register_trigger(self, fire_at: datetime | None, payload: TriggerPayload) -> str:
        handle = uuid4().hex
        run_date = fire_at if fire_at is not None and fire_at > self._clock() else None
        self._scheduler.add_job(
            self._fire,
            trigger="date",
            run_date=run_date,
            args=[handle, dict(payload)],
            id=handle,
            misfire_grace_time=None,
            coalesce=True,
        )
        logger.debug(
            "Registered trigger %s for %s",
            handle,
            run_date.isoformat() if run_date else "immediate delivery",
        )
        return handle

    def cancel_trigger(self, handle: str) -> bool:
        try:
            self._scheduler.remove_job(handle)
        except JobLookupError:
            logger.debug("Trigger %s not pending; nothing to cancel", handle)
            return False
        return True

    def _fire(self, handle: str, payload: TriggerPayload) -> None:
        logger.info("Trigger %s fired (%s)", handle, payload.get("kind", "notification"))
        self._deliver(payload)


__all__ = [
    "APSchedulerTriggerScheduler",
    "NullTriggerScheduler",
    "TriggerPayload",
    "TriggerScheduler",
    "TriggerSchedulerError",
]
