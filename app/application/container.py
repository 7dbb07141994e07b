"""Composition root holding every notification engine collaborator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy import Engine

from app.application.use_cases.notifications import DEFAULT_TEMPLATES, NotificationService
from app.application.use_cases.reminders import AutomaticReminderService, ReminderScheduler
from app.config import Settings
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.notifications import (
    AlertPlayer,
    APSchedulerTriggerScheduler,
    NotificationConnectionManager,
    NotificationPublisher,
    NullTriggerScheduler,
    RealtimeAlertPlayer,
    TriggerScheduler,
)
from app.infrastructure.record_store import RecordStore
from app.infrastructure.repositories import (
    AutomaticReminderRepository,
    NotificationRepository,
    ReminderRepository,
    TemplateRepository,
)
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class NotificationCenter:
    """Explicit replacement for process-wide notification singletons."""

    settings: Settings
    engine: Engine
    store: RecordStore
    manager: NotificationConnectionManager
    publisher: NotificationPublisher
    triggers: TriggerScheduler
    notifications: NotificationService
    reminders: ReminderScheduler
    automatic: AutomaticReminderService
    templates: TemplateRepository

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Start the trigger facility and restore pending reminder triggers."""

        self.publisher.bind_loop(loop)
        self.triggers.start()
        self.notifications.reload()
        self.reminders.reload()
        restored = self.reminders.restore_triggers()
        logger.info(
            "Notification center started (triggers: %s, restored: %d)",
            "enabled" if self.triggers.supports_triggers() else "disabled",
            restored,
        )

    def shutdown(self) -> None:
        self.triggers.shutdown()
        self.publisher.bind_loop(None)
        self.engine.dispose()
        logger.info("Notification center stopped")


def build_notification_center(
    settings: Settings,
    *,
    trigger_scheduler: TriggerScheduler | None = None,
    alert_player: AlertPlayer | None = None,
    clock: Callable[[], datetime] | None = None,
) -> NotificationCenter:
    """Create the store, services and delivery chain described by ``settings``."""

    clock = clock or now_in_app_timezone
    engine = create_database_engine(settings)
    initialize_database(engine)
    store = RecordStore(create_session_factory(engine))

    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    if trigger_scheduler is not None:
        triggers = trigger_scheduler
    elif settings.enable_trigger_scheduler:
        triggers = APSchedulerTriggerScheduler(publisher.dispatch, clock=clock)
    else:
        triggers = NullTriggerScheduler()
    alerts = alert_player or RealtimeAlertPlayer(
        publisher, sound_uri=settings.alert_sound_uri, volume=settings.alert_volume
    )

    templates = TemplateRepository(store, DEFAULT_TEMPLATES)
    notifications = NotificationService(
        NotificationRepository(store),
        templates,
        triggers=triggers,
        alerts=alerts,
        clock=clock,
    )
    reminders = ReminderScheduler(
        ReminderRepository(store),
        triggers=triggers,
        recipient_role=settings.reminder_recipient_role,
        clock=clock,
    )
    automatic = AutomaticReminderService(
        AutomaticReminderRepository(store),
        notifications,
        triggers=triggers,
        clock=clock,
    )
    return NotificationCenter(
        settings=settings,
        engine=engine,
        store=store,
        manager=manager,
        publisher=publisher,
        triggers=triggers,
        notifications=notifications,
        reminders=reminders,
        automatic=automatic,
        templates=templates,
    )


__all__ = ["NotificationCenter", "build_notification_center"]
