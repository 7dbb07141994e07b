"""Periodic debt reminders sent to customers on a configurable calendar."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Callable

from app.application.use_cases.notifications import (
    NotificationService,
    substitute_placeholders,
)
from app.domain.entities import (
    NOTIFICATION_TYPE_CUSTOMER_INFO,
    REMINDER_FREQUENCIES,
    REMINDER_FREQUENCY_BIWEEKLY,
    REMINDER_FREQUENCY_DAILY,
    REMINDER_FREQUENCY_MONTHLY,
    REMINDER_FREQUENCY_WEEKLY,
    REMINDER_METHOD_APP,
    REMINDER_STATUS_FAILED,
    REMINDER_STATUS_SENT,
    ROLE_CUSTOMER,
    ROLE_MANAGER,
    AutomaticReminderSettings,
    DebtorSnapshot,
    ReminderHistoryEntry,
)
from app.infrastructure.notifications import TriggerScheduler
from app.infrastructure.record_store import RecordStoreError
from app.infrastructure.repositories import AutomaticReminderRepository
from app.utils import epoch_millis, now_in_app_timezone

logger = logging.getLogger(__name__)

AUTOMATIC_REMINDER_TITLE = "یادەوەری قەرز"
SCHEDULE_ALERT_TITLE = "وەختی ناردنی یادەوەرییە"
SCHEDULE_ALERT_BODY = "ئێستا یادەوەرییەکان دەنێردرێن بۆ قەرزدارەکان"

# Minimum hours between two automatic runs for each frequency.
MINIMUM_HOURS_BETWEEN_RUNS = {
    REMINDER_FREQUENCY_DAILY: 23,
    REMINDER_FREQUENCY_WEEKLY: 167,
    REMINDER_FREQUENCY_BIWEEKLY: 335,
    REMINDER_FREQUENCY_MONTHLY: 719,
}
SEND_WINDOW = timedelta(minutes=5)


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` into an ``(hour, minute)`` tuple."""

    try:
        hours_text, minutes_text = value.strip().split(":", 1)
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM") from exc
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM")
    return hours, minutes


def validate_settings(settings: AutomaticReminderSettings) -> AutomaticReminderSettings:
    if settings.frequency not in REMINDER_FREQUENCIES:
        raise ValueError(f"Unknown reminder frequency '{settings.frequency}'")
    parse_time_of_day(settings.time_of_day)
    if settings.day_of_week is not None and not 0 <= settings.day_of_week <= 6:
        raise ValueError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
    if settings.day_of_month is not None and not 1 <= settings.day_of_month <= 31:
        raise ValueError("day_of_month must be between 1 and 31")
    if settings.overdue_days is not None and settings.overdue_days < 0:
        raise ValueError("overdue_days cannot be negative")
    return settings


def calculate_next_reminder_date(
    settings: AutomaticReminderSettings, now: datetime
) -> datetime:
    """Return the next moment automatic reminders are due after ``now``."""

    hours, minutes = parse_time_of_day(settings.time_of_day)
    candidate = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)

    if settings.frequency == REMINDER_FREQUENCY_DAILY:
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    if settings.frequency in (REMINDER_FREQUENCY_WEEKLY, REMINDER_FREQUENCY_BIWEEKLY):
        # Stored weekdays count from Sunday=0; ``weekday()`` counts from Monday=0.
        current_day = (now.weekday() + 1) % 7
        target_day = settings.day_of_week if settings.day_of_week is not None else 1
        days_until = (target_day - current_day) % 7
        if settings.frequency == REMINDER_FREQUENCY_WEEKLY:
            if days_until == 0 and candidate <= now:
                days_until = 7
        elif days_until == 0:
            days_until = 14
        return candidate + timedelta(days=days_until)

    if settings.frequency == REMINDER_FREQUENCY_MONTHLY:
        target_day = settings.day_of_month or 1
        candidate = _with_clamped_day(candidate, candidate.year, candidate.month, target_day)
        if candidate <= now:
            year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
            candidate = _with_clamped_day(candidate, year, month, target_day)
        return candidate

    raise ValueError(f"Unknown reminder frequency '{settings.frequency}'")


def _with_clamped_day(value: datetime, year: int, month: int, day: int) -> datetime:
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(day, last_day))


def format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def build_reminder_message(debtor: DebtorSnapshot, custom_message: str | None = None) -> str:
    """Return the reminder text for ``debtor``."""

    amount = format_amount(debtor.total_debt)
    if custom_message:
        return substitute_placeholders(
            custom_message,
            {"name": debtor.name, "amount": amount, "phone": debtor.phone or ""},
        )
    return (
        f"سڵاو {debtor.name}،\n\n"
        "یادەوەرییەکی میهرەبانانەیە دەربارەی قەرزەکەت:\n"
        f"کۆی قەرز: {amount} دینار\n\n"
        "زۆر سوپاس بۆ هاوکاریەکەت! 🙏"
    )


def select_debtors(
    debtors: Iterable[DebtorSnapshot],
    settings: AutomaticReminderSettings,
    now: datetime,
) -> list[DebtorSnapshot]:
    """Apply the settings' debt filters to ``debtors``."""

    selected = list(debtors)
    if settings.only_with_debt:
        selected = [debtor for debtor in selected if debtor.total_debt > 0]
    if settings.minimum_debt_amount:
        selected = [
            debtor for debtor in selected if debtor.total_debt >= settings.minimum_debt_amount
        ]
    if settings.overdue_only and settings.overdue_days:
        threshold = timedelta(days=settings.overdue_days)
        selected = [
            debtor
            for debtor in selected
            if debtor.total_debt > 0
            and debtor.last_debt_at is not None
            and now - debtor.last_debt_at >= threshold
        ]
    return selected


class AutomaticReminderService:
    """Send reminder notifications to indebted customers on a schedule."""

    def __init__(
        self,
        repository: AutomaticReminderRepository,
        notifications: NotificationService,
        *,
        triggers: TriggerScheduler,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._repository = repository
        self._notifications = notifications
        self._triggers = triggers
        self._clock = clock

    def settings(self) -> AutomaticReminderSettings:
        return self._repository.get_settings()

    def save_settings(self, settings: AutomaticReminderSettings) -> AutomaticReminderSettings:
        self._repository.save_settings(validate_settings(settings))
        return settings

    def next_reminder_date(self) -> datetime | None:
        settings = self.settings()
        if not settings.enabled:
            return None
        return calculate_next_reminder_date(settings, self._clock())

    def last_run_at(self) -> datetime | None:
        return self._repository.get_last_run()

    def history(self, limit: int = 100) -> list[ReminderHistoryEntry]:
        return self._repository.list_history()[:limit]

    def clear_history(self) -> None:
        self._repository.clear_history()
        logger.info("Reminder history cleared")

    def send_automatic_reminders(
        self,
        debtors: Iterable[DebtorSnapshot],
        settings: AutomaticReminderSettings | None = None,
    ) -> list[ReminderHistoryEntry]:
        """Send one reminder per matching debtor and record the outcomes."""

        settings = settings or self.settings()
        if not settings.enabled:
            return []

        now = self._clock()
        selected = select_debtors(debtors, settings, now)
        if not selected:
            logger.info("No debtors match the criteria, skipping automatic reminders")
            return []

        logger.info("Sending automatic reminders to %d debtors", len(selected))
        entries: list[ReminderHistoryEntry] = []
        for debtor in selected:
            entries.append(self._remind(debtor, settings, now))

        # History is kept newest first.
        self._repository.prepend_history(list(reversed(entries)))
        self._repository.save_last_run(now)
        return entries

    def check_and_send(self, debtors: Iterable[DebtorSnapshot]) -> bool:
        """Run automatic reminders when their next scheduled time has come."""

        settings = self.settings()
        if not settings.enabled:
            return False

        now = self._clock()
        last_run = self._repository.get_last_run()
        if last_run is not None:
            hours_since = int((now - last_run).total_seconds() // 3600)
            minimum = MINIMUM_HOURS_BETWEEN_RUNS.get(settings.frequency, 23)
            if hours_since < minimum:
                logger.debug(
                    "Last reminder was sent %d hours ago, skipping (need %d)",
                    hours_since,
                    minimum,
                )
                return False

        next_date = calculate_next_reminder_date(settings, now)
        if abs(next_date - now) > SEND_WINDOW:
            return False

        self.send_automatic_reminders(debtors, settings)
        self._schedule_next_alert(settings)
        return True

    def _remind(
        self, debtor: DebtorSnapshot, settings: AutomaticReminderSettings, now: datetime
    ) -> ReminderHistoryEntry:
        entry = ReminderHistoryEntry(
            id=f"{epoch_millis(now)}-{debtor.id}-{REMINDER_METHOD_APP}",
            debtor_id=debtor.id,
            debtor_name=debtor.name,
            amount=debtor.total_debt,
            sent_at=now,
            method=REMINDER_METHOD_APP,
            status=REMINDER_STATUS_SENT,
        )
        if not debtor.user_id:
            entry.status = REMINDER_STATUS_FAILED
            entry.error_message = "Debtor has no linked customer account"
            return entry

        message = build_reminder_message(debtor, settings.custom_message)
        try:
            self._notifications.send(
                NOTIFICATION_TYPE_CUSTOMER_INFO,
                AUTOMATIC_REMINDER_TITLE,
                message,
                ROLE_CUSTOMER,
                ROLE_MANAGER,
                recipient_id=debtor.user_id,
            )
        except (RecordStoreError, ValueError) as exc:
            logger.error("Error sending reminder to %s: %s", debtor.name, exc)
            entry.status = REMINDER_STATUS_FAILED
            entry.error_message = str(exc)
        return entry

    def _schedule_next_alert(self, settings: AutomaticReminderSettings) -> None:
        if not self._triggers.supports_triggers():
            return
        next_date = calculate_next_reminder_date(settings, self._clock())
        try:
            self._triggers.register_trigger(
                next_date,
                {
                    "kind": "automatic-reminder",
                    "title": SCHEDULE_ALERT_TITLE,
                    "body": SCHEDULE_ALERT_BODY,
                    "recipientRole": ROLE_MANAGER,
                    "data": {"automatic": True, "trigger": "schedule"},
                },
            )
        except Exception:
            logger.warning("Failed to schedule next automatic reminder alert", exc_info=True)
        else:
            logger.info("Scheduling next automatic reminder for %s", next_date.isoformat())


__all__ = [
    "AutomaticReminderService",
    "build_reminder_message",
    "calculate_next_reminder_date",
    "parse_time_of_day",
    "select_debtors",
    "validate_settings",
]
