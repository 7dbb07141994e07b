"""Tests for scheduling and listing debt reminders."""

from dataclasses import replace
from datetime import timedelta

import pytest

from app.application.use_cases.reminders import REMINDER_TITLE, ReminderScheduler
from app.domain.entities import ROLE_MANAGER
from app.infrastructure.record_store import RecordStoreError
from app.infrastructure.repositories import ReminderRepository

from fakes import FakeTriggerScheduler


def _scheduler(store, clock, triggers) -> ReminderScheduler:
    return ReminderScheduler(ReminderRepository(store), triggers=triggers, clock=clock)


def _schedule(scheduler, clock, *, days=0, hours=0, debtor="d1"):
    return scheduler.schedule(
        debtor, "Karwan", 25000, clock() + timedelta(days=days, hours=hours), "Pay soon"
    )


def test_future_reminder_registers_a_trigger_at_due_date(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)

    assert _schedule(scheduler, clock, days=2) is True

    [reminder] = scheduler.reminders()
    fire_at, payload = triggers.registered[reminder.external_trigger_handle]
    assert fire_at == reminder.due_date
    assert payload["title"] == f"{REMINDER_TITLE} - Karwan"
    assert payload["body"] == "Pay soon"
    assert payload["recipientRole"] == ROLE_MANAGER
    assert payload["data"] == {"reminderId": reminder.id, "debtorId": "d1", "amount": 25000}


def test_past_due_reminder_fires_immediately(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)

    _schedule(scheduler, clock, days=-1)

    [(fire_at, _payload)] = triggers.registered.values()
    assert fire_at is None


def test_reminders_are_kept_without_trigger_facility(store, clock):
    scheduler = _scheduler(store, clock, FakeTriggerScheduler(available=False))

    assert _schedule(scheduler, clock, days=1) is True

    [reminder] = scheduler.reminders()
    assert reminder.external_trigger_handle is None
    assert [item.id for item in scheduler.upcoming()] == [reminder.id]


def test_trigger_failure_keeps_local_reminder(store, clock):
    scheduler = _scheduler(store, clock, FakeTriggerScheduler(fail=True))

    assert _schedule(scheduler, clock, days=1) is True
    assert scheduler.reminders()[0].external_trigger_handle is None


def test_persistence_failure_returns_false_and_cancels_trigger(store, clock, triggers, monkeypatch):
    scheduler = _scheduler(store, clock, triggers)

    def fail(*args, **kwargs):
        raise RecordStoreError("disk full")

    monkeypatch.setattr(scheduler._repository, "save_all", fail)

    assert _schedule(scheduler, clock, days=1) is False
    assert triggers.registered == {}
    assert scheduler.reminders() == []


def test_cancel_removes_reminder_and_trigger(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=1)
    [reminder] = scheduler.reminders()

    assert scheduler.cancel(reminder.id) is True
    assert triggers.cancelled == [reminder.external_trigger_handle]
    assert scheduler.reminders() == []
    assert scheduler.cancel(reminder.id) is False


def test_upcoming_and_overdue_windows(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=10, debtor="later")
    _schedule(scheduler, clock, days=1, debtor="soon")
    _schedule(scheduler, clock, days=30, debtor="edge")
    _schedule(scheduler, clock, days=45, debtor="far")
    _schedule(scheduler, clock, hours=-2, debtor="late")

    assert [item.debtor_id for item in scheduler.upcoming()] == ["soon", "later", "edge"]
    assert [item.debtor_id for item in scheduler.upcoming(within_days=5)] == ["soon"]
    assert [item.debtor_id for item in scheduler.overdue()] == ["late"]

    clock.advance(days=2)
    assert [item.debtor_id for item in scheduler.overdue()] == ["late", "soon"]


def test_cancel_keeps_reminder_and_trigger_when_save_fails(store, clock, triggers, monkeypatch):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=1)
    [reminder] = scheduler.reminders()

    def fail(*args, **kwargs):
        raise RecordStoreError("disk full")

    monkeypatch.setattr(scheduler._repository, "save_all", fail)

    with pytest.raises(RecordStoreError):
        scheduler.cancel(reminder.id)
    assert triggers.cancelled == []
    assert reminder.external_trigger_handle in triggers.registered
    assert scheduler.reminders() == [reminder]


def test_cancel_succeeds_when_trigger_cancellation_fails(store, clock, triggers, monkeypatch):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=1)
    [reminder] = scheduler.reminders()

    def fail(handle):
        raise RuntimeError("trigger facility unavailable")

    monkeypatch.setattr(triggers, "cancel_trigger", fail)

    assert scheduler.cancel(reminder.id) is True
    assert _scheduler(store, clock, triggers).reminders() == []


def test_inactive_reminders_are_never_listed(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=-1, debtor="past")
    _schedule(scheduler, clock, days=1, debtor="future")
    ReminderRepository(store).save_all(
        [replace(item, is_active=False) for item in scheduler.reminders()]
    )

    reloaded = _scheduler(store, clock, FakeTriggerScheduler())

    assert len(reloaded.reminders()) == 2
    assert reloaded.upcoming() == []
    assert reloaded.overdue() == []
    assert reloaded.restore_triggers() == 0


def test_reminders_survive_reload(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)
    _schedule(scheduler, clock, days=3)
    clock.advance(seconds=1)
    _schedule(scheduler, clock, days=-1, debtor="d2")
    scheduler.schedule("d3", "Shno", 1250.5, clock() + timedelta(hours=5), "")
    assert all(item.external_trigger_handle for item in scheduler.reminders())

    reloaded = _scheduler(store, clock, FakeTriggerScheduler())

    assert reloaded.reminders() == scheduler.reminders()


def test_reload_keeps_missing_trigger_handles_empty(store, clock):
    scheduler = _scheduler(store, clock, FakeTriggerScheduler(available=False))
    _schedule(scheduler, clock, days=3)

    reloaded = _scheduler(store, clock, FakeTriggerScheduler())

    assert reloaded.reminders() == scheduler.reminders()
    assert reloaded.reminders()[0].external_trigger_handle is None


def test_restore_triggers_registers_only_future_reminders(store, clock, triggers):
    first = _scheduler(store, clock, triggers)
    _schedule(first, clock, days=3, debtor="future")
    _schedule(first, clock, days=-3, debtor="past")

    fresh_triggers = FakeTriggerScheduler()
    restarted = _scheduler(store, clock, fresh_triggers)

    assert restarted.restore_triggers() == 1
    [(_fire_at, payload)] = fresh_triggers.registered.values()
    assert payload["data"]["debtorId"] == "future"
    future = next(item for item in restarted.reminders() if item.debtor_id == "future")
    assert future.external_trigger_handle in fresh_triggers.registered


def test_missing_due_date_is_rejected(store, clock, triggers):
    scheduler = _scheduler(store, clock, triggers)

    with pytest.raises(ValueError):
        scheduler.schedule("d1", "Karwan", 10, "", "Pay")
