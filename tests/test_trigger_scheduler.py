"""Tests for the APScheduler-backed trigger facility."""

from datetime import timedelta

import pytest
from apscheduler.jobstores.base import JobLookupError

from app.infrastructure.notifications import (
    APSchedulerTriggerScheduler,
    NullTriggerScheduler,
    TriggerSchedulerError,
)


class FakeScheduler:
    """Minimal stand-in for an APScheduler scheduler."""

    def __init__(self) -> None:
        self.jobs: dict[str, dict] = {}
        self.running = False

    def add_job(self, func, **kwargs):
        self.jobs[kwargs["id"]] = {"func": func, **kwargs}

    def remove_job(self, job_id):
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]

    def start(self):
        self.running = True

    def shutdown(self, wait=True):
        self.running = False

    def fire(self, job_id):
        job = self.jobs.pop(job_id)
        job["func"](*job["args"])


def test_register_trigger_adds_date_job(clock):
    delivered = []
    scheduler = FakeScheduler()
    triggers = APSchedulerTriggerScheduler(delivered.append, scheduler=scheduler, clock=clock)

    handle = triggers.register_trigger(clock() + timedelta(hours=1), {"title": "t"})

    job = scheduler.jobs[handle]
    assert job["trigger"] == "date"
    assert job["run_date"] == clock() + timedelta(hours=1)

    scheduler.fire(handle)
    assert delivered == [{"title": "t"}]


@pytest.mark.parametrize("offset", [None, timedelta(minutes=-5)])
def test_past_or_missing_fire_time_runs_immediately(clock, offset):
    scheduler = FakeScheduler()
    triggers = APSchedulerTriggerScheduler(lambda payload: None, scheduler=scheduler, clock=clock)

    fire_at = clock() + offset if offset is not None else None
    handle = triggers.register_trigger(fire_at, {})

    assert scheduler.jobs[handle]["run_date"] is None


def test_cancel_trigger_reports_unknown_handles(clock):
    scheduler = FakeScheduler()
    triggers = APSchedulerTriggerScheduler(lambda payload: None, scheduler=scheduler, clock=clock)
    handle = triggers.register_trigger(clock() + timedelta(days=1), {})

    assert triggers.cancel_trigger(handle) is True
    assert triggers.cancel_trigger(handle) is False


def test_start_and_shutdown_are_idempotent(clock):
    scheduler = FakeScheduler()
    triggers = APSchedulerTriggerScheduler(lambda payload: None, scheduler=scheduler, clock=clock)

    triggers.start()
    triggers.start()
    assert scheduler.running is True

    triggers.shutdown()
    triggers.shutdown()
    assert scheduler.running is False


def test_null_trigger_scheduler_is_unavailable():
    triggers = NullTriggerScheduler()

    assert triggers.supports_triggers() is False
    assert triggers.cancel_trigger("anything") is False
    with pytest.raises(TriggerSchedulerError):
        triggers.register_trigger(None, {})
