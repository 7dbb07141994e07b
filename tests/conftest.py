"""Shared fixtures for the notification engine tests."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from app.config import Settings
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.record_store import RecordStore

from fakes import FakeClock, FakeTriggerScheduler, RecordingAlertPlayer


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'notifications.db'}",
        enable_trigger_scheduler=False,
        alert_sound_uri=None,
    )


@pytest.fixture()
def engine(settings: Settings):
    engine = create_database_engine(settings)
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(engine) -> RecordStore:
    return RecordStore(create_session_factory(engine))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def triggers() -> FakeTriggerScheduler:
    return FakeTriggerScheduler()


@pytest.fixture()
def alerts() -> RecordingAlertPlayer:
    return RecordingAlertPlayer()
