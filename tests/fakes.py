"""In-memory collaborators shared by the tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from app.infrastructure.notifications import AlertPlayer, TriggerScheduler


class FakeClock:
    """Controllable replacement for ``now_in_app_timezone``."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: Any) -> None:
        self.current += timedelta(**kwargs)


class FakeTriggerScheduler(TriggerScheduler):
    """In-memory trigger facility recording every registration."""

    def __init__(self, *, available: bool = True, fail: bool = False) -> None:
        self.available = available
        self.fail = fail
        self.registered: dict[str, tuple[datetime | None, dict[str, Any]]] = {}
        self.cancelled: list[str] = []
        self._counter = 0

    def supports_triggers(self) -> bool:
        return self.available

    def register_trigger(self, fire_at, payload):
        if self.fail:
            raise RuntimeError("trigger facility unavailable")
        self._counter += 1
        handle = f"trigger-{self._counter}"
        self.registered[handle] = (fire_at, payload)
        return handle

    def cancel_trigger(self, handle: str) -> bool:
        self.cancelled.append(handle)
        return self.registered.pop(handle, None) is not None


class RecordingAlertPlayer(AlertPlayer):
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.played = 0

    def play(self) -> None:
        if self.fail:
            raise RuntimeError("no audio device")
        self.played += 1
