"""Alert sound collaborators invoked when new notifications are sent."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .publisher import NotificationPublisher

logger = logging.getLogger(__name__)


class AlertPlayer(ABC):
    """Play (or ask clients to play) the new-notification sound."""

    @abstractmethod
    def play(self) -> None:
        raise NotImplementedError


class NullAlertPlayer(AlertPlayer):
    """Alert player for environments without any audio output."""

    def play(self) -> None:
        return None


class RealtimeAlertPlayer(AlertPlayer):
    """Ask every connected client to play the configured sound."""

    def __init__(
        self,
        publisher: NotificationPublisher,
        *,
        sound_uri: str | None,
        volume: float = 0.7,
    ) -> None:
        self._publisher = publisher
        self._sound_uri = (sound_uri or "").strip()
        self._volume = volume

    def play(self) -> None:
        if not self._sound_uri:
            logger.debug("Sound URI is empty, skipping playback")
            return
        self._publisher.dispatch(
            {"kind": "alert", "soundUri": self._sound_uri, "volume": self._volume}
        )


__all__ = ["AlertPlayer", "NullAlertPlayer", "RealtimeAlertPlayer"]
