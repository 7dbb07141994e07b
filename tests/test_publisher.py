"""Tests for websocket fan-out of fired triggers."""

import asyncio

from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    RealtimeAlertPlayer,
)


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.messages: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        self.messages.append(message)


async def _connected(manager, role, recipient_id=None) -> FakeWebSocket:
    websocket = FakeWebSocket()
    await manager.connect(websocket, role, recipient_id)
    return websocket


def test_dispatch_reaches_only_the_addressed_audience():
    async def scenario():
        manager = NotificationConnectionManager()
        publisher = NotificationPublisher(manager)
        follower = await _connected(manager, "customer")
        target = await _connected(manager, "customer", "c1")
        other = await _connected(manager, "customer", "c2")
        manager_ws = await _connected(manager, "manager")

        publisher.dispatch({"kind": "notification", "recipientRole": "customer", "recipientId": "c1"})
        await asyncio.sleep(0)
        return follower, target, other, manager_ws

    follower, target, other, manager_ws = asyncio.run(scenario())

    assert target.accepted is True
    assert len(follower.messages) == len(target.messages) == 1
    assert target.messages[0]["type"] == "notification"
    assert target.messages[0]["data"]["recipientId"] == "c1"
    assert other.messages == []
    assert manager_ws.messages == []


def test_dispatch_fans_out_to_recipient_ids():
    async def scenario():
        manager = NotificationConnectionManager()
        publisher = NotificationPublisher(manager)
        first = await _connected(manager, "customer", "c1")
        second = await _connected(manager, "customer", "c2")

        publisher.dispatch(
            {"kind": "notification", "recipientRole": "customer", "recipientIds": ["c1", "c2", "c1"]}
        )
        await asyncio.sleep(0)
        return first, second

    first, second = asyncio.run(scenario())

    assert len(first.messages) == 1
    assert len(second.messages) == 1


def test_alert_player_broadcasts_sound_to_everyone():
    async def scenario():
        manager = NotificationConnectionManager()
        publisher = NotificationPublisher(manager)
        customer = await _connected(manager, "customer", "c1")
        owner = await _connected(manager, "owner")

        RealtimeAlertPlayer(publisher, sound_uri="https://example.com/ding.mp3", volume=0.5).play()
        RealtimeAlertPlayer(publisher, sound_uri="").play()
        await asyncio.sleep(0)
        return customer, owner

    customer, owner = asyncio.run(scenario())

    for websocket in (customer, owner):
        assert websocket.messages == [
            {
                "type": "alert",
                "data": {"kind": "alert", "soundUri": "https://example.com/ding.mp3", "volume": 0.5},
            }
        ]


def test_disconnect_stops_delivery():
    async def scenario():
        manager = NotificationConnectionManager()
        publisher = NotificationPublisher(manager)
        websocket = await _connected(manager, "manager")
        manager.disconnect(websocket, "manager")

        publisher.dispatch({"kind": "reminder", "recipientRole": "manager"})
        await asyncio.sleep(0)
        return websocket

    assert asyncio.run(scenario()).messages == []
