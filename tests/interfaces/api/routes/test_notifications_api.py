"""Integration tests for the notification and template endpoints."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from app.infrastructure.record_store import RecordStoreError


def _send(client: TestClient, **overrides) -> str:
    payload = {
        "type": "general",
        "title": "Hello",
        "message": "Body",
        "recipient_role": "customer",
        "sender_role": "manager",
        **overrides,
    }
    response = client.post("/notifications/", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


def test_notification_lifecycle(client: TestClient) -> None:
    """Send, list, read and delete notifications for one audience."""

    first = _send(client, recipient_id="c1")
    second = _send(client, recipient_id="c1", title="Second")
    _send(client, recipient_id="c2")

    listing = client.get("/notifications/", params={"role": "customer", "recipient_id": "c1"})
    assert listing.status_code == 200
    assert {item["id"] for item in listing.json()} == {first, second}
    assert all(item["is_read"] is False for item in listing.json())

    count = client.get(
        "/notifications/unread-count", params={"role": "customer", "recipient_id": "c1"}
    )
    assert count.json() == {"count": 2}

    assert client.post(f"/notifications/{first}/read").status_code == 204
    count = client.get(
        "/notifications/unread-count", params={"role": "customer", "recipient_id": "c1"}
    )
    assert count.json() == {"count": 1}

    response = client.post(
        "/notifications/read-all", json={"role": "customer", "recipient_id": "c1"}
    )
    assert response.status_code == 204
    count = client.get("/notifications/unread-count", params={"role": "customer"})
    assert count.json() == {"count": 1}

    assert client.delete(f"/notifications/{second}").status_code == 204
    response = client.delete("/notifications/", params={"role": "customer", "recipient_id": "c1"})
    assert response.status_code == 204

    listing = client.get("/notifications/", params={"role": "customer"})
    assert [item["recipient_id"] for item in listing.json()] == ["c2"]


def test_broadcast_creates_one_record_per_recipient(client: TestClient) -> None:
    response = client.post(
        "/notifications/broadcast",
        json={
            "type": "customer_info",
            "title": "Notice",
            "message": "Body",
            "recipient_role": "customer",
            "sender_role": "manager",
            "recipient_ids": ["c1", "c2", "c1"],
        },
    )

    assert response.status_code == 201
    ids = response.json()["ids"]
    assert len(ids) == 2
    listing = client.get("/notifications/", params={"role": "customer"})
    assert len(listing.json()) == 2


@pytest.mark.parametrize("overrides", [{"recipient_role": "admin"}, {"sender_role": ""}])
def test_invalid_roles_return_400(client: TestClient, overrides) -> None:
    payload = {
        "type": "general",
        "title": "t",
        "message": "m",
        "recipient_role": "customer",
        "sender_role": "manager",
        **overrides,
    }

    assert client.post("/notifications/", json=payload).status_code == 400
    assert client.get("/notifications/", params={"role": "admin"}).status_code == 400


def test_storage_failure_returns_503(client: TestClient, center, monkeypatch) -> None:
    def fail(*args, **kwargs):
        raise RecordStoreError("disk full")

    monkeypatch.setattr(center.notifications._repository, "save_all", fail)

    response = client.post(
        "/notifications/",
        json={
            "type": "general",
            "title": "t",
            "message": "m",
            "recipient_role": "customer",
            "sender_role": "manager",
        },
    )
    assert response.status_code == 503


def test_unviewed_flag(client: TestClient) -> None:
    assert client.get("/notifications/unviewed").json() == {"has_unviewed": False}

    _send(client)
    assert client.get("/notifications/unviewed").json() == {"has_unviewed": True}

    assert client.post("/notifications/viewed").status_code == 204
    assert client.get("/notifications/unviewed").json() == {"has_unviewed": False}


def test_templates_listing_and_application(client: TestClient) -> None:
    response = client.get(
        "/templates/", params={"sender_role": "manager", "recipient_role": "customer"}
    )
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == ["5", "7", "10"]

    applied = client.post(
        "/templates/5/apply",
        json={"variables": {"market": "مارکێتی نوێ", "amount": "12,000"}},
    )
    assert applied.status_code == 200
    body = applied.json()
    assert "مارکێتی نوێ" in body["message"]
    assert "12,000" in body["message"]
    assert body["type"] == "customer_info"

    assert client.post("/templates/999/apply", json={"variables": {}}).status_code == 404
    assert client.get("/templates/", params={"sender_role": "nobody"}).status_code == 400


def test_websocket_sends_unread_and_handles_ack(client: TestClient) -> None:
    notification_id = _send(client, recipient_id="c1")

    with client.websocket_connect("/notifications/ws?role=customer&recipient_id=c1") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [notification_id]

        websocket.send_json({"type": "ack", "ids": [notification_id]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    count = client.get(
        "/notifications/unread-count", params={"role": "customer", "recipient_id": "c1"}
    )
    assert count.json() == {"count": 0}


def test_websocket_rejects_unknown_role(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/notifications/ws?role=robot") as websocket:
            websocket.receive_json()


def test_websocket_loads_unread_notifications_off_the_event_loop(
    client: TestClient, center, monkeypatch
) -> None:
    _send(client, recipient_id="c1")
    service = center.notifications
    original_query = service.query
    loop_running: list[bool] = []

    def recording_query(*args, **kwargs):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            loop_running.append(False)
        else:
            loop_running.append(True)
        return original_query(*args, **kwargs)

    monkeypatch.setattr(service, "query", recording_query)

    with client.websocket_connect("/notifications/ws?role=customer&recipient_id=c1") as websocket:
        assert websocket.receive_json()["type"] == "init"

    assert loop_running == [False]
