"""Fixtures providing a FastAPI test client backed by a temporary database."""

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient


@pytest.fixture()
def client(settings):
    """Return a test client bound to a clean application instance."""

    from main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def center(client):
    return client.app.state.notification_center
