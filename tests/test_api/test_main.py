"""Tests for the application entry point."""

import asyncio

from fastapi.testclient import TestClient

from tresette.api.websocket import connection_manager
from tresette.main import app


def test_root_and_health():
    """The app answers its info and health endpoints with the lifespan running."""
    connection_manager.message_queue = asyncio.Queue()
    with TestClient(app) as client:
        assert client.get("/").json()["message"] == "Tresette API"
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/games/cards").status_code == 200
    assert connection_manager.sessions == {}
