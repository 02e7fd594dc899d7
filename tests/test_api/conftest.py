"""Pytest configuration for API tests."""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tresette.api.routes import router
from tresette.api.websocket import connection_manager
from tresette.config import settings


@pytest.fixture(autouse=True)
def slow_timers(monkeypatch):
    """Keep bots and trick resolution from firing during a request."""
    monkeypatch.setattr(settings, "bot_move_delay_seconds", 3600.0)
    monkeypatch.setattr(settings, "trick_resolution_delay_seconds", 3600.0)


@pytest.fixture
def test_app():
    """Create a test FastAPI app without lifespan dependencies."""
    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client(test_app):
    """Create a test client over a clean session registry."""
    connection_manager.clear()
    connection_manager.message_queue = asyncio.Queue()
    with TestClient(test_app, raise_server_exceptions=False) as client:
        yield client
    connection_manager.clear()


@pytest.fixture
def create_game(client):
    """Factory creating a game and returning its id."""

    def factory(**payload):
        response = client.post("/games", json=payload)
        assert response.status_code == 200
        return response.json()["game_id"]

    return factory


@pytest.fixture
def human_turn_game(client, create_game):
    """A started game in which P1 leads the first trick."""
    for seed in range(200):
        game_id = create_game(seed=seed)
        client.post(f"/games/{game_id}/start")
        if client.get(f"/games/{game_id}").json()["current_player_id"] == "P1":
            return game_id
        client.post(f"/games/{game_id}/stop")
    pytest.fail("No seed gave the human the lead")
