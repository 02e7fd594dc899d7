"""Tests for the game WebSocket."""

import pytest
from fastapi import WebSocketDisconnect

from tresette.api.responses import Command, ServerMessage
from tresette.api.websocket import ConnectionManager, connection_manager


class TestSocket:
    """Command handling over a live socket."""

    def test_unknown_game_closed(self, client):
        """Connecting to a missing game closes with 4004."""
        with pytest.raises(WebSocketDisconnect) as exc_info:  # noqa: SIM117
            with client.websocket_connect("/games/nope/ws") as websocket:
                websocket.receive_json()
        assert exc_info.value.code == 4004

    def test_state_on_connect(self, client, create_game):
        """The first message is the full state."""
        game_id = create_game(username="Alice")
        with client.websocket_connect(f"/games/{game_id}/ws") as websocket:
            message = websocket.receive_json()
        assert message["command"] == Command.STATE
        assert message["content"]["id"] == game_id
        assert message["content"]["players"][0]["username"] == "Alice"

    def test_sync_state(self, client, human_turn_game):
        """SYNC_STATE returns the state again."""
        with client.websocket_connect(f"/games/{human_turn_game}/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"command": "SYNC_STATE"})
            message = websocket.receive_json()
        assert message["command"] == Command.STATE
        assert message["content"]["current_player_id"] == "P1"

    def test_play_bad_card(self, client, human_turn_game):
        """A card not in hand is acknowledged as rejected."""
        with client.websocket_connect(f"/games/{human_turn_game}/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"command": "PLAY", "content": {"card": "NOT_A_CARD"}})
            message = websocket.receive_json()
        assert message == {
            "command": "ACK",
            "content": {"command": "PLAY", "accepted": False},
        }

    def test_sign_and_move(self, client, human_turn_game):
        """Signs and reorders are acknowledged."""
        with client.websocket_connect(f"/games/{human_turn_game}/ws") as websocket:
            hand = websocket.receive_json()["content"]["snapshot"]["human_hand"]
            websocket.send_json({"command": "SIGN", "content": {"sign": "LISCIO"}})
            assert websocket.receive_json()["content"] == {"command": "SIGN", "accepted": True}
            websocket.send_json(
                {"command": "MOVE_CARD", "content": {"from_index": 0, "to_index": 10}}
            )
            content = websocket.receive_json()["content"]
        assert content["hand"] == hand[1:] + hand[:1]

    def test_invalid_payload(self, client, human_turn_game):
        """Payloads failing validation produce an ERROR."""
        with client.websocket_connect(f"/games/{human_turn_game}/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"command": "SIGN", "content": {"sign": "WINK"}})
            message = websocket.receive_json()
        assert message["command"] == Command.ERROR

    def test_unknown_command(self, client, create_game):
        """Unknown commands produce an ERROR."""
        game_id = create_game()
        with client.websocket_connect(f"/games/{game_id}/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"command": "DANCE"})
            message = websocket.receive_json()
        assert message == {"command": "ERROR", "content": {"error": "Unknown command: DANCE"}}

    def test_pause_and_resume(self, client, create_game):
        """PAUSE and RESUME are acknowledged."""
        game_id = create_game()
        with client.websocket_connect(f"/games/{game_id}/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"command": "PAUSE"})
            assert websocket.receive_json()["content"] == {"command": "PAUSE", "accepted": True}
            websocket.send_json({"command": "RESUME"})
            assert websocket.receive_json()["content"] == {"command": "RESUME", "accepted": True}


class TestEventQueue:
    """Game events are queued for broadcast."""

    def test_events_queued(self, human_turn_game):
        """Session events land on the queue as server messages."""
        queued = []
        while not connection_manager.message_queue.empty():
            queued.append(connection_manager.message_queue.get_nowait())
        ours = [m for m in queued if m.game_id == human_turn_game]
        assert [m.command for m in ours[:2]] == [Command.DEAL_STARTED, Command.TRICK_STARTED]
        assert ours[0].content["event_type"] == "DEAL_STARTED"

    def test_disconnect_unknown_socket(self):
        """Disconnecting a socket that never connected is a no-op."""
        manager = ConnectionManager()
        manager.disconnect(object(), "game")
        assert manager.active_connections == {}

    def test_server_message_dict(self):
        """Only command and content are sent."""
        message = ServerMessage(command=Command.ACK, game_id="g", content={"x": 1})
        assert message.to_dict() == {"command": "ACK", "content": {"x": 1}}
