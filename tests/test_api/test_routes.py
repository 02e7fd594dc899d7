"""Tests for API routes."""

from tresette.api.websocket import connection_manager


class TestCreateGame:
    """Tests for POST /games endpoint."""

    def test_create_game_success(self, client):
        """Creating a game returns its id and the human seat."""
        response = client.post("/games", json={"username": "Alice", "difficulty": "hard"})
        assert response.status_code == 200

        data = response.json()
        assert data["player_id"] == "P1"
        assert data["message"] == "Game created successfully"
        session = connection_manager.get_session(data["game_id"])
        assert session is not None
        assert session.human_player.username == "Alice"

    def test_create_game_defaults(self, client):
        """An empty body uses the configured defaults."""
        response = client.post("/games", json={})
        game = client.get(f"/games/{response.json()['game_id']}").json()
        assert game["winning_score"] == 21
        assert game["difficulty"] == "medium"
        assert game["players"][0]["username"] == "Giocatore"

    def test_invalid_winning_score(self, client):
        """Only 11, 21 and 31 are selectable."""
        response = client.post("/games", json={"winning_score": 15})
        assert response.status_code == 422

    def test_invalid_difficulty(self, client):
        """Unknown difficulties are rejected."""
        response = client.post("/games", json={"difficulty": "expert"})
        assert response.status_code == 422

    def test_seed_reproducible(self, client, create_game):
        """The same seed seats the same bot names."""
        first = client.get(f"/games/{create_game(seed=42)}").json()
        second = client.get(f"/games/{create_game(seed=42)}").json()
        assert [p["username"] for p in first["players"]] == [
            p["username"] for p in second["players"]
        ]


class TestGetCards:
    """Tests for GET /games/cards endpoint."""

    def test_forty_cards(self, client):
        """The whole deck is listed once."""
        cards = client.get("/games/cards").json()["cards"]
        assert len(cards) == 40
        assert len({c["code"] for c in cards}) == 40
        asso = next(c for c in cards if c["code"] == "ASSO_DENARI")
        assert asso["points"] == 1.0
        assert asso["game_value"] == 8


class TestGameLifecycle:
    """Start, pause, resume and stop."""

    def test_get_unknown_game(self, client):
        """Unknown ids give 404."""
        assert client.get("/games/nope").status_code == 404
        assert client.post("/games/nope/start").status_code == 404
        assert client.post("/games/nope/play", json={"card": "ASSO_DENARI"}).status_code == 404

    def test_start(self, client, create_game):
        """Starting deals ten cards to the human."""
        game_id = create_game()
        assert client.post(f"/games/{game_id}/start").json() == {"accepted": True}
        game = client.get(f"/games/{game_id}").json()
        assert len(game["snapshot"]["human_hand"]) == 10
        assert game["snapshot"]["hand_sizes"] == {"P1": 10, "P2": 10, "P3": 10, "P4": 10}

    def test_pause_resume(self, client, create_game):
        """Pause state is reported."""
        game_id = create_game()
        client.post(f"/games/{game_id}/start")
        client.post(f"/games/{game_id}/pause")
        assert client.get(f"/games/{game_id}").json()["paused"]
        client.post(f"/games/{game_id}/resume")
        assert not client.get(f"/games/{game_id}").json()["paused"]

    def test_next_deal_while_running(self, client, create_game):
        """Neither next-deal nor confirm work mid-deal."""
        game_id = create_game()
        client.post(f"/games/{game_id}/start")
        assert client.post(f"/games/{game_id}/next-deal").json() == {"accepted": False}
        assert client.post(f"/games/{game_id}/confirm").json() == {"accepted": False}

    def test_stop_removes_game(self, client, create_game):
        """A stopped game is forgotten."""
        game_id = create_game()
        assert client.post(f"/games/{game_id}/stop").json() == {"accepted": True}
        assert client.get(f"/games/{game_id}").status_code == 404


class TestMoves:
    """Card plays, signs and hand ordering."""

    def test_play_before_start_rejected(self, client, create_game):
        """No deal means no play."""
        game_id = create_game()
        response = client.post(f"/games/{game_id}/play", json={"card": "ASSO_DENARI"})
        assert response.json() == {"accepted": False}

    def test_play_unknown_player(self, client, create_game):
        """Unknown player ids give 404."""
        game_id = create_game()
        response = client.post(
            f"/games/{game_id}/play", json={"card": "ASSO_DENARI", "player_id": "P7"}
        )
        assert response.status_code == 404

    def test_play_accepted(self, client, human_turn_game):
        """The leading human plays a card from hand."""
        hand = client.get(f"/games/{human_turn_game}").json()["snapshot"]["human_hand"]
        response = client.post(f"/games/{human_turn_game}/play", json={"card": hand[0]})
        assert response.json() == {"accepted": True}
        game = client.get(f"/games/{human_turn_game}").json()
        assert game["snapshot"]["table_cards"] == [hand[0]]
        assert game["current_player_id"] == "P2"

    def test_sign(self, client, human_turn_game):
        """The leader may sign once."""
        url = f"/games/{human_turn_game}/sign"
        assert client.post(url, json={"sign": "BUSSO"}).json() == {"accepted": True}
        assert client.post(url, json={"sign": "VOLO"}).json() == {"accepted": False}

    def test_invalid_sign(self, client, human_turn_game):
        """Unknown sign names are rejected by validation."""
        response = client.post(f"/games/{human_turn_game}/sign", json={"sign": "WINK"})
        assert response.status_code == 422

    def test_move_card(self, client, human_turn_game):
        """Reordering returns the new hand."""
        before = client.get(f"/games/{human_turn_game}").json()["snapshot"]["human_hand"]
        response = client.post(
            f"/games/{human_turn_game}/hand/move", json={"from_index": 0, "to_index": 10}
        )
        assert response.json()["hand"] == before[1:] + before[:1]

    def test_move_card_bad_index(self, client, human_turn_game):
        """An invalid source index gives 400."""
        response = client.post(
            f"/games/{human_turn_game}/hand/move", json={"from_index": 12, "to_index": 0}
        )
        assert response.status_code == 400


class TestEvents:
    """Event history."""

    def test_events_after_start(self, client, human_turn_game):
        """Recorded events start with the deal opening."""
        data = client.get(f"/games/{human_turn_game}/events").json()
        assert data["game_id"] == human_turn_game
        kinds = [e["event_type"] for e in data["events"]]
        assert kinds[:2] == ["DEAL_STARTED", "TRICK_STARTED"]
        assert [e["sequence"] for e in data["events"]] == list(range(len(kinds)))
