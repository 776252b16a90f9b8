"""Tests for the FastAPI web application."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

import shogi_online.web.app as web_app
from shogi_online.config import DEFAULT_SERVER_CONFIG, ServerConfig
from shogi_online.game.sfen import INITIAL_SFEN


@pytest.fixture
def client() -> Iterator[TestClient]:
    web_app._games.clear()
    yield TestClient(web_app.app)
    web_app._games.clear()


def _new_game(client: TestClient, sfen: str | None = None) -> str:
    body = {} if sfen is None else {"sfen": sfen}
    res = client.post("/api/new-game", json=body)
    assert res.status_code == 200
    return res.json()["game_id"]


class TestNewGame:
    def test_create_game(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={})
        assert res.status_code == 200
        data = res.json()
        assert "game_id" in data
        state = data["state"]
        assert state["sfen"] == INITIAL_SFEN
        assert state["current_turn"] == "black"
        assert state["status"] == "playing"
        assert len(state["squares"]) == 9
        assert state["squares"][8][4] == {"type": "king", "owner": "black", "is_promoted": False}
        assert state["hands"] == {"black": {}, "white": {}}

    def test_create_from_sfen(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={"sfen": "4k4/9/9/9/9/9/9/9/4K4 w 2P 5"})
        assert res.status_code == 200
        state = res.json()["state"]
        assert state["current_turn"] == "white"
        assert state["hands"]["black"] == {"pawn": 2}

    def test_invalid_sfen(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={"sfen": "not a position"})
        assert res.status_code == 400


class TestMakeMove:
    def test_valid_move(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.post("/api/move", json={"game_id": game_id, "move": "7g7f"})
        assert res.status_code == 200
        state = res.json()["state"]
        assert state["current_turn"] == "white"
        assert state["last_move"] == "7g7f"
        assert state["history"] == ["▲7六歩"]

    def test_illegal_move(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.post("/api/move", json={"game_id": game_id, "move": "7g7e"})
        assert res.status_code == 400
        assert res.json()["detail"]["reason"] == "wrong_shape"

    def test_wrong_turn(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.post("/api/move", json={"game_id": game_id, "move": "3c3d"})
        assert res.status_code == 400
        assert res.json()["detail"]["reason"] == "wrong_turn"

    def test_nifu_drop(self, client: TestClient) -> None:
        game_id = _new_game(client, "4k4/9/9/9/9/9/4P4/9/4K4 b P 1")
        res = client.post("/api/move", json={"game_id": game_id, "move": "P*5e"})
        assert res.status_code == 400
        detail = res.json()["detail"]
        assert detail["reason"] == "nifu"
        assert "二歩" in detail["message"]

    def test_malformed_move(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.post("/api/move", json={"game_id": game_id, "move": "xyz"})
        assert res.status_code == 400

    def test_game_not_found(self, client: TestClient) -> None:
        res = client.post("/api/move", json={"game_id": "nonexistent", "move": "7g7f"})
        assert res.status_code == 404


class TestGetState:
    def test_get_state(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.get(f"/api/state/{game_id}")
        assert res.status_code == 200
        assert res.json()["sfen"] == INITIAL_SFEN

    def test_not_found(self, client: TestClient) -> None:
        res = client.get("/api/state/nonexistent")
        assert res.status_code == 404


class TestValidMoves:
    def test_board_piece(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.get(f"/api/valid-moves/{game_id}", params={"rank": 6, "file": 6})
        assert res.status_code == 200
        assert res.json()["moves"] == [{"rank": 5, "file": 6}]

    def test_off_board_square(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.get(f"/api/valid-moves/{game_id}", params={"rank": 9, "file": -1})
        assert res.status_code == 200
        assert res.json()["moves"] == []

    def test_drop_squares(self, client: TestClient) -> None:
        game_id = _new_game(client, "4k4/9/9/9/9/9/4P4/9/4K4 b P 1")
        res = client.get(f"/api/valid-moves/{game_id}", params={"piece": "P"})
        moves = res.json()["moves"]
        assert {"rank": 4, "file": 3} in moves
        assert {"rank": 4, "file": 4} not in moves

    def test_missing_selection(self, client: TestClient) -> None:
        game_id = _new_game(client)
        assert client.get(f"/api/valid-moves/{game_id}").status_code == 400
        res = client.get(f"/api/valid-moves/{game_id}", params={"piece": "K"})
        assert res.status_code == 400


class TestResignAndUndo:
    def test_resign(self, client: TestClient) -> None:
        game_id = _new_game(client)
        res = client.post(f"/api/resign/{game_id}")
        assert res.status_code == 200
        assert res.json()["status"] == "resignation"
        assert res.json()["winner"] == "white"

        res = client.post("/api/move", json={"game_id": game_id, "move": "7g7f"})
        assert res.status_code == 400
        assert res.json()["detail"]["reason"] == "game_over"

    def test_undo(self, client: TestClient) -> None:
        game_id = _new_game(client)
        client.post("/api/move", json={"game_id": game_id, "move": "7g7f"})
        res = client.post(f"/api/undo/{game_id}")
        assert res.status_code == 200
        assert res.json()["sfen"] == INITIAL_SFEN

    def test_undo_at_start(self, client: TestClient) -> None:
        game_id = _new_game(client)
        assert client.post(f"/api/undo/{game_id}").status_code == 400


class TestValidate:
    SFEN = "4k4/9/9/9/9/9/4P4/9/4K4 b P 1"

    def test_nifu(self, client: TestClient) -> None:
        res = client.post("/api/validate", json={"sfen": self.SFEN, "move": "P*5e"})
        assert res.status_code == 200
        assert res.json()["is_valid"] is False
        assert res.json()["reason"] == "nifu"

    def test_legal_drop(self, client: TestClient) -> None:
        res = client.post("/api/validate", json={"sfen": self.SFEN, "move": "P*4e"})
        assert res.json() == {"is_valid": True, "reason": None, "message": None}

    def test_not_in_hand(self, client: TestClient) -> None:
        res = client.post("/api/validate", json={"sfen": self.SFEN, "move": "G*4e"})
        assert res.json()["reason"] == "not_in_hand"

    def test_board_move(self, client: TestClient) -> None:
        res = client.post("/api/validate", json={"sfen": INITIAL_SFEN, "move": "2g2e"})
        assert res.json()["reason"] == "wrong_shape"

    def test_does_not_store_games(self, client: TestClient) -> None:
        client.post("/api/validate", json={"sfen": INITIAL_SFEN, "move": "7g7f"})
        assert web_app._games == {}


class TestEviction:
    def test_oldest_game_evicted(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(web_app, "config", ServerConfig(max_games=2))
        first = _new_game(client)
        _new_game(client)
        _new_game(client)
        assert len(web_app._games) == 2
        assert client.get(f"/api/state/{first}").status_code == 404


class TestMain:
    def test_reads_env_at_startup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple[str, int]] = []

        def fake_run(app: object, host: str, port: int) -> None:
            calls.append((host, port))

        monkeypatch.setattr("uvicorn.run", fake_run)
        monkeypatch.setattr(web_app, "config", DEFAULT_SERVER_CONFIG)
        monkeypatch.delenv("SHOGI_HOST", raising=False)
        monkeypatch.setenv("SHOGI_PORT", "8123")
        monkeypatch.setenv("SHOGI_MAX_GAMES", "3")
        web_app.main()
        assert calls == [(DEFAULT_SERVER_CONFIG.host, 8123)]
        assert web_app.config.max_games == 3

    def test_bad_env_fails_at_startup_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(web_app, "config", DEFAULT_SERVER_CONFIG)
        monkeypatch.setenv("SHOGI_PORT", "http")
        with pytest.raises(ValueError):
            web_app.main()
