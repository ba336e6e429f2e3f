"""Tests for the request handler and settings."""

import json

import pytest

from fish.deps import Deps
from fish.handler import build_deps, handle_message, handle_request
from fish.utils.config import Settings
from fish.utils.constants import (
    ERR_BAD_REQUEST,
    ERR_GAME_IN_PROGRESS,
    ERR_INTERNAL,
    ERR_NOT_YOUR_TURN,
    ERR_PLAYER_NOT_FOUND,
    ERR_UNKNOWN_ACTION,
)

from tests.conftest import deal_round_robin


@pytest.fixture
def deps(engine, lobby, room_repo, publisher):
    return Deps(engine=engine, lobby_manager=lobby, room_repo=room_repo, publisher=publisher)


@pytest.fixture
def seated(deps):
    """Four players seated through the handler, game started, known deal."""
    created = handle_request({"action": "createRoom", "playerName": "A"}, deps)
    code = created["roomCode"]
    ids = {"A": created["playerId"]}
    for name in "BCD":
        ids[name] = handle_request(
            {"action": "joinRoom", "roomCode": code, "playerName": name}, deps
        )["playerId"]
    assert handle_request({"action": "startGame", "roomCode": code}, deps)["success"]
    deal_round_robin(deps.room_repo, code)
    return code, ids


class TestDispatch:
    def test_unknown_action(self, deps):
        response = handle_request({"action": "fly"}, deps)
        assert response == {"success": False, "error": "Unknown action: fly", "code": ERR_UNKNOWN_ACTION}

    def test_non_object(self, deps):
        assert handle_request(["askCard"], deps)["code"] == ERR_BAD_REQUEST

    def test_missing_field(self, deps):
        response = handle_request({"action": "createRoom"}, deps)
        assert response["code"] == ERR_BAD_REQUEST
        assert "playerName" in response["error"]

    def test_unexpected_error_is_internal(self, deps, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(deps.lobby_manager, "create_room", explode)
        response = handle_request({"action": "createRoom", "playerName": "A"}, deps)
        assert response["code"] == ERR_INTERNAL

    def test_handle_message_round_trip(self, deps):
        raw = handle_message(json.dumps({"action": "createRoom", "playerName": "A"}), deps)
        response = json.loads(raw)
        assert response["success"]
        assert len(response["roomCode"]) == 4

    def test_handle_message_bad_json(self, deps):
        assert json.loads(handle_message("{nope", deps))["code"] == ERR_BAD_REQUEST


class TestActions:
    def test_ask_hit(self, deps, seated):
        _, ids = seated
        response = handle_request(
            {"action": "askCard", "playerId": ids["A"], "targetPlayerId": ids["B"], "cardId": "3_hearts"},
            deps,
        )
        assert response == {"success": True, "got": True}

    def test_ask_out_of_turn(self, deps, seated):
        _, ids = seated
        response = handle_request(
            {"action": "askCard", "playerId": ids["B"], "targetPlayerId": ids["A"], "cardId": "2_hearts"},
            deps,
        )
        assert response["code"] == ERR_NOT_YOUR_TURN

    def test_claim(self, deps, seated):
        _, ids = seated
        assignments = {
            "2_hearts": ids["A"], "3_hearts": ids["B"], "4_hearts": ids["C"],
            "5_hearts": ids["D"], "6_hearts": ids["A"], "7_hearts": ids["B"],
        }
        response = handle_request(
            {"action": "makeClaim", "playerId": ids["A"], "halfSuit": "low_hearts",
             "assignments": assignments},
            deps,
        )
        assert response["success"]
        assert "correctly claimed Low Hearts" in response["result"]

    def test_claim_bad_card_id(self, deps, seated):
        _, ids = seated
        response = handle_request(
            {"action": "makeClaim", "playerId": ids["A"], "halfSuit": "low_hearts",
             "assignments": {"8_hearts": ids["A"]}},
            deps,
        )
        assert response["code"] == ERR_BAD_REQUEST

    def test_claim_assignments_not_a_mapping(self, deps, seated):
        _, ids = seated
        response = handle_request(
            {"action": "makeClaim", "playerId": ids["A"], "halfSuit": "low_hearts",
             "assignments": ["2_hearts"]},
            deps,
        )
        assert response["code"] == ERR_BAD_REQUEST

    def test_start_by_player_id(self, deps):
        created = handle_request({"action": "createRoom", "playerName": "A"}, deps)
        for name in "BCD":
            handle_request({"action": "joinRoom", "roomCode": created["roomCode"], "playerName": name}, deps)
        response = handle_request({"action": "startGame", "playerId": created["playerId"]}, deps)
        assert response == {"success": True}

    def test_leave_started_game(self, deps, seated):
        _, ids = seated
        response = handle_request({"action": "leaveRoom", "playerId": ids["C"]}, deps)
        assert response["code"] == ERR_GAME_IN_PROGRESS

    def test_disconnect_and_reconnect(self, deps, seated):
        _, ids = seated
        assert handle_request({"action": "disconnect", "playerId": ids["A"]}, deps)["success"]
        state = handle_request({"action": "getState", "playerId": ids["A"]}, deps)["state"]
        assert state["currentTurn"] == 1
        assert not state["players"][0]["connected"]

        response = handle_request({"action": "reconnect", "playerId": ids["A"]}, deps)
        assert response["success"]
        assert response["state"]["players"][0]["connected"]

    def test_get_state_unknown_player(self, deps):
        response = handle_request({"action": "getState", "playerId": "ghost"}, deps)
        assert response["code"] == ERR_PLAYER_NOT_FOUND


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings == Settings()

    def test_from_env(self):
        settings = Settings.from_env({
            "FISH_WEBHOOK_URL": "https://example.test/hook",
            "FISH_WEBHOOK_TIMEOUT": "2.5",
            "FISH_SEED": "11",
            "FISH_LOG_LEVEL": "debug",
        })
        assert settings.webhook_url == "https://example.test/hook"
        assert settings.webhook_timeout == 2.5
        assert settings.seed == 11
        assert settings.log_level == "DEBUG"

    def test_build_deps_wires_webhook(self):
        deps = build_deps(Settings(webhook_url="https://example.test/hook"))
        assert len(deps.publisher._sinks) == 1

    def test_build_deps_seeded(self):
        rooms = []
        for _ in range(2):
            deps = build_deps(Settings(seed=5))
            rooms.append(handle_request({"action": "createRoom", "playerName": "A"}, deps)["roomCode"])
        assert rooms[0] == rooms[1]
