"""Request entry point for the Fish core.

A thin adapter: a transport hands over one decoded request per player
action and gets a JSON-ready response back. All rules live in fish/game/
and fish/lobby/; state pushes go out through the RoomPublisher.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from fish.deps import Deps
from fish.game.models import ClaimAssignment
from fish.utils.config import Settings
from fish.utils.constants import (
    ERR_BAD_REQUEST,
    ERR_INTERNAL,
    ERR_PLAYER_NOT_FOUND,
    ERR_UNKNOWN_ACTION,
)

logger = logging.getLogger("fish.handler")

# Module-level deps, built once per process
_deps: Deps | None = None


class BadRequest(ValueError):
    """The request payload is missing fields or has the wrong shape."""


def build_deps(settings: Settings | None = None) -> Deps:
    """Wire the in-memory store, engine, lobby and publisher together."""
    from fish.db.memory import InMemoryRoomRepository
    from fish.game.engine import GameEngine
    from fish.lobby.manager import LobbyManager
    from fish.notify.publisher import RoomPublisher
    from fish.utils.crypto import create_rng

    settings = settings or Settings.from_env()
    rng = create_rng(settings.seed)
    room_repo = InMemoryRoomRepository()
    publisher = RoomPublisher()
    if settings.webhook_url:
        from fish.utils.webhook import WebhookSink

        publisher.subscribe(
            WebhookSink(settings.webhook_url, timeout=settings.webhook_timeout)
        )
    engine = GameEngine(room_repo, rng, publisher)
    lobby_manager = LobbyManager(room_repo, engine, rng)
    return Deps(
        engine=engine,
        lobby_manager=lobby_manager,
        room_repo=room_repo,
        publisher=publisher,
    )


def _init_deps(overrides: Deps | None = None) -> Deps:
    """Initialize dependencies (lazily, once per process)."""
    global _deps
    if overrides is not None:
        _deps = overrides
        return _deps
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    _deps = build_deps(settings)
    return _deps


def handle_request(request: dict, deps: Deps | None = None) -> dict:
    """Dispatch one action request and return its response."""
    deps = deps or _deps or _init_deps()

    if not isinstance(request, dict):
        return _error("Request must be an object", ERR_BAD_REQUEST)

    action = request.get("action")
    handler = ACTIONS.get(action)
    if handler is None:
        return _error(f"Unknown action: {action}", ERR_UNKNOWN_ACTION)

    try:
        return handler(request, deps)
    except BadRequest as e:
        return _error(str(e), ERR_BAD_REQUEST)
    except Exception:
        logger.exception("Error processing %s", action)
        return _error("Internal error", ERR_INTERNAL)


def handle_message(raw: str, deps: Deps | None = None) -> str:
    """JSON-in, JSON-out wrapper around handle_request."""
    try:
        request = json.loads(raw)
    except json.JSONDecodeError:
        return json.dumps(_error("Invalid JSON", ERR_BAD_REQUEST))
    return json.dumps(handle_request(request, deps))


# --- Action handlers ---


def _create_room(req: dict, deps: Deps) -> dict:
    result = deps.lobby_manager.create_room(_str(req, "playerName"))
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True, "roomCode": result.room.code, "playerId": result.player_id}


def _join_room(req: dict, deps: Deps) -> dict:
    result = deps.lobby_manager.join_room(_str(req, "roomCode"), _str(req, "playerName"))
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True, "roomCode": result.room.code, "playerId": result.player_id}


def _leave_room(req: dict, deps: Deps) -> dict:
    result = deps.lobby_manager.leave_room(_str(req, "playerId"))
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True}


def _start_game(req: dict, deps: Deps) -> dict:
    if "roomCode" in req:
        code = _str(req, "roomCode")
    else:
        room = deps.room_repo.get_room_for_player(_str(req, "playerId"))
        if room is None:
            return _error("Player is not in a room", ERR_PLAYER_NOT_FOUND)
        code = room.code
    result = deps.lobby_manager.start_game(code)
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True}


def _ask_card(req: dict, deps: Deps) -> dict:
    result = deps.engine.ask_card(
        _str(req, "playerId"), _str(req, "targetPlayerId"), _str(req, "cardId")
    )
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True, "got": result.got}


def _pass_turn(req: dict, deps: Deps) -> dict:
    result = deps.engine.pass_turn(_str(req, "playerId"), _str(req, "targetPlayerId"))
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True}


def _make_claim(req: dict, deps: Deps) -> dict:
    raw = req.get("assignments")
    if not isinstance(raw, dict):
        raise BadRequest("assignments must map card ids to player ids")
    try:
        assignments = ClaimAssignment.from_mapping(raw)
    except ValueError as e:
        raise BadRequest(str(e)) from e
    result = deps.engine.make_claim(
        _str(req, "playerId"), _str(req, "halfSuit"), assignments
    )
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True, "result": result.message}


def _disconnect(req: dict, deps: Deps) -> dict:
    result = deps.lobby_manager.handle_disconnect(_str(req, "playerId"))
    if not result.success:
        return _error(result.error, result.code)
    return {"success": True}


def _reconnect(req: dict, deps: Deps) -> dict:
    player_id = _str(req, "playerId")
    result = deps.engine.mark_reconnected(player_id)
    if not result.success:
        return _error(result.error, result.code)
    return _get_state(req, deps)


def _get_state(req: dict, deps: Deps) -> dict:
    view = deps.engine.get_state_for(_str(req, "playerId"))
    if view is None:
        return _error("Player is not in a room", ERR_PLAYER_NOT_FOUND)
    return {"success": True, "state": view.to_dict()}


ACTIONS: dict[str, Callable[[dict, Deps], dict]] = {
    "createRoom": _create_room,
    "joinRoom": _join_room,
    "leaveRoom": _leave_room,
    "startGame": _start_game,
    "askCard": _ask_card,
    "passTurn": _pass_turn,
    "makeClaim": _make_claim,
    "disconnect": _disconnect,
    "reconnect": _reconnect,
    "getState": _get_state,
}


def _str(req: dict, key: str) -> str:
    value: Any = req.get(key)
    if not isinstance(value, str):
        raise BadRequest(f"Missing or invalid field: {key}")
    return value


def _error(message: str | None, code: str | None) -> dict:
    return {"success": False, "error": message, "code": code}
