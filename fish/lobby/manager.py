"""Room and seat management for Fish."""

from __future__ import annotations

import json
import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

from fish.db.repository import RoomRepository
from fish.game.engine import ActionResult, GameEngine
from fish.game.models import LogEntry, Player, Room
from fish.utils.constants import (
    ERR_GAME_IN_PROGRESS,
    ERR_INVALID_NAME,
    ERR_PLAYER_NOT_FOUND,
    ERR_ROOM_FULL,
    ERR_ROOM_NOT_FOUND,
    LOG_INFO,
    LOG_SYSTEM,
    MAX_PLAYERS,
)
from fish.utils.crypto import generate_room_code

logger = logging.getLogger("fish.lobby")


@dataclass
class LobbyResult:
    success: bool
    room: Room | None = None
    player_id: str | None = None
    error: str | None = None
    code: str | None = None


class LobbyManager:
    def __init__(
        self,
        room_repo: RoomRepository,
        game_engine: GameEngine,
        rng: random.Random | None = None,
    ) -> None:
        self._room_repo = room_repo
        self._engine = game_engine
        self._rng = rng
        self._create_lock = threading.Lock()

    def create_room(self, player_name: str) -> LobbyResult:
        """Create a new room. The creator takes seat 0."""
        name = _clean_name(player_name)
        if name is None:
            return LobbyResult(success=False, error="Name required", code=ERR_INVALID_NAME)

        with self._create_lock:
            code = generate_room_code(self._rng)
            while self._room_repo.get_room(code) is not None:
                code = generate_room_code(self._rng)

            player = Player(player_id=Player.new_player_id(), name=name)
            room = Room(code=code, players=[player], created_at=_now())
            self._room_repo.save_room(room)

        logger.info(json.dumps({"event": "room_created", "room": code}))
        with self._engine.room_lock(code):
            room = self._room_repo.get_room(code)
            self._engine.publish(room, "create")
        return LobbyResult(success=True, room=room, player_id=player.player_id)

    def join_room(self, code: str, player_name: str) -> LobbyResult:
        """Take the next free seat in a room that has not started."""
        name = _clean_name(player_name)
        if name is None:
            return LobbyResult(success=False, error="Name required", code=ERR_INVALID_NAME)

        code = code.strip().upper()
        with self._engine.room_lock(code):
            room = self._room_repo.get_room(code)
            if room is None:
                return LobbyResult(
                    success=False, error="Room not found", code=ERR_ROOM_NOT_FOUND
                )

            if room.game_started:
                return LobbyResult(
                    success=False, error="Game already in progress",
                    code=ERR_GAME_IN_PROGRESS,
                )

            if len(room.players) >= MAX_PLAYERS:
                return LobbyResult(
                    success=False, error=f"Room is full (max {MAX_PLAYERS})",
                    code=ERR_ROOM_FULL,
                )

            player = Player(player_id=Player.new_player_id(), name=name)
            room.players.append(player)
            room.log.append(LogEntry(f"{name} joined", LOG_INFO, _now()))
            self._room_repo.save_room(room)
            room = self._room_repo.get_room(code)
            logger.info(json.dumps({
                "event": "player_joined",
                "room": code,
                "player": player.player_id,
                "seat": len(room.players) - 1,
            }))
            self._engine.publish(room, "join")

        return LobbyResult(success=True, room=room, player_id=player.player_id)

    def leave_room(self, player_id: str) -> LobbyResult:
        """Give up a seat before the game starts. Empty rooms are deleted."""
        room = self._room_repo.get_room_for_player(player_id)
        if room is None:
            return LobbyResult(
                success=False, error="Player is not in a room", code=ERR_PLAYER_NOT_FOUND
            )

        with self._engine.room_lock(room.code):
            room = self._room_repo.get_room(room.code)
            player = room.get_player(player_id) if room else None
            if player is None:
                return LobbyResult(
                    success=False, error="Player is not in a room",
                    code=ERR_PLAYER_NOT_FOUND,
                )

            if room.game_started:
                return LobbyResult(
                    success=False, error="Cannot leave a game in progress",
                    code=ERR_GAME_IN_PROGRESS,
                )

            room.players = [p for p in room.players if p.player_id != player_id]
            logger.info(json.dumps({
                "event": "player_left", "room": room.code, "player": player_id,
            }))
            if not room.players:
                self._room_repo.delete_room(room.code)
                self._engine.drop_room_lock(room.code)
                logger.info(json.dumps({"event": "room_deleted", "room": room.code}))
                return LobbyResult(success=True, room=None, player_id=player_id)

            room.log.append(LogEntry(f"{player.name} left", LOG_SYSTEM, _now()))
            self._room_repo.save_room(room)
            room = self._room_repo.get_room(room.code)
            self._engine.publish(room, "leave")

        return LobbyResult(success=True, room=room, player_id=player_id)

    def start_game(self, code: str) -> ActionResult:
        return self._engine.start_game(code.strip().upper())

    def handle_disconnect(self, player_id: str) -> LobbyResult | ActionResult:
        """Connection lost: free the seat in a lobby, flag it in a game."""
        room = self._room_repo.get_room_for_player(player_id)
        if room is None:
            return LobbyResult(
                success=False, error="Player is not in a room", code=ERR_PLAYER_NOT_FOUND
            )
        if not room.game_started:
            return self.leave_room(player_id)
        return self._engine.mark_disconnected(player_id)

    def get_room(self, code: str) -> Room | None:
        return self._room_repo.get_room(code.strip().upper())


def _clean_name(name: str) -> str | None:
    if not isinstance(name, str):
        return None
    name = name.strip()
    return name or None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
