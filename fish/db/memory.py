"""In-memory room store, used by the server process, tests and the CLI."""

from __future__ import annotations

import copy

from fish.game.models import Room


class VersionConflict(ValueError):
    """A room was saved from a stale copy."""


class InMemoryRoomRepository:
    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def get_room(self, code: str) -> Room | None:
        room = self._rooms.get(code)
        if room is None:
            return None
        return copy.deepcopy(room)

    def save_room(self, room: Room) -> None:
        existing = self._rooms.get(room.code)
        if existing is not None and existing.version != room.version:
            raise VersionConflict(
                f"Version conflict on {room.code}: "
                f"expected {room.version}, found {existing.version}"
            )
        saved = copy.deepcopy(room)
        saved.version = room.version + 1
        self._rooms[room.code] = saved

    def delete_room(self, code: str) -> None:
        self._rooms.pop(code, None)

    def get_room_for_player(self, player_id: str) -> Room | None:
        for room in self._rooms.values():
            if room.get_player(player_id) is not None:
                return copy.deepcopy(room)
        return None
