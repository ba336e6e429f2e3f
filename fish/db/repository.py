"""Repository protocol interface for Fish room storage."""

from __future__ import annotations

from typing import Protocol

from fish.game.models import Room


class RoomRepository(Protocol):
    def get_room(self, code: str) -> Room | None:
        ...

    def save_room(self, room: Room) -> None:
        ...

    def delete_room(self, code: str) -> None:
        ...

    def get_room_for_player(self, player_id: str) -> Room | None:
        ...
