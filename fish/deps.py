"""Dependency container for request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fish.db.repository import RoomRepository
    from fish.game.engine import GameEngine
    from fish.lobby.manager import LobbyManager
    from fish.notify.publisher import RoomPublisher


@dataclass
class Deps:
    """Bundles all dependencies for handler functions."""

    engine: GameEngine
    lobby_manager: LobbyManager
    room_repo: RoomRepository
    publisher: RoomPublisher
