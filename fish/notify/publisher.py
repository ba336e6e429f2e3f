"""Room-changed fan-out: builds per-player views after each mutation."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from fish.game.models import Room
from fish.game.views import PlayerStateView, build_player_view

logger = logging.getLogger("fish.publisher")


@dataclass
class RoomChanged:
    """A room's state changed; `views` holds one projection per seated player."""

    room_code: str
    action: str
    version: int
    views: dict[str, PlayerStateView] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "roomCode": self.room_code,
            "action": self.action,
            "version": self.version,
            "states": {pid: view.to_dict() for pid, view in self.views.items()},
        }


Sink = Callable[[RoomChanged], None]


class RoomPublisher:
    """Delivers RoomChanged events to subscribed sinks.

    Events are queued per room while the room lock is held and delivered
    after it is released, so a slow sink never holds up play. One thread at
    a time drains a room's queue, which keeps each room's events in order.
    A failing sink is logged and skipped; it never fails the game action
    that triggered it.
    """

    def __init__(self) -> None:
        self._sinks: list[Sink] = []
        self._pending: dict[str, deque[RoomChanged]] = {}
        self._draining: set[str] = set()
        self._guard = threading.Lock()

    def subscribe(self, sink: Sink) -> None:
        self._sinks.append(sink)

    def unsubscribe(self, sink: Sink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def enqueue(self, room: Room, action: str) -> RoomChanged:
        """Snapshot the room for every seated player and queue the event."""
        event = RoomChanged(
            room_code=room.code,
            action=action,
            version=room.version,
            views={p.player_id: build_player_view(room, p.player_id) for p in room.players},
        )
        with self._guard:
            self._pending.setdefault(room.code, deque()).append(event)
        return event

    def flush(self, room_code: str) -> None:
        """Deliver queued events for a room.

        Returns at once if another thread is already draining that room;
        that thread delivers whatever was queued here.
        """
        with self._guard:
            if room_code in self._draining or room_code not in self._pending:
                return
            self._draining.add(room_code)
        while True:
            with self._guard:
                queue = self._pending.get(room_code)
                if not queue:
                    self._pending.pop(room_code, None)
                    self._draining.discard(room_code)
                    return
                event = queue.popleft()
            try:
                self._deliver(event)
            except BaseException:
                with self._guard:
                    self._draining.discard(room_code)
                raise

    def publish(self, room: Room, action: str) -> RoomChanged:
        """Queue and deliver in one step, for callers outside any room lock."""
        event = self.enqueue(room, action)
        self.flush(room.code)
        return event

    def _deliver(self, event: RoomChanged) -> None:
        for sink in list(self._sinks):
            try:
                sink(event)
            except Exception:
                logger.exception(
                    "Sink failed for room %s (%s)", event.room_code, event.action
                )
