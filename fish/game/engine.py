"""Game engine for Fish: dealing, asks, passes and claims."""

from __future__ import annotations

import json
import logging
import random
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterator

from fish.db.repository import RoomRepository
from fish.game.deck import create_deck, deal, shuffle_cards
from fish.game.halfsuits import sort_hand
from fish.game.integrity import InvariantViolation
from fish.game.models import Card, ClaimAssignment, LogEntry, Room, team_of
from fish.game.scoring import (
    apply_claim,
    claim_message,
    evaluate_claim,
    game_over_message,
    winning_team,
)
from fish.game.validator import validate_ask, validate_claim, validate_pass
from fish.game.views import PlayerStateView, build_player_view
from fish.utils.constants import (
    ERR_ALREADY_STARTED,
    ERR_INSUFFICIENT_PLAYERS,
    ERR_PLAYER_NOT_FOUND,
    ERR_ROOM_NOT_FOUND,
    ERR_UNEVEN_TEAMS,
    LOG_CLAIM_FAIL,
    LOG_CLAIM_PARTIAL,
    LOG_CLAIM_SUCCESS,
    LOG_FAIL,
    LOG_SUCCESS,
    LOG_SYSTEM,
    LOG_TURN,
    MIN_PLAYERS,
    NUM_TEAMS,
    OUTCOME_CORRECT,
    OUTCOME_WRONG_SEAT,
)
from fish.utils.crypto import create_rng

if TYPE_CHECKING:
    from fish.notify.publisher import RoomPublisher

logger = logging.getLogger("fish.engine")

CLAIM_LOG_KINDS = {
    OUTCOME_CORRECT: LOG_CLAIM_SUCCESS,
    OUTCOME_WRONG_SEAT: LOG_CLAIM_PARTIAL,
}


@dataclass
class ActionResult:
    success: bool
    room: Room | None
    error: str | None = None
    code: str | None = None
    events: list[dict] = field(default_factory=list)
    got: bool | None = None
    message: str | None = None


class GameEngine:
    """Applies game actions to rooms held in a RoomRepository.

    Every action runs under the room's lock, works on a fresh copy from the
    repository, validates completely before touching it, and saves only on
    success.
    """

    def __init__(
        self,
        repo: RoomRepository,
        rng: random.Random | None = None,
        publisher: RoomPublisher | None = None,
    ) -> None:
        self._repo = repo
        self._rng = rng or create_rng()
        self._publisher = publisher
        self._room_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def room_lock(self, code: str) -> Iterator[None]:
        """Serialize all mutations of one room.

        Locks exist only for stored rooms; an unknown code runs unlocked and
        finds nothing to mutate. Updates queued with publish() go out to the
        sinks after the lock is released.
        """
        with self._locks_guard:
            lock = self._room_locks.get(code)
            if lock is None and self._repo.get_room(code) is not None:
                lock = self._room_locks[code] = threading.Lock()
        try:
            if lock is None:
                yield
            else:
                with lock:
                    yield
        finally:
            if self._publisher is not None:
                self._publisher.flush(code)

    def drop_room_lock(self, code: str) -> None:
        """Forget the lock of a deleted room."""
        with self._locks_guard:
            self._room_locks.pop(code, None)

    def get_room(self, code: str) -> Room | None:
        return self._repo.get_room(code)

    def get_state_for(self, player_id: str) -> PlayerStateView | None:
        room = self._repo.get_room_for_player(player_id)
        if room is None:
            return None
        return build_player_view(room, player_id)

    def publish(self, room: Room, action: str) -> None:
        """Queue a RoomChanged; call with the room lock held."""
        if self._publisher is not None:
            self._publisher.enqueue(room, action)

    def start_game(self, code: str) -> ActionResult:
        """Deal the deck and hand the first turn to seat 0."""
        with self.room_lock(code):
            room = self._repo.get_room(code)
            if room is None:
                return ActionResult(
                    success=False, room=None,
                    error="Room not found", code=ERR_ROOM_NOT_FOUND,
                )
            if room.game_started:
                return ActionResult(
                    success=False, room=room,
                    error="Game already started", code=ERR_ALREADY_STARTED,
                )
            if len(room.players) < MIN_PLAYERS:
                return ActionResult(
                    success=False, room=room,
                    error=f"Need at least {MIN_PLAYERS} players",
                    code=ERR_INSUFFICIENT_PLAYERS,
                )
            if len(room.players) % NUM_TEAMS:
                return ActionResult(
                    success=False, room=room,
                    error="Teams must be even", code=ERR_UNEVEN_TEAMS,
                )

            deck = shuffle_cards(create_deck(), self._rng)
            hands = deal(deck, len(room.players))
            for player, hand in zip(room.players, hands):
                player.hand = hand

            room.game_started = True
            room.current_turn = 0
            self._log(room, "Game started!", LOG_SYSTEM)
            self._log(room, f"{room.players[0].name}'s turn", LOG_TURN)

            event = {
                "event": "game_start",
                "room": code,
                "players_cards": {p.player_id: len(p.hand) for p in room.players},
            }
            return self._commit(room, "start", [event])

    def ask_card(self, asker_id: str, target_id: str, card_id: str) -> ActionResult:
        """Ask an opponent for a card.

        A hit moves the card and keeps the turn; a miss hands the turn to
        the target.
        """
        code = self._code_for(asker_id)
        if code is None:
            return self._player_not_found()

        with self.room_lock(code):
            room = self._repo.get_room(code)
            if room is None:
                return self._player_not_found()

            check = validate_ask(room, asker_id, target_id, card_id)
            if not check.valid:
                return ActionResult(
                    success=False, room=room, error=check.error, code=check.code
                )

            card = Card.from_id(card_id)
            asker = room.get_player(asker_id)
            target = room.get_player(target_id)
            got = target.holds(card)
            events = []

            if got:
                target.hand.remove(card)
                asker.hand = sort_hand(asker.hand + [card])
                self._log(
                    room,
                    f"{asker.name} asked {target.name} for {card.display()} ✓ Got it!",
                    LOG_SUCCESS,
                )
            else:
                self._log(
                    room,
                    f"{asker.name} asked {target.name} for {card.display()} ✗ Don't have it",
                    LOG_FAIL,
                )
                room.current_turn = room.seat_of(target_id)
                self._log(room, f"{target.name}'s turn", LOG_TURN)

            events.append({
                "event": "ask",
                "room": code,
                "asker": asker_id,
                "target": target_id,
                "card": card.id,
                "got": got,
            })
            if not got:
                self._advance_turn(room, events)

            result = self._commit(room, "ask", events)
            result.got = got
            return result

    def pass_turn(self, passer_id: str, target_id: str) -> ActionResult:
        """Hand the turn from an empty-handed player to a teammate."""
        code = self._code_for(passer_id)
        if code is None:
            return self._player_not_found()

        with self.room_lock(code):
            room = self._repo.get_room(code)
            if room is None:
                return self._player_not_found()

            check = validate_pass(room, passer_id, target_id)
            if not check.valid:
                return ActionResult(
                    success=False, room=room, error=check.error, code=check.code
                )

            passer = room.get_player(passer_id)
            target = room.get_player(target_id)
            room.current_turn = room.seat_of(target_id)
            self._log(room, f"{passer.name} passed turn to {target.name}", LOG_TURN)

            events = [{
                "event": "pass",
                "room": code,
                "from": passer_id,
                "to": target_id,
            }]
            self._advance_turn(room, events)
            return self._commit(room, "pass", events)

    def make_claim(
        self,
        claimer_id: str,
        half_suit: str,
        assignments: list[ClaimAssignment],
    ) -> ActionResult:
        """Declare the holder of every card in a half-suit.

        The half-suit leaves play whatever the outcome.
        """
        code = self._code_for(claimer_id)
        if code is None:
            return self._player_not_found()

        with self.room_lock(code):
            room = self._repo.get_room(code)
            if room is None:
                return self._player_not_found()

            check = validate_claim(room, claimer_id, half_suit, assignments)
            if not check.valid:
                return ActionResult(
                    success=False, room=room, error=check.error, code=check.code
                )

            claimer = room.get_player(claimer_id)
            claimer_team = team_of(room.seat_of(claimer_id))
            outcome = evaluate_claim(room, half_suit, assignments)
            scoring_team = apply_claim(room, claimer_team, half_suit, outcome)

            message = claim_message(claimer.name, claimer_team, half_suit, outcome)
            self._log(
                room, message, CLAIM_LOG_KINDS.get(outcome.outcome, LOG_CLAIM_FAIL)
            )

            events = [{
                "event": "claim",
                "room": code,
                "claimer": claimer_id,
                "half_suit": half_suit,
                "outcome": outcome.outcome,
                "scoring_team": scoring_team,
                "scores": list(room.scores),
            }]

            if room.is_finished:
                self._log(room, game_over_message(room), LOG_SYSTEM)
                events.append({
                    "event": "game_end",
                    "room": code,
                    "winner": winning_team(room),
                    "final_scores": list(room.scores),
                })
            else:
                self._advance_turn(room, events)

            result = self._commit(room, "claim", events)
            result.message = message
            return result

    def mark_disconnected(self, player_id: str) -> ActionResult:
        """Flag a seated player as gone; the seat keeps its hand and team."""
        return self._set_connected(player_id, False)

    def mark_reconnected(self, player_id: str) -> ActionResult:
        """Clear the disconnect flag for a returning player."""
        return self._set_connected(player_id, True)

    # --- Private helpers ---

    def _set_connected(self, player_id: str, connected: bool) -> ActionResult:
        code = self._code_for(player_id)
        if code is None:
            return self._player_not_found()

        with self.room_lock(code):
            room = self._repo.get_room(code)
            if room is None:
                return self._player_not_found()

            player = room.get_player(player_id)
            if player is None:
                return self._player_not_found()
            if player.connected == connected:
                return ActionResult(success=True, room=room)

            player.connected = connected
            action = "reconnect" if connected else "disconnect"
            self._log(room, f"{player.name} {action}ed", LOG_SYSTEM)
            events = [{"event": action, "room": code, "player": player_id}]

            if room.game_started and not room.is_finished:
                current = room.current_player
                if not (current.connected and current.hand):
                    self._advance_turn(room, events)

            return self._commit(room, action, events)

    def _advance_turn(self, room: Room, events: list[dict]) -> bool:
        """Move the turn to the nearest connected seat holding cards.

        Scans from the current seat forward, at most one full cycle.
        Returns False if no seat qualifies.
        """
        start = room.current_turn
        count = len(room.players)
        for step in range(count):
            seat = (start + step) % count
            player = room.players[seat]
            if player.hand and player.connected:
                room.current_turn = seat
                if seat != start:
                    self._log(room, f"{player.name}'s turn", LOG_TURN)
                    events.append({
                        "event": "turn_advance",
                        "room": room.code,
                        "from": start,
                        "to": seat,
                    })
                return True

        if not any(p.hand for p in room.players):
            raise InvariantViolation(
                f"Room {room.code}: no cards left in any hand with "
                f"{len(room.resolved_suits)} half-suits resolved"
            )

        self._log(room, "No connected players have cards remaining", LOG_SYSTEM)
        stalled = {"event": "stalled", "room": room.code, "turn": start}
        events.append(stalled)
        logger.warning(json.dumps(stalled))
        return False

    def _commit(self, room: Room, action: str, events: list[dict]) -> ActionResult:
        self._repo.save_room(room)
        room = self._repo.get_room(room.code)
        for event in events:
            logger.info(json.dumps(event))
        self.publish(room, action)
        return ActionResult(success=True, room=room, events=events)

    def _code_for(self, player_id: str) -> str | None:
        room = self._repo.get_room_for_player(player_id)
        return room.code if room else None

    @staticmethod
    def _player_not_found() -> ActionResult:
        return ActionResult(
            success=False, room=None,
            error="Player is not in a room", code=ERR_PLAYER_NOT_FOUND,
        )

    def _log(self, room: Room, message: str, kind: str) -> None:
        room.log.append(LogEntry(message=message, kind=kind, timestamp=self._now()))

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
