"""Validation logic for Fish actions.

Validates asks, turn passes, and claims against the current room state.
Nothing here mutates the room: every check runs before the engine applies
an action, so a failed action leaves no trace.
"""

from __future__ import annotations

from dataclasses import dataclass

from fish.game.halfsuits import cards_of, half_suit_of, is_half_suit
from fish.game.models import Card, ClaimAssignment, Room, team_of
from fish.utils.constants import (
    CARDS_PER_HALF_SUIT,
    ERR_CARD_ALREADY_HELD,
    ERR_EMPTY_HAND,
    ERR_GAME_FINISHED,
    ERR_GAME_NOT_STARTED,
    ERR_HALF_SUIT_NOT_HELD,
    ERR_HALF_SUIT_RESOLVED,
    ERR_INCOMPLETE_CLAIM,
    ERR_INVALID_CARD,
    ERR_NOT_TEAMMATE,
    ERR_NOT_YOUR_TEAM_TURN,
    ERR_NOT_YOUR_TURN,
    ERR_PLAYER_NOT_FOUND,
    ERR_SAME_TEAM,
    ERR_STILL_HAS_CARDS,
    ERR_TARGET_EMPTY_HAND,
    ERR_UNKNOWN_HALF_SUIT,
)


@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None
    code: str | None = None


OK = ValidationResult(True)


def _fail(code: str, error: str) -> ValidationResult:
    return ValidationResult(False, error=error, code=code)


def validate_in_progress(room: Room) -> ValidationResult:
    """A game must be dealt and not yet over."""
    if not room.game_started:
        return _fail(ERR_GAME_NOT_STARTED, "Game not in progress")
    if room.is_finished:
        return _fail(ERR_GAME_FINISHED, "Game is over")
    return OK


def validate_ask(
    room: Room, asker_id: str, target_id: str, card_id: str
) -> ValidationResult:
    """Check an ask request.

    Rules:
    - It is the asker's seat's turn and the asker holds cards
    - The target sits on the other team and holds cards
    - The asker holds another card of the same half-suit, but not this one
    """
    result = validate_in_progress(room)
    if not result.valid:
        return result

    asker_seat = room.seat_of(asker_id)
    target_seat = room.seat_of(target_id)
    if asker_seat is None:
        return _fail(ERR_PLAYER_NOT_FOUND, "You are not in this room")
    if target_seat is None:
        return _fail(ERR_PLAYER_NOT_FOUND, "Target player not found")

    if room.current_turn != asker_seat:
        return _fail(ERR_NOT_YOUR_TURN, "Not your turn")

    asker = room.players[asker_seat]
    target = room.players[target_seat]

    if not asker.hand:
        return _fail(ERR_EMPTY_HAND, "You have no cards")

    if team_of(asker_seat) == team_of(target_seat):
        return _fail(ERR_SAME_TEAM, "Can only ask opponents")

    if not target.hand:
        return _fail(ERR_TARGET_EMPTY_HAND, "Target has no cards")

    try:
        card = Card.from_id(card_id)
    except ValueError:
        return _fail(ERR_INVALID_CARD, f"Unknown card: {card_id}")

    half_suit = half_suit_of(card)
    if not any(half_suit_of(c) == half_suit for c in asker.hand):
        return _fail(
            ERR_HALF_SUIT_NOT_HELD, "You don't have any cards in this half-suit"
        )

    if asker.holds(card):
        return _fail(ERR_CARD_ALREADY_HELD, "You already have this card")

    return OK


def validate_pass(room: Room, passer_id: str, target_id: str) -> ValidationResult:
    """Check a turn pass: only an empty-handed player passes, to a teammate with cards."""
    result = validate_in_progress(room)
    if not result.valid:
        return result

    passer_seat = room.seat_of(passer_id)
    target_seat = room.seat_of(target_id)
    if passer_seat is None:
        return _fail(ERR_PLAYER_NOT_FOUND, "You are not in this room")
    if target_seat is None:
        return _fail(ERR_PLAYER_NOT_FOUND, "Target player not found")

    if room.current_turn != passer_seat:
        return _fail(ERR_NOT_YOUR_TURN, "Not your turn")

    if room.players[passer_seat].hand:
        return _fail(ERR_STILL_HAS_CARDS, "You still have cards")

    if passer_seat == target_seat or team_of(passer_seat) != team_of(target_seat):
        return _fail(ERR_NOT_TEAMMATE, "Can only pass to teammate")

    if not room.players[target_seat].hand:
        return _fail(ERR_TARGET_EMPTY_HAND, "Teammate has no cards either")

    return OK


def validate_claim(
    room: Room,
    claimer_id: str,
    half_suit: str,
    assignments: list[ClaimAssignment],
) -> ValidationResult:
    """Check a claim before it is scored.

    The claimer's team must hold the turn, the half-suit must be open, and
    the assignments must name every card of the half-suit exactly once,
    each to a seated player.
    """
    result = validate_in_progress(room)
    if not result.valid:
        return result

    claimer_seat = room.seat_of(claimer_id)
    if claimer_seat is None:
        return _fail(ERR_PLAYER_NOT_FOUND, "You are not in this room")

    if team_of(claimer_seat) != team_of(room.current_turn):
        return _fail(ERR_NOT_YOUR_TEAM_TURN, "Can only claim on your team's turn")

    if not is_half_suit(half_suit):
        return _fail(ERR_UNKNOWN_HALF_SUIT, f"Unknown half-suit: {half_suit}")

    if room.is_resolved(half_suit):
        return _fail(ERR_HALF_SUIT_RESOLVED, "Half-suit already claimed")

    claimed_cards = [a.card for a in assignments]
    if (
        len(claimed_cards) != CARDS_PER_HALF_SUIT
        or len(set(claimed_cards)) != CARDS_PER_HALF_SUIT
        or set(claimed_cards) != set(cards_of(half_suit))
    ):
        return _fail(
            ERR_INCOMPLETE_CLAIM,
            f"Must assign all {CARDS_PER_HALF_SUIT} cards of the half-suit exactly once",
        )

    for assignment in assignments:
        if room.seat_of(assignment.holder_id) is None:
            return _fail(
                ERR_PLAYER_NOT_FOUND,
                f"Unknown player assigned to {assignment.card.display()}",
            )

    return OK
