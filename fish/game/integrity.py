"""State integrity checker for Fish rooms."""

from __future__ import annotations

from collections import Counter

from fish.game.halfsuits import HALF_SUIT_NAMES, half_suit_of
from fish.game.models import Card, Room
from fish.utils.constants import CARDS_PER_HALF_SUIT, TOTAL_CARDS


class InvariantViolation(RuntimeError):
    """Raised when room state reaches a condition the rules make impossible."""


def validate_room_integrity(room: Room) -> list[str]:
    """Validate all room invariants. Returns list of errors (empty = OK).

    Checks:
    1. Cards in hands + 6 per resolved half-suit = 48
    2. No card held twice
    3. Resolved half-suits are known, unique, and claimed/middle are disjoint
    4. No card of a resolved half-suit remains in a hand
    5. Scores add up to the number of claimed half-suits
    6. Turn index is a valid seat holding cards (unless over or stalled)
    """
    errors: list[str] = []

    if not room.game_started:
        # Lobby rooms hold no cards
        for p in room.players:
            if p.hand:
                errors.append(f"Player {p.name} holds cards before the deal")
        return errors

    # 1. Card count
    all_cards: list[Card] = [c for p in room.players for c in p.hand]
    resolved = room.resolved_suits
    expected = TOTAL_CARDS - CARDS_PER_HALF_SUIT * len(set(resolved))
    if len(all_cards) != expected:
        errors.append(f"Total cards in hands = {len(all_cards)}, expected {expected}")

    # 2. Duplicates
    for card, count in Counter(all_cards).items():
        if count > 1:
            errors.append(f"Duplicate card {card.id} (x{count})")

    # 3. Resolved sets
    for name in resolved:
        if name not in HALF_SUIT_NAMES:
            errors.append(f"Unknown resolved half-suit: {name}")
    for name, count in Counter(resolved).items():
        if count > 1:
            errors.append(f"Half-suit {name} resolved {count} times")

    # 4. Retired cards
    resolved_set = set(resolved)
    for p in room.players:
        for c in p.hand:
            if half_suit_of(c) in resolved_set:
                errors.append(f"Player {p.name} holds retired card {c.id}")

    # 5. Scores
    if sum(room.scores) != len(room.claimed_suits):
        errors.append(
            f"Scores {room.scores} do not match {len(room.claimed_suits)} claimed half-suits"
        )
    if any(s < 0 for s in room.scores):
        errors.append(f"Negative score: {room.scores}")

    # 6. Turn
    if not 0 <= room.current_turn < len(room.players):
        errors.append(f"Turn index {room.current_turn} out of range")
    elif not room.is_finished:
        eligible = any(p.hand and p.connected for p in room.players)
        if eligible and not room.players[room.current_turn].hand:
            errors.append(
                f"Turn is on {room.players[room.current_turn].name} who has no cards"
            )

    return errors
