"""Claim resolution and final scoring for Fish."""

from __future__ import annotations

from dataclasses import dataclass, field

from fish.game.halfsuits import cards_of, display_name, half_suit_of
from fish.game.models import Card, ClaimAssignment, Room
from fish.utils.constants import (
    NUM_TEAMS,
    OUTCOME_CORRECT,
    OUTCOME_WRONG_SEAT,
    OUTCOME_WRONG_TEAM,
)


@dataclass
class ClaimOutcome:
    outcome: str
    # card id -> actual holder id (None if the card is out of play)
    actual_holders: dict[str, str | None] = field(default_factory=dict)


def find_holder(room: Room, card: Card) -> str | None:
    """Player id currently holding a card, or None."""
    for player in room.players:
        if player.holds(card):
            return player.player_id
    return None


def evaluate_claim(
    room: Room, half_suit: str, assignments: list[ClaimAssignment]
) -> ClaimOutcome:
    """Compare a claim against true card locations.

    - correct: every card assigned to its exact holder
    - wrong_seat: every card assigned to the right team, some to the wrong player
    - wrong_team: any card assigned to the wrong team, or missing from play
    """
    actual = {card.id: find_holder(room, card) for card in cards_of(half_suit)}

    all_team = True
    all_exact = True
    for assignment in assignments:
        actual_id = actual.get(assignment.card.id)
        if actual_id is None:
            all_team = all_exact = False
            break
        claimed_team = room.team_of_player(assignment.holder_id)
        if claimed_team != room.team_of_player(actual_id):
            all_team = all_exact = False
        elif assignment.holder_id != actual_id:
            all_exact = False

    if all_exact:
        outcome = OUTCOME_CORRECT
    elif all_team:
        outcome = OUTCOME_WRONG_SEAT
    else:
        outcome = OUTCOME_WRONG_TEAM
    return ClaimOutcome(outcome=outcome, actual_holders=actual)


def strip_half_suit(room: Room, half_suit: str) -> None:
    """Remove every card of a half-suit from every hand."""
    for player in room.players:
        player.hand = [c for c in player.hand if half_suit_of(c) != half_suit]


def apply_claim(
    room: Room, claimer_team: int, half_suit: str, result: ClaimOutcome
) -> int | None:
    """Retire a half-suit and award its point.

    Returns the team that scored, or None when the half-suit goes to the
    middle.
    """
    strip_half_suit(room, half_suit)

    if result.outcome == OUTCOME_WRONG_SEAT:
        room.middle_suits.append(half_suit)
        return None

    if result.outcome == OUTCOME_CORRECT:
        scoring_team = claimer_team
    else:
        scoring_team = (claimer_team + 1) % NUM_TEAMS
    room.scores[scoring_team] += 1
    room.claimed_suits.append(half_suit)
    return scoring_team


def claim_message(
    claimer_name: str, claimer_team: int, half_suit: str, result: ClaimOutcome
) -> str:
    """Human-readable claim result, as shown in the room log."""
    label = display_name(half_suit)
    if result.outcome == OUTCOME_CORRECT:
        return (
            f"{claimer_name} correctly claimed {label}! "
            f"Team {claimer_team + 1} +1 point"
        )
    if result.outcome == OUTCOME_WRONG_SEAT:
        return (
            f"{claimer_name} claimed {label} - correct team but wrong player "
            f"assignments. Suit goes to middle."
        )
    opponent = (claimer_team + 1) % NUM_TEAMS
    return (
        f"{claimer_name} incorrectly claimed {label}! Opponent had cards. "
        f"Team {opponent + 1} +1 point"
    )


def winning_team(room: Room) -> int | None:
    """Team with the higher score, or None on a tie."""
    if room.scores[0] > room.scores[1]:
        return 0
    if room.scores[1] > room.scores[0]:
        return 1
    return None


def game_over_message(room: Room) -> str:
    winner = winning_team(room)
    final = f"Final score: {room.scores[0]} - {room.scores[1]}"
    if winner is None:
        return f"Game Over! Tie! {final}"
    return f"Game Over! Team {winner + 1} wins! {final}"
