"""Half-suit partition of the 48-card deck.

Each suit splits into a "low" half (2-7) and a "high" half (9-A), giving
eight fixed six-card groups that are claimed as a unit.
"""

from __future__ import annotations

from fish.game.models import Card
from fish.utils.constants import HIGH, HIGH_RANKS, LOW, LOW_RANKS, RANKS, SUITS

RANK_ORDER = {rank: i for i, rank in enumerate(RANKS)}


def _half_suit_info(level: str, suit: str) -> dict:
    ranks = LOW_RANKS if level == LOW else HIGH_RANKS
    return {
        "name": f"{level}_{suit}",
        "suit": suit,
        "ranks": list(ranks),
        "display": f"{level.capitalize()} {suit.capitalize()}",
    }


HALF_SUITS: list[dict] = [
    _half_suit_info(level, suit) for suit in SUITS for level in (LOW, HIGH)
]
HALF_SUIT_NAMES = [hs["name"] for hs in HALF_SUITS]
_BY_NAME = {hs["name"]: hs for hs in HALF_SUITS}


def half_suit_of(card: Card) -> str:
    """Name of the half-suit a card belongs to, e.g. "low_hearts"."""
    level = LOW if card.rank in LOW_RANKS else HIGH
    return f"{level}_{card.suit}"


def is_half_suit(name: str) -> bool:
    return name in _BY_NAME


def cards_of(name: str) -> list[Card]:
    """The six cards of a half-suit, in rank order.

    Raises ValueError for an unknown name.
    """
    info = _BY_NAME.get(name)
    if info is None:
        raise ValueError(f"Unknown half-suit: {name!r}")
    return [Card(rank=rank, suit=info["suit"]) for rank in info["ranks"]]


def display_name(name: str) -> str:
    """Human label, e.g. "Low Hearts"."""
    return _BY_NAME[name]["display"]


def hand_sort_key(card: Card) -> tuple[str, int]:
    return half_suit_of(card), RANK_ORDER[card.rank]


def sort_hand(hand: list[Card]) -> list[Card]:
    """Display order: by half-suit name, then low-to-high rank."""
    return sorted(hand, key=hand_sort_key)
