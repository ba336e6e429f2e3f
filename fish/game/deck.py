"""Deck operations for Fish: creation, shuffle, deal."""

from __future__ import annotations

import random

from fish.game.halfsuits import sort_hand
from fish.game.models import Card
from fish.utils.constants import RANKS, SUITS, TOTAL_CARDS


def create_deck() -> list[Card]:
    """Create the 48-card deck (no 8s, no jokers)."""
    return [Card(rank=rank, suit=suit) for suit in SUITS for rank in RANKS]


def shuffle_cards(cards: list[Card], rng: random.Random) -> list[Card]:
    """Fisher-Yates shuffle using provided RNG. Returns a new list."""
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def hand_sizes(num_players: int, total: int = TOTAL_CARDS) -> list[int]:
    """Cards per seat: the first `total % n` seats get one extra."""
    base, remainder = divmod(total, num_players)
    return [base + 1 if seat < remainder else base for seat in range(num_players)]


def deal(deck: list[Card], num_players: int) -> list[list[Card]]:
    """Split a shuffled deck into sorted hands, one per seat.

    Seats take consecutive slices of the deck, sized by hand_sizes().
    """
    if num_players < 1:
        raise ValueError("Need at least one player to deal")
    hands: list[list[Card]] = []
    start = 0
    for size in hand_sizes(num_players, len(deck)):
        hands.append(sort_hand(deck[start:start + size]))
        start += size
    return hands
