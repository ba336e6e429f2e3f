"""Per-player projections of room state."""

from __future__ import annotations

from dataclasses import dataclass, field

from fish.game.halfsuits import HALF_SUITS, cards_of, half_suit_of, sort_hand
from fish.game.models import Card, Player, Room, team_of


def valid_asks(room: Room, player: Player) -> list[Card]:
    """Cards the player may legally ask for.

    Any card of an open half-suit the player holds part of, minus the
    cards already in hand.
    """
    held_suits = sorted({half_suit_of(c) for c in player.hand})
    cards: list[Card] = []
    for half_suit in held_suits:
        if room.is_resolved(half_suit):
            continue
        cards.extend(c for c in cards_of(half_suit) if not player.holds(c))
    return cards


def opponents_with_cards(room: Room, seat: int) -> list[dict]:
    """Opposing players who can still be asked."""
    my_team = team_of(seat)
    return [
        _roster_entry(i, p)
        for i, p in enumerate(room.players)
        if team_of(i) != my_team and p.hand
    ]


def _roster_entry(seat: int, player: Player) -> dict:
    return {
        "id": player.player_id,
        "name": player.name,
        "team": team_of(seat),
        "cardCount": len(player.hand),
        "index": seat,
        "connected": player.connected,
    }


@dataclass
class PlayerStateView:
    """Everything one player is allowed to see about a room."""

    room_code: str
    players: list[dict]
    my_index: int
    my_team: int | None
    hand: list[Card]
    current_turn: int
    phase: str
    scores: list[int]
    claimed_suits: list[str]
    middle_suits: list[str]
    log: list[dict]
    game_started: bool
    game_over: bool
    valid_asks: list[Card] = field(default_factory=list)
    opponents: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "roomCode": self.room_code,
            "players": self.players,
            "myIndex": self.my_index,
            "myTeam": self.my_team,
            "hand": [c.to_dict() for c in self.hand],
            "currentTurn": self.current_turn,
            "phase": self.phase,
            "scores": list(self.scores),
            "claimedSuits": list(self.claimed_suits),
            "middleSuits": list(self.middle_suits),
            "log": self.log,
            "gameStarted": self.game_started,
            "gameOver": self.game_over,
            "validAsks": [c.to_dict() for c in self.valid_asks],
            "opponents": self.opponents,
            "halfSuits": [dict(hs, ranks=list(hs["ranks"])) for hs in HALF_SUITS],
        }


def build_player_view(room: Room, player_id: str) -> PlayerStateView:
    """Project a room for one player. Unknown players get a spectator view (index -1)."""
    seat = room.seat_of(player_id)
    player = room.players[seat] if seat is not None else None
    in_game = player is not None and room.game_started

    return PlayerStateView(
        room_code=room.code,
        players=[_roster_entry(i, p) for i, p in enumerate(room.players)],
        my_index=-1 if seat is None else seat,
        my_team=None if seat is None else team_of(seat),
        hand=sort_hand(player.hand) if player else [],
        current_turn=room.current_turn,
        phase=room.phase,
        scores=list(room.scores),
        claimed_suits=list(room.claimed_suits),
        middle_suits=list(room.middle_suits),
        log=[e.to_dict() for e in room.log],
        game_started=room.game_started,
        game_over=room.is_finished,
        valid_asks=valid_asks(room, player) if in_game else [],
        opponents=opponents_with_cards(room, seat) if in_game else [],
    )
