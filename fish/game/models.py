"""Data models for Fish room state."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from fish.utils.constants import (
    NUM_HALF_SUITS,
    NUM_TEAMS,
    PHASE_AWAITING_ASK,
    PHASE_AWAITING_PASS,
    PHASE_FINISHED,
    PHASE_LOBBY,
    RANKS,
    SUIT_SYMBOLS,
    SUITS,
)


@dataclass(frozen=True)
class Card:
    """A single playing card.

    Wire id examples: "2_hearts", "10_clubs", "Q_spades".
    """

    rank: str  # "2".."7", "9", "10", "J", "Q", "K", "A"
    suit: str  # "hearts", "diamonds", "clubs", "spades"

    @property
    def id(self) -> str:
        return f"{self.rank}_{self.suit}"

    @classmethod
    def from_id(cls, card_id: str) -> Card:
        """Decode a wire id. Raises ValueError for anything outside the deck."""
        if not isinstance(card_id, str):
            raise ValueError(f"Unknown card: {card_id!r}")
        rank, sep, suit = card_id.partition("_")
        if not sep or rank not in RANKS or suit not in SUITS:
            raise ValueError(f"Unknown card: {card_id!r}")
        return cls(rank=rank, suit=suit)

    def display(self) -> str:
        """Unicode display string."""
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"

    def to_dict(self) -> dict:
        return {"rank": self.rank, "suit": self.suit, "id": self.id}

    @classmethod
    def from_dict(cls, d: dict) -> Card:
        return cls(rank=d["rank"], suit=d["suit"])


@dataclass
class Player:
    """A seated player. Team is derived from the seat index, never stored."""

    player_id: str
    name: str
    hand: list[Card] = field(default_factory=list)
    connected: bool = True

    def holds(self, card: Card) -> bool:
        return card in self.hand

    def to_dict(self) -> dict:
        return {
            "playerId": self.player_id,
            "name": self.name,
            "hand": [c.to_dict() for c in self.hand],
            "connected": self.connected,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Player:
        return cls(
            player_id=d["playerId"],
            name=d["name"],
            hand=[Card.from_dict(c) for c in d.get("hand", [])],
            connected=d.get("connected", True),
        )

    @staticmethod
    def new_player_id() -> str:
        return str(uuid.uuid4())


@dataclass
class LogEntry:
    """One line of the player-visible room log."""

    message: str
    kind: str
    timestamp: str

    def to_dict(self) -> dict:
        return {"message": self.message, "type": self.kind, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, d: dict) -> LogEntry:
        return cls(message=d["message"], kind=d["type"], timestamp=d["timestamp"])


def team_of(seat: int) -> int:
    """Team index for a seat: players alternate teams around the table."""
    return seat % NUM_TEAMS


@dataclass
class Room:
    """Complete state of one room (lobby and game)."""

    code: str
    players: list[Player] = field(default_factory=list)
    game_started: bool = False
    current_turn: int = 0
    scores: list[int] = field(default_factory=lambda: [0] * NUM_TEAMS)
    claimed_suits: list[str] = field(default_factory=list)
    middle_suits: list[str] = field(default_factory=list)
    log: list[LogEntry] = field(default_factory=list)
    created_at: str = ""
    version: int = 1

    def get_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def seat_of(self, player_id: str) -> int | None:
        for i, p in enumerate(self.players):
            if p.player_id == player_id:
                return i
        return None

    def team_of_player(self, player_id: str) -> int | None:
        seat = self.seat_of(player_id)
        return None if seat is None else team_of(seat)

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_turn]

    @property
    def resolved_suits(self) -> list[str]:
        return self.claimed_suits + self.middle_suits

    def is_resolved(self, half_suit: str) -> bool:
        return half_suit in self.claimed_suits or half_suit in self.middle_suits

    @property
    def is_finished(self) -> bool:
        return self.game_started and len(self.resolved_suits) == NUM_HALF_SUITS

    @property
    def phase(self) -> str:
        """Turn phase, derived from the current player's hand."""
        if not self.game_started:
            return PHASE_LOBBY
        if self.is_finished:
            return PHASE_FINISHED
        if self.current_player.hand:
            return PHASE_AWAITING_ASK
        return PHASE_AWAITING_PASS

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "players": [p.to_dict() for p in self.players],
            "gameStarted": self.game_started,
            "currentTurn": self.current_turn,
            "scores": list(self.scores),
            "claimedSuits": list(self.claimed_suits),
            "middleSuits": list(self.middle_suits),
            "log": [e.to_dict() for e in self.log],
            "createdAt": self.created_at,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Room:
        return cls(
            code=d["code"],
            players=[Player.from_dict(p) for p in d["players"]],
            game_started=d["gameStarted"],
            current_turn=d["currentTurn"],
            scores=list(d["scores"]),
            claimed_suits=list(d["claimedSuits"]),
            middle_suits=list(d["middleSuits"]),
            log=[LogEntry.from_dict(e) for e in d.get("log", [])],
            created_at=d.get("createdAt", ""),
            version=d.get("version", 1),
        )


@dataclass(frozen=True)
class ClaimAssignment:
    """One line of a claim: who the claimer says holds a card."""

    card: Card
    holder_id: str

    @classmethod
    def from_mapping(cls, assignments: dict) -> list[ClaimAssignment]:
        """Build assignments from a {card_id: holder_id} payload.

        Raises ValueError on unknown card ids or non-string holders.
        """
        result = []
        for card_id, holder_id in assignments.items():
            if not isinstance(holder_id, str) or not holder_id:
                raise ValueError(f"Missing holder for {card_id!r}")
            result.append(cls(card=Card.from_id(card_id), holder_id=holder_id))
        return result
