"""Shared test fixtures for Fish."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from fish.db.memory import InMemoryRoomRepository
from fish.game.deck import create_deck
from fish.game.engine import GameEngine
from fish.game.halfsuits import sort_hand
from fish.game.models import Card, Room
from fish.lobby.manager import LobbyManager
from fish.notify.publisher import RoomChanged, RoomPublisher
from fish.utils.crypto import create_rng


class RecordingSink:
    """Records every RoomChanged event for test assertions."""

    def __init__(self) -> None:
        self.events: list[RoomChanged] = []

    def __call__(self, event: RoomChanged) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [e.action for e in self.events]

    def last(self) -> RoomChanged | None:
        return self.events[-1] if self.events else None


@dataclass
class Table:
    """A started room with known seats, keyed by player name."""

    code: str
    ids: dict[str, str]
    repo: InMemoryRoomRepository
    engine: GameEngine

    def room(self) -> Room:
        return self.repo.get_room(self.code)

    def hand(self, name: str) -> list[Card]:
        return self.room().get_player(self.ids[name]).hand


def c(card_id: str) -> Card:
    return Card.from_id(card_id)


def deal_round_robin(repo: InMemoryRoomRepository, code: str) -> Room:
    """Replace the random deal with a known one: deck card k goes to seat k % n.

    With four seats every suit splits the same way:
    seat 0 gets 2,6,J; seat 1 gets 3,7,Q; seat 2 gets 4,9,K; seat 3 gets 5,10,A.
    """
    room = repo.get_room(code)
    n = len(room.players)
    hands: list[list[Card]] = [[] for _ in range(n)]
    for k, card in enumerate(create_deck()):
        hands[k % n].append(card)
    for player, hand in zip(room.players, hands):
        player.hand = sort_hand(hand)
    repo.save_room(room)
    return repo.get_room(code)


def set_hands(repo: InMemoryRoomRepository, code: str, hands: dict[str, list[str]]) -> Room:
    """Overwrite selected hands (player id -> card ids)."""
    room = repo.get_room(code)
    for player_id, card_ids in hands.items():
        room.get_player(player_id).hand = sort_hand([c(cid) for cid in card_ids])
    repo.save_room(room)
    return repo.get_room(code)


def set_turn(repo: InMemoryRoomRepository, code: str, seat: int) -> Room:
    room = repo.get_room(code)
    room.current_turn = seat
    repo.save_room(room)
    return repo.get_room(code)


def make_table(
    engine: GameEngine,
    lobby: LobbyManager,
    repo: InMemoryRoomRepository,
    names: tuple[str, ...] = ("A", "B", "C", "D"),
    known_deal: bool = True,
) -> Table:
    created = lobby.create_room(names[0])
    code = created.room.code
    ids = {names[0]: created.player_id}
    for name in names[1:]:
        ids[name] = lobby.join_room(code, name).player_id
    result = engine.start_game(code)
    assert result.success, result.error
    if known_deal:
        deal_round_robin(repo, code)
    return Table(code=code, ids=ids, repo=repo, engine=engine)


@pytest.fixture
def room_repo():
    return InMemoryRoomRepository()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def publisher(sink):
    pub = RoomPublisher()
    pub.subscribe(sink)
    return pub


@pytest.fixture
def engine(room_repo, publisher):
    return GameEngine(room_repo, create_rng(42), publisher)


@pytest.fixture
def lobby(room_repo, engine):
    return LobbyManager(room_repo, engine, create_rng(7))


@pytest.fixture
def table(engine, lobby, room_repo):
    """Four seats A, B, C, D (teams A+C vs B+D), round-robin deal, A to play."""
    return make_table(engine, lobby, room_repo)
