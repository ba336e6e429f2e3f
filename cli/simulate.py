"""Simulate Fish games with random bot players.

Usage: python -m cli.simulate --games 100 --players 6 [--seed 42] [--verbose]
"""

from __future__ import annotations

import argparse
import random
import time
from collections import Counter

from fish.db.memory import InMemoryRoomRepository
from fish.game.engine import ActionResult, GameEngine
from fish.game.halfsuits import HALF_SUIT_NAMES, cards_of
from fish.game.integrity import validate_room_integrity
from fish.game.models import ClaimAssignment, Room, team_of
from fish.game.scoring import find_holder, winning_team
from fish.game.views import opponents_with_cards, valid_asks
from fish.lobby.manager import LobbyManager
from fish.utils.constants import PHASE_AWAITING_PASS
from fish.utils.crypto import create_rng


def bot_claim(room: Room, rng: random.Random, accuracy: float) -> tuple[str, list[ClaimAssignment]]:
    """Pick an open half-suit and name holders, mostly correctly."""
    open_suits = [hs for hs in HALF_SUIT_NAMES if not room.is_resolved(hs)]
    half_suit = rng.choice(open_suits)
    everyone = [p.player_id for p in room.players]
    assignments = []
    for card in cards_of(half_suit):
        holder = find_holder(room, card)
        if holder is None or rng.random() > accuracy:
            holder = rng.choice(everyone)
        assignments.append(ClaimAssignment(card=card, holder_id=holder))
    return half_suit, assignments


def bot_turn(
    engine: GameEngine, room: Room, rng: random.Random, claim_rate: float, accuracy: float
) -> ActionResult:
    """Execute one bot action for the team holding the turn."""
    seat = room.current_turn
    player = room.players[seat]

    if room.phase == PHASE_AWAITING_PASS:
        mates = [
            p for i, p in enumerate(room.players)
            if i != seat and team_of(i) == team_of(seat) and p.hand
        ]
        if mates:
            return engine.pass_turn(player.player_id, rng.choice(mates).player_id)

    asks = valid_asks(room, player)
    opponents = opponents_with_cards(room, seat)
    if not asks or not opponents or rng.random() < claim_rate:
        half_suit, assignments = bot_claim(room, rng, accuracy)
        return engine.make_claim(player.player_id, half_suit, assignments)

    card = rng.choice(asks)
    target = rng.choice(opponents)
    return engine.ask_card(player.player_id, target["id"], card.id)


def simulate_game(
    num_players: int, seed: int | None, claim_rate: float, accuracy: float,
    verbose: bool = False,
) -> tuple[Room, int]:
    rng = create_rng(seed)
    repo = InMemoryRoomRepository()
    engine = GameEngine(repo, rng)
    lobby = LobbyManager(repo, engine, rng)

    created = lobby.create_room("Bot 1")
    code = created.room.code
    for i in range(2, num_players + 1):
        lobby.join_room(code, f"Bot {i}")
    result = lobby.start_game(code)
    if not result.success:
        raise RuntimeError(f"Start failed: {result.error}")

    room = result.room
    actions = 0
    while not room.is_finished:
        result = bot_turn(engine, room, rng, claim_rate, accuracy)
        if not result.success:
            raise RuntimeError(f"Bot action rejected: {result.error} ({result.code})")
        room = result.room
        actions += 1
        errors = validate_room_integrity(room)
        if errors:
            raise RuntimeError(f"Integrity violations after action {actions}: {errors}")
        if verbose:
            print(f"  {room.log[-1].message}")
    return room, actions


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate Fish games")
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--players", type=int, default=6, choices=[4, 6, 8])
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--claim-rate", type=float, default=0.1)
    parser.add_argument("--accuracy", type=float, default=0.9)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    winners: Counter = Counter()
    total_actions = 0
    middled = 0
    start = time.time()

    for g in range(args.games):
        seed = args.seed + g if args.seed is not None else None
        if args.verbose:
            print(f"Game {g + 1}:")
        room, actions = simulate_game(
            args.players, seed, args.claim_rate, args.accuracy, args.verbose
        )
        winner = winning_team(room)
        winners["tie" if winner is None else f"team {winner + 1}"] += 1
        total_actions += actions
        middled += len(room.middle_suits)

    elapsed = time.time() - start
    print(f"Games: {args.games} ({args.players} players) in {elapsed:.2f}s")
    print(f"Results: {dict(winners)}")
    print(f"Avg actions/game: {total_actions / args.games:.1f}")
    print(f"Avg half-suits to middle: {middled / args.games:.2f}")


if __name__ == "__main__":
    main()
