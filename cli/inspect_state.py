"""Inspect and validate a saved room snapshot.

Usage:
  python -m cli.inspect_state --file room.json
  python -m cli.inspect_state --file room.json --player <id> --show hand
  python -m cli.inspect_state --file room.json --show log
  python -m cli.inspect_state --file room.json --validate
"""

from __future__ import annotations

import argparse
import json
import sys

from fish.game.halfsuits import display_name
from fish.game.integrity import validate_room_integrity
from fish.game.models import Room, team_of


def inspect_state(
    file_path: str,
    player: str | None,
    show: str | None,
    validate: bool,
) -> None:
    with open(file_path) as f:
        data = json.load(f)

    room = Room.from_dict(data)

    if validate:
        errors = validate_room_integrity(room)
        if errors:
            print("Integrity errors:")
            for e in errors:
                print(f"  - {e}")
            sys.exit(1)
        else:
            print("State OK ✓")
        return

    if player and show == "hand":
        p = room.get_player(player)
        if p is None:
            print(f"Player {player} not found")
            sys.exit(1)
        print(f"Hand of {p.name} ({len(p.hand)} cards):")
        for i, card in enumerate(p.hand, 1):
            print(f"  {i:2d}. {card.display()} [{card.id}]")
        return

    if show == "log":
        for entry in room.log:
            print(f"  [{entry.timestamp}] ({entry.kind}) {entry.message}")
        return

    # Default: full dump
    print(f"Room: {room.code}")
    print(f"Phase: {room.phase}")
    print(f"Scores: Team 1 {room.scores[0]} - Team 2 {room.scores[1]}")
    print(f"Claimed: {', '.join(display_name(hs) for hs in room.claimed_suits) or '-'}")
    print(f"Middle: {', '.join(display_name(hs) for hs in room.middle_suits) or '-'}")
    print("Players:")
    for i, p in enumerate(room.players):
        marker = " <- turn" if room.game_started and i == room.current_turn else ""
        status = "" if p.connected else " (disconnected)"
        print(
            f"  {i}. {p.name} [{p.player_id}] team {team_of(i) + 1}: "
            f"{len(p.hand)} cards{status}{marker}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect a Fish room snapshot")
    parser.add_argument("--file", required=True, help="Path to room JSON")
    parser.add_argument("--player", help="Player id (for --show hand)")
    parser.add_argument("--show", choices=["hand", "log"])
    parser.add_argument("--validate", action="store_true", help="Run integrity checks")
    args = parser.parse_args()
    inspect_state(args.file, args.player, args.show, args.validate)


if __name__ == "__main__":
    main()
