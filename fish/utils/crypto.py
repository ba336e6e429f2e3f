"""Random utilities for Fish: shuffling RNG and room codes."""

import random
import secrets

from fish.utils.constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH


def create_rng(seed: int | None = None) -> random.Random:
    """Create a Random instance.

    If seed is provided, returns a deterministic Random (for tests/replay).
    If seed is None, returns SystemRandom (cryptographically secure).
    """
    if seed is not None:
        return random.Random(seed)
    return secrets.SystemRandom()


def generate_room_code(
    rng: random.Random | None = None, length: int = ROOM_CODE_LENGTH
) -> str:
    """Generate a short room code (no ambiguous chars)."""
    if rng is None:
        return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))
    return "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(length))
