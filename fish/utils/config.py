"""Environment-driven settings for the Fish server."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    webhook_url: str | None = None
    webhook_timeout: float = 10.0
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict | None = None) -> Settings:
        env = os.environ if environ is None else environ
        seed = env.get("FISH_SEED")
        return cls(
            webhook_url=env.get("FISH_WEBHOOK_URL") or None,
            webhook_timeout=float(env.get("FISH_WEBHOOK_TIMEOUT", "10.0")),
            seed=int(seed) if seed else None,
            log_level=env.get("FISH_LOG_LEVEL", "INFO").upper(),
        )
