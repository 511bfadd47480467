"""Launch configuration for the pygame front end.

Everything is read from environment variables so the game can be started
with a fixed deal or a different card size without touching the persisted
settings file:

``KLONDIKE_SEED``
    Integer seed for shuffling; unset means a fresh random deal.
``KLONDIKE_CARD_SIZE``
    ``Small``, ``Medium`` or ``Large``; overrides the saved card size.
``KLONDIKE_LOG_LEVEL``
    Name of a :mod:`logging` level, ``WARNING`` by default.
``KLONDIKE_SKIP_TITLE``
    ``1``/``true``/``yes`` opens straight into a deal.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import Mapping, Optional

from klondike.common import CARD_SIZES

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class LaunchConfig:
    seed: Optional[int] = None
    card_size: Optional[str] = None
    log_level: int = logging.WARNING
    skip_title: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LaunchConfig":
        env = os.environ if environ is None else environ

        seed = None
        raw_seed = env.get("KLONDIKE_SEED", "").strip()
        if raw_seed:
            try:
                seed = int(raw_seed)
            except ValueError as exc:
                raise ValueError(f"KLONDIKE_SEED must be an integer, got {raw_seed!r}") from exc

        card_size = env.get("KLONDIKE_CARD_SIZE", "").strip().capitalize() or None
        if card_size is not None and card_size not in CARD_SIZES:
            raise ValueError(f"KLONDIKE_CARD_SIZE must be one of {', '.join(CARD_SIZES)}, got {card_size!r}")

        level_name = env.get("KLONDIKE_LOG_LEVEL", "").strip().upper() or "WARNING"
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"KLONDIKE_LOG_LEVEL is not a logging level: {level_name!r}")

        skip_title = env.get("KLONDIKE_SKIP_TITLE", "").strip().lower() in _TRUTHY
        return cls(seed=seed, card_size=card_size, log_level=level, skip_title=skip_title)

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)
