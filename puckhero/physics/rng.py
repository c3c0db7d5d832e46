"""
Seeded RNG so goal resets can be replayed in tests.
"""
from __future__ import annotations

import random


class SeededRNG:
    """Wrapper around random.Random for reproducible puck resets."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def sign(self) -> int:
        """+1 or -1 with equal probability."""
        return 1 if self._rng.random() > 0.5 else -1
