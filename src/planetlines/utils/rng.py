from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    """The two draws the engine needs; random.Random satisfies it."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both inclusive."""
        ...


def resolve_rng(rng: RandomSource | None = None, seed: int | None = None) -> RandomSource:
    if rng is not None:
        return rng
    return random.Random(seed)
