from __future__ import annotations

import time
from typing import List, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")

_SEED_MASK = (1 << 63) - 1


def coerce_seed(seed: object) -> int:
    """Turn any seed-like value into a non-negative int.

    Ints and digit strings are used as-is; anything else (None, floats, junk
    strings) falls back to a time-based seed.
    """
    if isinstance(seed, bool):
        return time.time_ns() & _SEED_MASK
    if isinstance(seed, (int, np.integer)):
        return abs(int(seed)) & _SEED_MASK
    if isinstance(seed, str):
        text = seed.strip()
        if text.lstrip("-").isdigit():
            return abs(int(text)) & _SEED_MASK
    return time.time_ns() & _SEED_MASK


class RandomSource:
    """Seeded random stream shared by board generation, dice and theft."""

    def __init__(self, seed: object = None):
        self.seed = coerce_seed(seed)
        self._rng = np.random.default_rng(self.seed)

    def random(self) -> float:
        return float(self._rng.random())

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        return int(self._rng.integers(low, high))

    def roll_dice(self) -> Tuple[int, int]:
        return (self.randint(1, 7), self.randint(1, 7))

    def shuffle(self, items: Sequence[T]) -> List[T]:
        # Fisher-Yates on a copy; the input is left untouched.
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.randint(0, len(items))]
