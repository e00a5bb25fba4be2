from __future__ import annotations

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    def next_float(self) -> float: ...

    def next_int(self, max_value: int) -> int: ...


class DeterministicRng:
    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_int(self, max_value: int) -> int:
        # Derived from a uniform draw so every decision consumes exactly one float.
        return min(int(self.next_float() * max_value), max_value - 1)
