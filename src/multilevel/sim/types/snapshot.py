from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .record import GenerationRecord


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    state: str
    generation: int
    generations: int
    group_sizes: Tuple[int, ...]
    group_fractions: Tuple[float, ...]
    latest: Optional[GenerationRecord]
    conclusion: Optional[str]
