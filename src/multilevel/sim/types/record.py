from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GenerationRecord:
    generation: int
    altruist_fraction: float
    group_variance: float
