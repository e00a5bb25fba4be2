from __future__ import annotations

from typing import Tuple

from ..core.population import Population


def collect_statistics(population: Population) -> Tuple[float, float]:
    """Return ``(altruist_fraction, group_variance)`` for a population.

    The variance is the population variance (N denominator) of the
    per-group altruist fractions; an empty group counts with fraction 0.
    """
    if not population:
        return 0.0, 0.0
    total = 0
    altruists = 0
    fractions = []
    for group in population:
        count = group.altruist_count
        total += len(group)
        altruists += count
        fractions.append(count / len(group) if len(group) else 0.0)
    fraction = altruists / total if total else 0.0
    mean = sum(fractions) / len(fractions)
    variance = sum((value - mean) ** 2 for value in fractions) / len(fractions)
    return fraction, variance
