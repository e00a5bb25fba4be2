from __future__ import annotations

import logging
from typing import List, Sequence

from ...config import SimulationParameters
from ...rng import RandomSource
from ..core.population import Group, Individual, Population, maybe_mutate
from .fitness import group_fitness_values

logger = logging.getLogger(__name__)


def select_index(weights: Sequence[float], total: float, rng: RandomSource) -> int:
    """Roulette-wheel pick over ``weights`` in their original order.

    When ``total`` is not positive the wheel is meaningless and an index is
    drawn uniformly instead. Floating-point shortfall falls through to the
    last index.
    """
    count = len(weights)
    if total <= 0.0:
        return rng.next_int(count)
    target = rng.next_float() * total
    cumulative = 0.0
    for index, weight in enumerate(weights):
        cumulative += weight
        if cumulative >= target:
            return index
    return count - 1


def reproduce_group(group: Group, params: SimulationParameters, rng: RandomSource) -> Group:
    members = group.members
    if not members:
        return Group()
    weights = group_fitness_values(group, params)
    total = sum(weights)
    if total <= 0.0:
        logger.debug("non-positive total fitness %.4f in group of %d, selecting uniformly", total, len(members))
    offspring: List[Individual] = []
    for _ in range(len(members)):
        parent = members[select_index(weights, total, rng)]
        offspring.append(maybe_mutate(parent, params.mutation_rate, rng))
    return Group(offspring)


def reproduce_population(population: Population, params: SimulationParameters, rng: RandomSource) -> Population:
    return [reproduce_group(group, params, rng) for group in population]
