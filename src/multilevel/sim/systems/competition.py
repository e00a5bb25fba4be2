from __future__ import annotations

import logging
from typing import List

from ...config import SimulationParameters
from ...rng import RandomSource
from ..core.population import Group, Population, maybe_mutate

logger = logging.getLogger(__name__)


def group_fitness(group: Group, params: SimulationParameters) -> float:
    return 1.0 + params.group_competition_strength * group.altruist_fraction


def compete(population: Population, params: SimulationParameters, rng: RandomSource) -> Population:
    """Apply group extinction and recolonisation from the fittest group.

    Every decision reads the same pre-competition snapshot, so a group that
    was just replaced never serves as a source in the same generation.
    """
    if not params.between_group_selection or not population:
        return population
    fitness: List[float] = [group_fitness(group, params) for group in population]
    fittest = max(range(len(fitness)), key=fitness.__getitem__)
    source = population[fittest].freeze()
    result: Population = [group.copy() for group in population]
    for index, value in enumerate(fitness):
        if rng.next_float() >= params.group_extinction_rate / value:
            continue
        if index == fittest:
            continue
        logger.debug("group %d went extinct, recolonised from group %d", index, fittest)
        result[index] = Group([maybe_mutate(member, params.mutation_rate, rng) for member in source])
    return result
