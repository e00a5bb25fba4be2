from __future__ import annotations

from typing import List

from ...config import SimulationParameters
from ..core.population import Group, Individual


def individual_fitness(individual: Individual, altruist_fraction: float, params: SimulationParameters) -> float:
    fitness = 1.0
    if individual.is_altruist and params.within_group_selection:
        fitness -= params.altruism_cost
    # The benefit is shared by every member regardless of its own trait.
    fitness += params.altruism_benefit * altruist_fraction
    return fitness


def group_fitness_values(group: Group, params: SimulationParameters) -> List[float]:
    fraction = group.altruist_fraction
    return [individual_fitness(member, fraction, params) for member in group.members]
