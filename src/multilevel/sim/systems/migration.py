from __future__ import annotations

from typing import List, Tuple

from ...config import SimulationParameters
from ...rng import RandomSource
from ..core.population import Group, Individual, Population


def _pick_destination(source: int, group_count: int, rng: RandomSource) -> int:
    destination = rng.next_int(group_count - 1)
    if destination >= source:
        destination += 1
    return destination


def plan_migration(
    population: Population, params: SimulationParameters, rng: RandomSource
) -> List[Tuple[int, int, int]]:
    """Decide who moves, without touching the population.

    Returns ``(source, member_index, destination)`` triples in decision
    order. Each individual of the pre-migration membership is considered
    exactly once.
    """
    group_count = len(population)
    if params.migration_rate <= 0.0 or group_count < 2:
        return []
    frozen = [group.freeze() for group in population]
    moves: List[Tuple[int, int, int]] = []
    for source, members in enumerate(frozen):
        for index in range(len(members)):
            if rng.next_float() < params.migration_rate:
                moves.append((source, index, _pick_destination(source, group_count, rng)))
    return moves


def apply_migration(population: Population, moves: List[Tuple[int, int, int]]) -> Population:
    if not moves:
        return population
    leaving = {(source, index) for source, index, _ in moves}
    arrivals: List[List[Individual]] = [[] for _ in population]
    for source, index, destination in moves:
        arrivals[destination].append(population[source].members[index])
    result: Population = []
    for source, group in enumerate(population):
        staying = [member for index, member in enumerate(group.members) if (source, index) not in leaving]
        result.append(Group(staying + arrivals[source]))
    return result


def migrate(population: Population, params: SimulationParameters, rng: RandomSource) -> Population:
    return apply_migration(population, plan_migration(population, params, rng))
