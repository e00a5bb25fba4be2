from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from ...config import SimulationParameters
from ...rng import RandomSource


@dataclass(frozen=True, slots=True)
class Individual:
    is_altruist: bool

    def flipped(self) -> "Individual":
        return ALTRUIST if not self.is_altruist else SELFISH


ALTRUIST = Individual(True)
SELFISH = Individual(False)


@dataclass(slots=True)
class Group:
    members: List[Individual] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)

    @property
    def altruist_count(self) -> int:
        return sum(1 for member in self.members if member.is_altruist)

    @property
    def altruist_fraction(self) -> float:
        if not self.members:
            return 0.0
        return self.altruist_count / len(self.members)

    def copy(self) -> "Group":
        return Group(list(self.members))

    def freeze(self) -> Tuple[Individual, ...]:
        return tuple(self.members)


Population = List[Group]


def maybe_mutate(individual: Individual, mutation_rate: float, rng: RandomSource) -> Individual:
    if rng.next_float() < mutation_rate:
        return individual.flipped()
    return individual


def initialize_population(params: SimulationParameters, rng: RandomSource) -> Population:
    frequency = params.initial_altruist_frequency
    population: Population = []
    for _ in range(params.num_groups):
        members = [ALTRUIST if rng.next_float() < frequency else SELFISH for _ in range(params.group_size)]
        population.append(Group(members))
    return population


def copy_population(population: Population) -> Population:
    return [group.copy() for group in population]
