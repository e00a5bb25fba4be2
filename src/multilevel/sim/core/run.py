from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

from ...config import SimulationParameters
from ...errors import InvalidStateTransition
from ...rng import DeterministicRng, RandomSource
from ..systems import competition, migration, reproduction
from ..systems.conclusion import generate_conclusion
from ..systems.statistics import collect_statistics
from ..types.record import GenerationRecord
from ..types.snapshot import RunSnapshot
from .population import Individual, Population, initialize_population

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    STOPPED = "Stopped"
    COMPLETED = "Completed"


def advance_generation(
    population: Population, params: SimulationParameters, rng: RandomSource, generation: int
) -> Tuple[Population, GenerationRecord]:
    """Run one full generation and return the next population with its record.

    ``population`` is left untouched; every operator builds new groups.
    """
    next_population = reproduction.reproduce_population(population, params, rng)
    next_population = migration.migrate(next_population, params, rng)
    next_population = competition.compete(next_population, params, rng)
    fraction, variance = collect_statistics(next_population)
    return next_population, GenerationRecord(generation, fraction, variance)


class SimulationRun:
    """One run of the model, driven a generation at a time by its host.

    States move ``Idle -> Running -> Stopped | Completed`` and back to
    ``Idle`` via :meth:`reset`. Illegal calls raise
    :class:`InvalidStateTransition` and leave the run untouched.
    """

    def __init__(self, params: SimulationParameters, rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        self._params = params
        self._rng: RandomSource = rng if rng is not None else DeterministicRng(seed)
        self._state = RunState.IDLE
        self._population: Population = []
        self._history: List[GenerationRecord] = []
        self._generation = 0
        self._conclusion: Optional[str] = None

    @property
    def parameters(self) -> SimulationParameters:
        return self._params

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def history(self) -> Tuple[GenerationRecord, ...]:
        return tuple(self._history)

    @property
    def conclusion(self) -> Optional[str]:
        return self._conclusion

    def population_snapshot(self) -> Tuple[Tuple[Individual, ...], ...]:
        return tuple(group.freeze() for group in self._population)

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            state=self._state.value,
            generation=self._generation,
            generations=self._params.generations,
            group_sizes=tuple(len(group) for group in self._population),
            group_fractions=tuple(group.altruist_fraction for group in self._population),
            latest=self._history[-1] if self._history else None,
            conclusion=self._conclusion,
        )

    def start(self) -> GenerationRecord:
        if self._state is not RunState.IDLE:
            raise InvalidStateTransition("start", self._state.value)
        self._population = initialize_population(self._params, self._rng)
        fraction, variance = collect_statistics(self._population)
        record = GenerationRecord(0, fraction, variance)
        self._history.append(record)
        self._generation = 0
        self._state = RunState.RUNNING
        logger.info(
            "run started: %d groups of %d for %d generations",
            self._params.num_groups,
            self._params.group_size,
            self._params.generations,
        )
        self._complete_if_done()
        return record

    def step(self) -> GenerationRecord:
        if self._state is not RunState.RUNNING:
            raise InvalidStateTransition("step", self._state.value)
        population, record = advance_generation(self._population, self._params, self._rng, self._generation + 1)
        self._population = population
        self._history.append(record)
        self._generation = record.generation
        logger.debug(
            "generation %d: altruists=%.4f variance=%.4f",
            record.generation,
            record.altruist_fraction,
            record.group_variance,
        )
        self._complete_if_done()
        return record

    def run_to_completion(self) -> Tuple[GenerationRecord, ...]:
        while self._state is RunState.RUNNING:
            self.step()
        return self.history

    def stop(self) -> None:
        if self._state is not RunState.RUNNING:
            raise InvalidStateTransition("stop", self._state.value)
        self._state = RunState.STOPPED
        logger.info("run stopped at generation %d", self._generation)

    def reset(self) -> None:
        if self._state is RunState.RUNNING:
            raise InvalidStateTransition("reset", self._state.value)
        self._population = []
        self._history.clear()
        self._generation = 0
        self._conclusion = None
        reset_rng = getattr(self._rng, "reset", None)
        if reset_rng is not None:
            reset_rng()
        if self._state is not RunState.IDLE:
            logger.info("run reset")
        self._state = RunState.IDLE

    def _complete_if_done(self) -> None:
        if self._generation < self._params.generations:
            return
        self._state = RunState.COMPLETED
        self._conclusion = generate_conclusion(self._history, self._params)
        logger.info(
            "run completed after %d generations: altruists=%.4f",
            self._generation,
            self._history[-1].altruist_fraction,
        )
