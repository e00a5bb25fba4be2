"""Entry points for hosts that drive the model one generation at a time."""

from __future__ import annotations

from typing import Optional, Tuple

from .config import SimulationParameters, validate_parameters
from .sim.core.run import SimulationRun
from .sim.types.record import GenerationRecord


def configure(params: SimulationParameters) -> SimulationParameters:
    return validate_parameters(params)


def start(params: SimulationParameters, seed: Optional[int] = None) -> SimulationRun:
    run = SimulationRun(configure(params), seed=seed)
    run.start()
    return run


def step(run: SimulationRun) -> GenerationRecord:
    return run.step()


def stop(run: SimulationRun) -> None:
    run.stop()


def reset(run: SimulationRun) -> None:
    run.reset()


def get_history(run: SimulationRun) -> Tuple[GenerationRecord, ...]:
    return run.history


def get_conclusion(run: SimulationRun) -> Optional[str]:
    return run.conclusion
