from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List

import yaml

from .errors import ConfigurationError


@dataclass(frozen=True)
class SimulationParameters:
    num_groups: int = 10
    group_size: int = 30
    generations: int = 200
    altruism_cost: float = 0.1
    altruism_benefit: float = 0.15
    migration_rate: float = 0.05
    group_competition_strength: float = 0.5
    group_extinction_rate: float = 0.05
    mutation_rate: float = 0.01
    within_group_selection: bool = True
    between_group_selection: bool = True
    initial_altruist_frequency: float = 0.5

    @staticmethod
    def from_yaml(path: Path) -> "SimulationParameters":
        data = yaml.safe_load(Path(path).read_text())
        if data is None:
            data = {}
        return load_parameters(data)


@dataclass
class AppConfig:
    parameters: SimulationParameters = field(default_factory=SimulationParameters)
    seed: int = 42
    generation_interval: float = 0.05

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text())
        if data is None:
            data = {}
        return load_app_config(data)


# name -> (low, high); ints are checked separately for their type.
_INT_RANGES = {
    "num_groups": (2, 20),
    "group_size": (10, 100),
    "generations": (50, 500),
}
_FLOAT_RANGES = {
    "initial_altruist_frequency": (0.0, 1.0),
    "altruism_cost": (0.0, 0.2),
    "altruism_benefit": (0.0, 0.3),
    "migration_rate": (0.0, 0.3),
    "group_competition_strength": (0.0, 1.0),
    "group_extinction_rate": (0.0, 0.2),
    "mutation_rate": (0.0, 0.1),
}
_FLAGS = ("within_group_selection", "between_group_selection")
_GENERATION_STEP = 50


def _parameter_errors(params: SimulationParameters) -> List[str]:
    errors: List[str] = []
    for name, (low, high) in _INT_RANGES.items():
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{name} must be an integer, got {value!r}")
        elif not low <= value <= high:
            errors.append(f"{name} must be in [{low}, {high}], got {value}")
    generations = params.generations
    if isinstance(generations, int) and not isinstance(generations, bool):
        if generations % _GENERATION_STEP != 0:
            errors.append(f"generations must be a multiple of {_GENERATION_STEP}, got {generations}")
    for name, (low, high) in _FLOAT_RANGES.items():
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{name} must be a number, got {value!r}")
        elif not low <= value <= high:
            errors.append(f"{name} must be in [{low}, {high}], got {value}")
    for name in _FLAGS:
        value = getattr(params, name)
        if not isinstance(value, bool):
            errors.append(f"{name} must be a boolean, got {value!r}")
    return errors


def validate_parameters(params: SimulationParameters) -> SimulationParameters:
    """Return ``params`` unchanged if every field is in range.

    Out-of-range values are reported, never clamped. All violations are
    collected into a single :class:`ConfigurationError`.
    """
    errors = _parameter_errors(params)
    if errors:
        raise ConfigurationError(errors)
    return params


def _require_mapping(raw: Any, name: str) -> dict:
    if not isinstance(raw, dict):
        raise ConfigurationError([f"{name} must be a mapping, got {type(raw).__name__}"])
    return raw


def _setting_errors(config: AppConfig) -> List[str]:
    errors: List[str] = []
    seed = config.seed
    if isinstance(seed, bool) or not isinstance(seed, int):
        errors.append(f"seed must be an integer, got {seed!r}")
    interval = config.generation_interval
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        errors.append(f"generation_interval must be a number, got {interval!r}")
    elif interval <= 0:
        errors.append(f"generation_interval must be positive, got {interval}")
    return errors


def validate_app_config(config: AppConfig) -> AppConfig:
    errors = _parameter_errors(config.parameters) + _setting_errors(config)
    if errors:
        raise ConfigurationError(errors)
    return config


def load_parameters(raw: dict) -> SimulationParameters:
    raw = _require_mapping(raw, "parameters")
    known = {f.name for f in fields(SimulationParameters)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError([f"unknown parameter: {name}" for name in unknown])
    return SimulationParameters(**raw)


def load_app_config(raw: dict) -> AppConfig:
    raw = _require_mapping(raw, "configuration")
    values: dict[str, Any] = {k: v for k, v in raw.items() if k != "parameters"}
    unknown = sorted(set(values) - {"seed", "generation_interval"})
    if unknown:
        raise ConfigurationError([f"unknown setting: {name}" for name in unknown])
    parameters_raw = raw.get("parameters")
    parameters = load_parameters({} if parameters_raw is None else parameters_raw)
    config = AppConfig(parameters=parameters, **values)
    errors = _setting_errors(config)
    if errors:
        raise ConfigurationError(errors)
    return config
