from __future__ import annotations

import pytest

from multilevel import api
from multilevel.config import SimulationParameters
from multilevel.errors import ConfigurationError, InvalidStateTransition
from multilevel.sim.core.run import RunState


def _valid_params(**overrides) -> SimulationParameters:
    values = dict(num_groups=3, group_size=10, generations=50)
    values.update(overrides)
    return SimulationParameters(**values)


def test_configure_returns_valid_parameters_unchanged():
    params = _valid_params()
    assert api.configure(params) is params


def test_configure_accepts_range_boundaries():
    params = SimulationParameters(
        num_groups=20,
        group_size=100,
        generations=500,
        altruism_cost=0.2,
        altruism_benefit=0.3,
        migration_rate=0.3,
        group_competition_strength=1.0,
        group_extinction_rate=0.2,
        mutation_rate=0.1,
        initial_altruist_frequency=0.0,
    )
    assert api.configure(params) is params


def test_configure_reports_every_violation():
    params = _valid_params(num_groups=1, altruism_cost=0.5, mutation_rate=-0.01)

    with pytest.raises(ConfigurationError) as excinfo:
        api.configure(params)

    errors = excinfo.value.errors
    assert len(errors) == 3
    assert any("num_groups" in error for error in errors)
    assert any("altruism_cost" in error for error in errors)
    assert any("mutation_rate" in error for error in errors)


@pytest.mark.parametrize(
    "overrides",
    [
        {"generations": 75},
        {"generations": 550},
        {"group_size": 10.0},
        {"num_groups": True},
        {"within_group_selection": 1},
        {"initial_altruist_frequency": 1.5},
        {"migration_rate": "0.1"},
    ],
)
def test_configure_rejects_bad_values(overrides):
    with pytest.raises(ConfigurationError):
        api.configure(_valid_params(**overrides))


def test_start_validates_before_running():
    with pytest.raises(ConfigurationError):
        api.start(_valid_params(group_size=5))


def test_full_lifecycle():
    run = api.start(_valid_params(), seed=17)
    assert run.state is RunState.RUNNING
    assert api.get_conclusion(run) is None

    record = api.step(run)
    assert record.generation == 1
    while run.state is RunState.RUNNING:
        api.step(run)

    history = api.get_history(run)
    assert len(history) == 51
    assert isinstance(history, tuple)
    assert api.get_conclusion(run)
    with pytest.raises(InvalidStateTransition):
        api.step(run)

    api.reset(run)
    assert run.state is RunState.IDLE
    assert api.get_history(run) == ()
    assert api.get_conclusion(run) is None


def test_stop_then_reset():
    run = api.start(_valid_params(), seed=18)
    api.step(run)
    api.stop(run)

    assert run.state is RunState.STOPPED
    assert len(api.get_history(run)) == 2
    assert api.get_conclusion(run) is None
    api.reset(run)
    assert run.state is RunState.IDLE


def test_default_parameters_run_to_completion():
    run = api.start(SimulationParameters(), seed=42)
    run.run_to_completion()

    assert run.generation == 200
    assert api.get_conclusion(run)
