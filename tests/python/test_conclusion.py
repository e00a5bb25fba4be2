from __future__ import annotations

import pytest

from multilevel.config import SimulationParameters
from multilevel.sim.systems.conclusion import generate_conclusion
from multilevel.sim.types.record import GenerationRecord


def _history(initial: float, final: float, generations: int = 100):
    return [GenerationRecord(0, initial, 0.0), GenerationRecord(generations, final, 0.0)]


def test_empty_history_is_rejected():
    with pytest.raises(ValueError):
        generate_conclusion([], SimulationParameters())


def test_high_outcome_with_group_selection_dominating():
    params = SimulationParameters(
        altruism_cost=0.1, altruism_benefit=0.15, group_competition_strength=0.5, migration_rate=0.1
    )
    text = generate_conclusion(_history(0.5, 0.9), params)

    outcome = text.index("Altruism evolved to a high frequency, ending at 90.0%")
    trend = text.index("increased from 50.0% to 90.0% over 100 generations")
    selection = text.index("between-group selection outweigh within-group selection")
    assert outcome < trend < selection
    assert "migration" not in text
    assert "harder to evolve" not in text and "easier to evolve" not in text


def test_low_outcome_within_only_high_migration_costly():
    params = SimulationParameters(
        within_group_selection=True,
        between_group_selection=False,
        migration_rate=0.25,
        altruism_cost=0.2,
        altruism_benefit=0.1,
    )
    text = generate_conclusion(_history(0.6, 0.1), params)

    assert text.startswith("Altruism was selected against, falling to 10.0%")
    assert "decreased from 60.0% to 10.0%" in text
    assert "only within-group selection" in text
    assert "high migration rate (0.25)" in text
    assert text.endswith("altruism was harder to evolve.")


def test_mixed_outcome_without_trend_between_only():
    params = SimulationParameters(
        within_group_selection=False,
        between_group_selection=True,
        migration_rate=0.01,
        altruism_cost=0.05,
        altruism_benefit=0.3,
    )
    text = generate_conclusion(_history(0.5, 0.5), params)

    assert text.startswith("The population settled into a mixed equilibrium with 50.0% altruists.")
    assert "increased" not in text and "decreased" not in text
    assert "only between-group selection" in text
    assert "low migration rate (0.01)" in text
    assert text.endswith("altruism was easier to evolve.")


def test_equal_strength_and_double_cost_favours_within_group_selection():
    params = SimulationParameters(group_competition_strength=0.2, altruism_cost=0.1)
    text = generate_conclusion(_history(0.5, 0.4), params)

    assert "within-group selection tended to dominate" in text


def test_no_selection_clause_when_both_modes_disabled():
    params = SimulationParameters(
        within_group_selection=False,
        between_group_selection=False,
        migration_rate=0.1,
        altruism_cost=0.1,
        altruism_benefit=0.15,
    )
    text = generate_conclusion(_history(0.5, 0.5), params)

    assert text == "The population settled into a mixed equilibrium with 50.0% altruists."


@pytest.mark.parametrize("final", [0.8, 0.2])
def test_outcome_thresholds_are_strict(final):
    text = generate_conclusion(_history(final, final), SimulationParameters(migration_rate=0.1))
    assert text.startswith("The population settled into a mixed equilibrium")


@pytest.mark.parametrize("rate", [0.2, 0.05])
def test_migration_thresholds_are_strict(rate):
    text = generate_conclusion(_history(0.5, 0.5), SimulationParameters(migration_rate=rate))
    assert "migration" not in text
