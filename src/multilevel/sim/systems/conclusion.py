"""Rule-based summary of a completed run.

Each rule below contributes at most one sentence; rules that do not fire
contribute nothing. Sentences are joined in rule order.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ...config import SimulationParameters
from ..types.record import GenerationRecord

HIGH_FRACTION = 0.8
LOW_FRACTION = 0.2
HIGH_MIGRATION = 0.2
LOW_MIGRATION = 0.05


def _percent(value: float) -> str:
    return f"{value * 100:.1f}%"


def outcome_clause(final: float) -> str:
    if final > HIGH_FRACTION:
        return f"Altruism evolved to a high frequency, ending at {_percent(final)} of the population."
    if final < LOW_FRACTION:
        return f"Altruism was selected against, falling to {_percent(final)} of the population."
    return f"The population settled into a mixed equilibrium with {_percent(final)} altruists."


def trend_clause(initial: float, final: float, generations: int) -> Optional[str]:
    if final > initial:
        return f"Altruist frequency increased from {_percent(initial)} to {_percent(final)} over {generations} generations."
    if final < initial:
        return f"Altruist frequency decreased from {_percent(initial)} to {_percent(final)} over {generations} generations."
    return None


def selection_clause(params: SimulationParameters) -> Optional[str]:
    within = params.within_group_selection
    between = params.between_group_selection
    if between and not within:
        return (
            "With only between-group selection active, altruists paid no cost within their groups, "
            "so groups rich in altruists were free to outcompete the rest."
        )
    if within and not between:
        return (
            "With only within-group selection active, selfish individuals out-reproduced altruists "
            "inside every group and nothing rewarded altruistic groups."
        )
    if within and between:
        strength = params.group_competition_strength
        cost = params.altruism_cost
        if strength > 2 * cost:
            return (
                f"Group competition (strength {strength:.2f}) was strong relative to the cost of altruism "
                f"({cost:.2f}), letting between-group selection outweigh within-group selection."
            )
        return (
            f"The cost of altruism ({cost:.2f}) was large relative to group competition "
            f"(strength {strength:.2f}), so within-group selection tended to dominate."
        )
    return None


def migration_clause(rate: float) -> Optional[str]:
    if rate > HIGH_MIGRATION:
        return (
            f"A high migration rate ({rate:.2f}) mixed the groups and weakened the differences "
            "between-group selection acts on."
        )
    if rate < LOW_MIGRATION:
        return (
            f"A low migration rate ({rate:.2f}) kept groups distinct, strengthening between-group selection."
        )
    return None


def cost_benefit_clause(cost: float, benefit: float) -> Optional[str]:
    if cost > benefit:
        return f"Because the cost of altruism ({cost:.2f}) exceeded its benefit ({benefit:.2f}), altruism was harder to evolve."
    if cost < benefit / 3:
        return f"Because the benefit of altruism ({benefit:.2f}) far exceeded its cost ({cost:.2f}), altruism was easier to evolve."
    return None


def generate_conclusion(history: Sequence[GenerationRecord], params: SimulationParameters) -> str:
    if not history:
        raise ValueError("cannot draw a conclusion from an empty history")
    initial = history[0].altruist_fraction
    final = history[-1].altruist_fraction
    clauses: List[Optional[str]] = [
        outcome_clause(final),
        trend_clause(initial, final, history[-1].generation),
        selection_clause(params),
        migration_clause(params.migration_rate),
        cost_benefit_clause(params.altruism_cost, params.altruism_benefit),
    ]
    return " ".join(clause for clause in clauses if clause)
