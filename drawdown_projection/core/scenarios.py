from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .baseline import BaselineRequest
from .inputs import AdjustmentSet, Plan, ProjectionContext
from .rates import plan_blended_return_rate


@dataclass(frozen=True)
class QuickScenario:
    name: str
    description: str
    adjustments: AdjustmentSet


def default_plan() -> Plan:
    """Provide a reasonable starting point for the UI."""
    return Plan(
        monthly_expenses=5_000,
        pension_monthly=1_000,
        social_security_monthly=500,
        other_income_monthly=200,
        equity_return_rate=0.08,
        cash_return_rate=0.03,
        housing_return_rate=0.03,
        equity_allocation=0.6,
        cash_allocation=0.2,
        housing_allocation=0.2,
        inflation_rate=0.025,
        life_expectancy=90,
        planning_horizon_years=25,
        target_balance=None,
        name="Default plan",
    )


def default_request(plan: Plan | None = None) -> BaselineRequest:
    plan = plan or default_plan()
    return BaselineRequest(
        plan=plan,
        liquid_assets=350_000,
        non_spendable_assets=150_000,
        current_age=55,
        retirement_age=65,
        life_expectancy=plan.life_expectancy,
        monthly_contribution=1_500,
    )


def default_context(plan: Plan | None = None) -> ProjectionContext:
    plan = plan or default_plan()
    return ProjectionContext(
        retirement_age=65,
        life_expectancy=plan.life_expectancy,
        plan_currency=plan.expenses_currency,
        monthly_investment=1_500,
        blended_return_rate=plan_blended_return_rate(plan),
    )


QUICK_SCENARIOS: Tuple[QuickScenario, ...] = (
    QuickScenario(
        "Retire early",
        "Stop working three years sooner.",
        AdjustmentSet(retirement_age_offset=-3),
    ),
    QuickScenario(
        "Work longer",
        "Keep contributing for two more years.",
        AdjustmentSet(retirement_age_offset=2),
    ),
    QuickScenario(
        "Market downturn",
        "Returns two points lower for the whole retirement.",
        AdjustmentSet(return_rate_offset=-2),
    ),
    QuickScenario(
        "High inflation",
        "Inflation two points above plan.",
        AdjustmentSet(inflation_offset=2),
    ),
    QuickScenario(
        "Lean retirement",
        "Spend 20% less and keep the house as a late backstop.",
        AdjustmentSet(expenses_percent=80, liquidation_threshold=5),
    ),
    QuickScenario(
        "Save more",
        "Contribute 50% more every month until retirement.",
        AdjustmentSet(contribution_percent=150),
    ),
)


def quick_scenario(name: str) -> QuickScenario:
    for scenario in QUICK_SCENARIOS:
        if scenario.name == name:
            return scenario
    raise KeyError(f"Unknown scenario: {name}")
