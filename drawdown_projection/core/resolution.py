from __future__ import annotations

from dataclasses import dataclass

from .inputs import AdjustmentSet, Plan, ProjectionContext, ScenarioOverrides


@dataclass(frozen=True)
class EffectiveValues:
    monthly_expenses: float
    pension_monthly: float
    social_security_monthly: float
    other_income_monthly: float
    inflation_rate: float
    retirement_age: int


def _override(value, fallback):
    return value if value is not None else fallback


def resolve_effective_values(
    plan: Plan, overrides: ScenarioOverrides, adjustments: AdjustmentSet, context: ProjectionContext
) -> EffectiveValues:
    """Merge scenario overrides over plan values.

    Expenses are deliberately taken from the plan as-is; ``expenses_percent``
    scales them later so an edited expense is never counted twice.
    """
    return EffectiveValues(
        monthly_expenses=plan.monthly_expenses,
        pension_monthly=_override(overrides.pension_monthly, plan.pension_monthly),
        social_security_monthly=_override(overrides.social_security_monthly, plan.social_security_monthly),
        other_income_monthly=_override(overrides.other_income_monthly, plan.other_income_monthly),
        inflation_rate=_override(overrides.inflation_rate, plan.inflation_rate),
        retirement_age=context.retirement_age + adjustments.retirement_age_offset,
    )
