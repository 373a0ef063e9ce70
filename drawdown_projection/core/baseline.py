from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .inputs import (
    AdjustmentSet,
    BaselineProjection,
    Plan,
    PreRetirementAccumulation,
    ProjectionContext,
    ScenarioOverrides,
)
from .rates import plan_blended_return_rate
from .what_if import adjust


@dataclass(frozen=True)
class BaselineRequest:
    plan: Plan
    liquid_assets: float
    non_spendable_assets: float = 0.0
    current_age: Optional[int] = None
    retirement_age: int = 65
    life_expectancy: Optional[int] = None
    monthly_contribution: float = 0.0
    portfolio_ids: Tuple[str, ...] = field(default_factory=tuple)
    rental_income_monthly: float = 0.0
    blended_return_rate: Optional[float] = None
    as_of_date: Optional[str] = None

    def resolved_life_expectancy(self) -> int:
        return self.life_expectancy if self.life_expectancy is not None else self.plan.life_expectancy

    def resolved_return_rate(self) -> float:
        if self.blended_return_rate is not None:
            return self.blended_return_rate
        return plan_blended_return_rate(self.plan)

    def context(self) -> ProjectionContext:
        return ProjectionContext(
            retirement_age=self.retirement_age,
            life_expectancy=self.resolved_life_expectancy(),
            plan_currency=self.plan.expenses_currency,
            monthly_investment=self.monthly_contribution,
            blended_return_rate=self.resolved_return_rate(),
            rental_income_monthly=self.rental_income_monthly,
        )


def accumulate_to_retirement(request: BaselineRequest) -> PreRetirementAccumulation:
    """Grow current assets and monthly contributions up to the retirement age."""
    years = 0
    if request.current_age is not None:
        years = max(0, request.retirement_age - request.current_age)

    rate = request.resolved_return_rate()
    housing_rate = request.plan.housing_return_rate
    annual_contribution = request.monthly_contribution * 12.0

    liquid_at_retirement = request.liquid_assets * (1 + rate) ** years
    # contributions land at each year end; the last one earns nothing
    fv_contributions = float(np.sum(annual_contribution * (1 + rate) ** np.arange(years, dtype=float)))
    total_contributions = annual_contribution * years
    non_spendable = request.non_spendable_assets * (1 + housing_rate) ** years

    return PreRetirementAccumulation(
        years_to_retirement=years,
        starting_balance=request.liquid_assets,
        liquid_assets_at_retirement=liquid_at_retirement + fv_contributions,
        growth_on_existing_assets=liquid_at_retirement - request.liquid_assets,
        monthly_contribution=request.monthly_contribution,
        total_contributions=total_contributions,
        future_value_of_contributions=fv_contributions,
        growth_on_contributions=fv_contributions - total_contributions,
        current_non_spendable_assets=request.non_spendable_assets,
        non_spendable_at_retirement=non_spendable,
        blended_return_rate=rate,
        housing_return_rate=housing_rate,
    )


def compute_local_baseline(request: BaselineRequest) -> BaselineProjection:
    """Reference baseline provider for running without the remote projection service.

    Pre-retirement growth is compounded here; the drawdown years reuse the
    adjuster with default adjustments so a no-op what-if replays this baseline.
    """
    plan = request.plan
    accumulation = accumulate_to_retirement(request)
    seed = BaselineProjection(
        liquid_assets=accumulation.liquid_assets_at_retirement,
        non_spendable_at_retirement=accumulation.non_spendable_at_retirement,
        pre_retirement_accumulation=accumulation,
        currency=plan.expenses_currency,
        plan_id=plan.plan_id,
        as_of_date=request.as_of_date or pd.Timestamp.today().date().isoformat(),
        total_assets=request.liquid_assets + request.non_spendable_assets,
        monthly_expenses=plan.monthly_expenses,
        housing_return_rate=plan.housing_return_rate,
        target_balance=plan.target_balance,
    )
    drawdown = adjust(seed, plan, ScenarioOverrides(), AdjustmentSet(), request.context())

    surplus = None
    if plan.target_balance is not None and drawdown.yearly_projections:
        surplus = drawdown.yearly_projections[-1].ending_balance - plan.target_balance

    return BaselineProjection(
        liquid_assets=seed.liquid_assets,
        non_spendable_at_retirement=seed.non_spendable_at_retirement,
        pre_retirement_accumulation=accumulation,
        yearly_projections=drawdown.yearly_projections,
        runway_years=drawdown.runway_years,
        runway_months=drawdown.runway_months,
        depletion_age=drawdown.depletion_age,
        currency=seed.currency,
        plan_id=seed.plan_id,
        as_of_date=seed.as_of_date,
        total_assets=seed.total_assets,
        monthly_expenses=seed.monthly_expenses,
        housing_return_rate=seed.housing_return_rate,
        target_balance=plan.target_balance,
        surplus_or_deficit=surplus,
    )
