from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .accumulation import adjust_for_retirement_shift
from .engine import DrawdownParams, liquidation_event, run_drawdown
from .inputs import (
    AdjustedProjection,
    AdjustmentSet,
    BaselineProjection,
    Plan,
    ProjectionContext,
    ScenarioOverrides,
)
from .rates import adjusted_inflation_rate, adjusted_return_rate, base_return_rate
from .resolution import resolve_effective_values
from .runway import summarize_runway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjustedRates:
    base_return_rate: float
    return_rate: float
    inflation_rate: float


def resolve_rates(
    plan: Plan, adjustments: AdjustmentSet, context: ProjectionContext, effective_inflation: float
) -> AdjustedRates:
    base_rate = base_return_rate(plan, adjustments, context.blended_return_rate)
    return AdjustedRates(
        base_return_rate=base_rate,
        return_rate=adjusted_return_rate(base_rate, adjustments),
        inflation_rate=adjusted_inflation_rate(effective_inflation, adjustments),
    )


def adjust(
    baseline: Optional[BaselineProjection],
    plan: Plan,
    overrides: ScenarioOverrides,
    adjustments: AdjustmentSet,
    context: ProjectionContext,
) -> Optional[AdjustedProjection]:
    """Derive an alternate yearly trajectory from a cached baseline and what-if deltas.

    Pure and deterministic: no remote calls, no caching, inputs are never
    mutated. Slider values are trusted as-is; keeping them in range is the
    caller's job. Returns None when there is no baseline yet.
    """
    if baseline is None:
        return None

    effective = resolve_effective_values(plan, overrides, adjustments, context)
    rates = resolve_rates(plan, adjustments, context, effective.inflation_rate)

    shifted = adjust_for_retirement_shift(
        baseline,
        retirement_age_offset=effective.retirement_age - context.retirement_age,
        monthly_investment=context.monthly_investment,
        contribution_percent=adjustments.contribution_percent,
        base_return_rate=rates.base_return_rate,
        housing_return_rate=plan.housing_return_rate,
    )

    params = DrawdownParams(
        retirement_age=effective.retirement_age,
        return_rate=rates.return_rate,
        inflation_rate=rates.inflation_rate,
        housing_return_rate=plan.housing_return_rate,
        pension_annual=effective.pension_monthly * 12,
        social_security_annual=effective.social_security_monthly * 12,
        other_income_annual=effective.other_income_monthly * 12,
        rental_income_annual=context.rental_income_monthly * 12,
        initial_liquid_assets=shifted.liquid_assets,
        liquidation_threshold=adjustments.liquidation_threshold / 100.0,
        currency=context.plan_currency,
    )
    annual_expenses = effective.monthly_expenses * 12 * (adjustments.expenses_percent / 100.0)

    logger.debug(
        "Adjusting projection: retirement age %d, return %.4f, inflation %.4f, liquid %.2f, property %.2f",
        params.retirement_age,
        params.return_rate,
        params.inflation_rate,
        shifted.liquid_assets,
        shifted.non_spendable,
    )

    rows, final_state = run_drawdown(
        params,
        starting_balance=shifted.liquid_assets,
        starting_non_spendable=shifted.non_spendable,
        annual_expenses=annual_expenses,
        life_expectancy=context.life_expectancy,
    )
    runway = summarize_runway(rows, effective.retirement_age)
    event = liquidation_event(final_state)

    if runway.depletion_age is not None:
        logger.debug("Liquid balance depleted at age %d", runway.depletion_age)

    return AdjustedProjection.from_baseline(
        baseline,
        yearly_projections=tuple(rows),
        runway_years=runway.runway_years,
        runway_months=runway.runway_months,
        depletion_age=runway.depletion_age,
        liquid_balance_at_liquidation=event.balance_at_event if event else None,
        liquidation_threshold_percent=adjustments.liquidation_threshold,
    )
