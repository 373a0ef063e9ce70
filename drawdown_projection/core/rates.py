from __future__ import annotations

from .inputs import AdjustmentSet, Plan


def blended_return_rate(
    cash_return_rate: float, equity_return_rate: float, cash_allocation: float, equity_allocation: float
) -> float:
    """Weighted cash/equity return over the investable share only."""
    investable_total = cash_allocation + equity_allocation
    if investable_total <= 0:
        return 0.0
    cash_weight = cash_allocation / investable_total
    equity_weight = equity_allocation / investable_total
    return cash_weight * cash_return_rate + equity_weight * equity_return_rate


def plan_blended_return_rate(plan: Plan) -> float:
    return blended_return_rate(
        plan.cash_return_rate, plan.equity_return_rate, plan.cash_allocation, plan.equity_allocation
    )


def liquid_equity_percent(plan: Plan) -> float:
    """Equity's share of the liquid (cash + equity) allocation, in percent."""
    liquid_total = plan.equity_allocation + plan.cash_allocation
    if liquid_total <= 0:
        return 0.0
    return plan.equity_allocation / liquid_total * 100


def real_return_rate(nominal_rate: float, inflation_rate: float) -> float:
    return nominal_rate - inflation_rate


def base_return_rate(plan: Plan, adjustments: AdjustmentSet, session_rate: float) -> float:
    """Return the pre-offset growth rate for liquid assets.

    The equity slider only redistributes the liquid share; housing keeps its
    own allocation and rate.
    """
    if adjustments.equity_percent is None:
        return session_rate

    equity_pct = adjustments.equity_percent / 100.0
    cash_pct = 1.0 - equity_pct
    housing_alloc = plan.housing_allocation
    liquid_share = 1.0 - housing_alloc
    return (
        plan.equity_return_rate * equity_pct * liquid_share
        + plan.cash_return_rate * cash_pct * liquid_share
        + plan.housing_return_rate * housing_alloc
    )


def adjusted_return_rate(base_rate: float, adjustments: AdjustmentSet) -> float:
    return base_rate + adjustments.return_rate_offset / 100.0


def adjusted_inflation_rate(effective_inflation: float, adjustments: AdjustmentSet) -> float:
    return effective_inflation + adjustments.inflation_offset / 100.0
