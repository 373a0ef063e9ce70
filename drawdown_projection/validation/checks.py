from __future__ import annotations

from drawdown_projection.core.baseline import BaselineRequest
from drawdown_projection.core.inputs import ADJUSTMENT_BOUNDS, AdjustmentSet, Plan, ProjectionContext


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def validate_plan(plan: Plan) -> None:
    _require(plan.monthly_expenses >= 0, "Monthly expenses cannot be negative.")
    _require(plan.pension_monthly >= 0, "Pension cannot be negative.")
    _require(plan.social_security_monthly >= 0, "Social security cannot be negative.")
    _require(plan.other_income_monthly >= 0, "Other income cannot be negative.")
    _require(plan.equity_return_rate > -1, "Equity return must be above -100%.")
    _require(plan.cash_return_rate > -1, "Cash return must be above -100%.")
    _require(plan.housing_return_rate > -1, "Housing return must be above -100%.")
    for label, value in (
        ("Equity", plan.equity_allocation),
        ("Cash", plan.cash_allocation),
        ("Housing", plan.housing_allocation),
    ):
        _require(0 <= value <= 1, f"{label} allocation must be between 0 and 1.")
    total = plan.equity_allocation + plan.cash_allocation + plan.housing_allocation
    _require(abs(total - 1.0) <= 0.01, "Allocations must sum to 100%.")
    _require(plan.inflation_rate > -1, "Inflation must be above -100%.")
    _require(plan.life_expectancy > 0, "Life expectancy must be positive.")
    _require(plan.planning_horizon_years > 0, "Planning horizon must be positive.")
    _require(plan.target_balance is None or plan.target_balance >= 0, "Target balance cannot be negative.")


def validate_context(context: ProjectionContext) -> None:
    _require(context.retirement_age > 0, "Retirement age must be positive.")
    _require(context.life_expectancy >= context.retirement_age, "Life expectancy must not precede retirement age.")
    _require(context.monthly_investment >= 0, "Monthly investment cannot be negative.")
    _require(context.rental_income_monthly >= 0, "Rental income cannot be negative.")


def validate_request(request: BaselineRequest) -> None:
    validate_plan(request.plan)
    _require(request.liquid_assets >= 0, "Liquid assets cannot be negative.")
    _require(request.non_spendable_assets >= 0, "Non-spendable assets cannot be negative.")
    _require(request.monthly_contribution >= 0, "Monthly contribution cannot be negative.")
    _require(
        request.current_age is None or request.current_age <= request.retirement_age,
        "Current age cannot exceed retirement age.",
    )
    _require(
        request.resolved_life_expectancy() >= request.retirement_age,
        "Life expectancy must not precede retirement age.",
    )


def validate_adjustments(adjustments: AdjustmentSet) -> None:
    """Slider bounds for the UI; the adjuster itself does not call this."""
    for name, (low, high) in ADJUSTMENT_BOUNDS.items():
        value = getattr(adjustments, name)
        if value is None:
            _require(name == "equity_percent", f"{name} must be set.")
            continue
        _require(low <= value <= high, f"{name} must be between {low} and {high}.")
    _require(
        float(adjustments.retirement_age_offset).is_integer(), "Retirement age offset must be whole years."
    )


def validate_inputs(plan: Plan, context: ProjectionContext, adjustments: AdjustmentSet) -> None:
    validate_plan(plan)
    validate_context(context)
    validate_adjustments(adjustments)
