from __future__ import annotations

import pytest

from drawdown_projection.core.inputs import (
    AdjustmentSet,
    BaselineProjection,
    Plan,
    PreRetirementAccumulation,
    ProjectionContext,
    ScenarioOverrides,
)


@pytest.fixture
def plan() -> Plan:
    return Plan(
        monthly_expenses=5000,
        pension_monthly=1000,
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
    )


@pytest.fixture
def baseline() -> BaselineProjection:
    return BaselineProjection(
        liquid_assets=500_000,
        non_spendable_at_retirement=200_000,
        pre_retirement_accumulation=PreRetirementAccumulation(years_to_retirement=10, starting_balance=250_000),
        runway_years=26,
        runway_months=312,
        plan_id="plan-1",
        currency="USD",
    )


@pytest.fixture
def context() -> ProjectionContext:
    return ProjectionContext(
        retirement_age=65,
        life_expectancy=90,
        plan_currency="USD",
        monthly_investment=1000,
        blended_return_rate=0.06,
    )


@pytest.fixture
def no_overrides() -> ScenarioOverrides:
    return ScenarioOverrides()


@pytest.fixture
def defaults() -> AdjustmentSet:
    return AdjustmentSet()


def flat_plan(**kwargs) -> Plan:
    """Zero growth, zero inflation plan so balances move by whole withdrawals."""
    values = dict(
        monthly_expenses=1500,
        pension_monthly=0,
        social_security_monthly=0,
        other_income_monthly=0,
        equity_return_rate=0.0,
        cash_return_rate=0.0,
        housing_return_rate=0.0,
        inflation_rate=0.0,
        life_expectancy=90,
    )
    values.update(kwargs)
    return Plan(**values)


def flat_context(**kwargs) -> ProjectionContext:
    values = dict(retirement_age=65, life_expectancy=90, monthly_investment=0.0, blended_return_rate=0.0)
    values.update(kwargs)
    return ProjectionContext(**values)
