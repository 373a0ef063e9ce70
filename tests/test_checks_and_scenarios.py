from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import flat_context, flat_plan
from drawdown_projection.core.impact import scenario_impact
from drawdown_projection.core.inputs import (
    AdjustmentSet,
    BaselineProjection,
    ScenarioOverrides,
    has_scenario_changes,
)
from drawdown_projection.core.scenarios import QUICK_SCENARIOS, default_context, default_plan, default_request, quick_scenario
from drawdown_projection.core.what_if import adjust
from drawdown_projection.validation.checks import (
    validate_adjustments,
    validate_context,
    validate_inputs,
    validate_plan,
    validate_request,
)


def test_defaults_are_valid():
    plan = default_plan()
    validate_inputs(plan, default_context(plan), AdjustmentSet())
    validate_request(default_request(plan))


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"monthly_expenses": -1}, "Monthly expenses"),
        ({"equity_allocation": 0.9}, "sum to 100%"),
        ({"housing_allocation": 1.5}, "Housing allocation"),
        ({"life_expectancy": 0}, "Life expectancy"),
        ({"target_balance": -10}, "Target balance"),
    ],
)
def test_invalid_plan(changes, message):
    with pytest.raises(ValueError, match=message):
        validate_plan(replace(default_plan(), **changes))


def test_context_life_expectancy_before_retirement():
    with pytest.raises(ValueError, match="precede"):
        validate_context(replace(default_context(), life_expectancy=60))


def test_request_current_age_after_retirement():
    with pytest.raises(ValueError, match="Current age"):
        validate_request(replace(default_request(), current_age=70))


@pytest.mark.parametrize(
    "adjustments",
    [
        AdjustmentSet(retirement_age_offset=11),
        AdjustmentSet(expenses_percent=40),
        AdjustmentSet(return_rate_offset=4.5),
        AdjustmentSet(inflation_offset=-3),
        AdjustmentSet(contribution_percent=250),
        AdjustmentSet(equity_percent=101),
        AdjustmentSet(liquidation_threshold=-1),
    ],
)
def test_out_of_range_adjustments_rejected_by_ui_validation(adjustments):
    with pytest.raises(ValueError):
        validate_adjustments(adjustments)


def test_adjuster_tolerates_out_of_range_values(baseline, plan, context):
    wild = AdjustmentSet(retirement_age_offset=-8, expenses_percent=300, contribution_percent=500, liquidation_threshold=150)

    result = adjust(baseline, plan, ScenarioOverrides(), wild, context)

    assert result is not None
    assert all(row.ending_balance >= 0 for row in result.yearly_projections)


def test_has_scenario_changes():
    assert not has_scenario_changes(AdjustmentSet())
    assert has_scenario_changes(AdjustmentSet(equity_percent=60))
    assert has_scenario_changes(AdjustmentSet(liquidation_threshold=20))


def test_quick_scenarios_are_within_bounds():
    assert len({s.name for s in QUICK_SCENARIOS}) == len(QUICK_SCENARIOS)
    for scenario in QUICK_SCENARIOS:
        validate_adjustments(scenario.adjustments)
        assert has_scenario_changes(scenario.adjustments)
    assert quick_scenario("Work longer").adjustments.retirement_age_offset == 2
    with pytest.raises(KeyError):
        quick_scenario("Lottery win")


def test_scenario_impact_reports_sale_and_runway_change(baseline, plan, context):
    adjusted = adjust(baseline, plan, ScenarioOverrides(), AdjustmentSet(liquidation_threshold=90), context)

    impact = scenario_impact(adjusted, baseline, target_balance=0)

    sale = next(row for row in adjusted.yearly_projections if row.property_liquidated)
    assert impact.property_sale_age == sale.age
    assert impact.liquid_funds_last_to_age == sale.age
    assert impact.liquid_balance_at_sale == adjusted.liquid_balance_at_liquidation
    assert impact.has_illiquid_assets
    assert impact.runway_change_years == adjusted.runway_years - baseline.runway_years
    assert impact.surplus_or_deficit == pytest.approx(adjusted.yearly_projections[-1].ending_balance)


def test_scenario_impact_without_property(plan, context):
    adjusted = adjust(BaselineProjection(liquid_assets=5_000_000), plan, ScenarioOverrides(), AdjustmentSet(), context)

    impact = scenario_impact(adjusted)

    assert impact.property_sale_age is None
    assert impact.liquid_funds_last_to_age is None
    assert not impact.has_illiquid_assets
    assert impact.runway_change_years is None
    assert impact.surplus_or_deficit is None


def test_liquid_funds_last_to_is_beyond_horizon_without_a_sale():
    plan = flat_plan()
    adjusted = adjust(BaselineProjection(liquid_assets=120_000), plan, ScenarioOverrides(), AdjustmentSet(), flat_context())

    impact = scenario_impact(adjusted)

    assert adjusted.depletion_age is not None
    assert impact.property_sale_age is None
    assert impact.liquid_funds_last_to_age is None
