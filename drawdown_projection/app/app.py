from __future__ import annotations

import logging
import os

import pandas as pd
import streamlit as st

from drawdown_projection.core import fi_metrics
from drawdown_projection.core.baseline import BaselineRequest
from drawdown_projection.core.impact import scenario_impact
from drawdown_projection.core.inputs import (
    ADJUSTMENT_BOUNDS,
    AdjustedProjection,
    AdjustmentSet,
    Plan,
    ScenarioOverrides,
    has_scenario_changes,
)
from drawdown_projection.core.rates import liquid_equity_percent, plan_blended_return_rate, real_return_rate
from drawdown_projection.core.scenarios import QUICK_SCENARIOS, default_request
from drawdown_projection.core.session import BaselineSession
from drawdown_projection.validation.checks import validate_adjustments, validate_request

logging.basicConfig(level=os.environ.get("DRAWDOWN_LOG_LEVEL", "WARNING").upper())

st.set_page_config(page_title="Retirement Drawdown", layout="wide")

FI_TARGET_AGES = (40, 45, 50, 55, 60)


def _bounds(name: str) -> tuple[float, float]:
    low, high = ADJUSTMENT_BOUNDS[name]
    return float(low), float(high)


def sidebar_inputs() -> BaselineRequest:
    defaults = default_request()
    plan_defaults = defaults.plan
    with st.sidebar.expander("Ages & Assets", expanded=False):
        current_age = st.number_input("Current age", min_value=18, max_value=100, value=int(defaults.current_age), step=1)
        retirement_age = st.number_input(
            "Retirement age", min_value=int(current_age), max_value=100, value=max(int(current_age), defaults.retirement_age), step=1
        )
        life_expectancy = st.number_input(
            "Life expectancy", min_value=int(retirement_age), max_value=120, value=max(int(retirement_age), plan_defaults.life_expectancy), step=1
        )
        liquid = st.number_input(
            "Liquid assets", min_value=0, max_value=50_000_000, value=int(defaults.liquid_assets), step=10_000
        )
        property_value = st.number_input(
            "Property (non-spendable)", min_value=0, max_value=50_000_000, value=int(defaults.non_spendable_assets), step=10_000
        )
        contribution = st.number_input(
            "Monthly investment", min_value=0, max_value=100_000, value=int(defaults.monthly_contribution), step=100
        )
        rental = st.number_input("Net rental income (monthly)", min_value=0, max_value=100_000, value=0, step=100)

    with st.sidebar.expander("Retirement income & expenses", expanded=False):
        expenses = st.number_input(
            "Expenses (monthly)", min_value=0, max_value=200_000, value=int(plan_defaults.monthly_expenses), step=100
        )
        pension = st.number_input("Pension (monthly)", min_value=0, max_value=100_000, value=int(plan_defaults.pension_monthly), step=50)
        social_security = st.number_input(
            "Social security (monthly)", min_value=0, max_value=100_000, value=int(plan_defaults.social_security_monthly), step=50
        )
        other_income = st.number_input(
            "Other income (monthly)", min_value=0, max_value=100_000, value=int(plan_defaults.other_income_monthly), step=50
        )
        target = st.number_input("Target end balance", min_value=0, max_value=50_000_000, value=0, step=10_000)

    with st.sidebar.expander("Returns & allocation", expanded=False):
        equity_return = st.slider("Equity return (annual %)", -5.0, 15.0, plan_defaults.equity_return_rate * 100, 0.1)
        cash_return = st.slider("Cash return (annual %)", -2.0, 10.0, plan_defaults.cash_return_rate * 100, 0.1)
        housing_return = st.slider("Housing return (annual %)", -5.0, 10.0, plan_defaults.housing_return_rate * 100, 0.1)
        inflation = st.slider("Inflation (annual %)", 0.0, 10.0, plan_defaults.inflation_rate * 100, 0.1)
        equity_alloc = st.slider("Equity allocation (%)", 0, 100, int(plan_defaults.equity_allocation * 100))
        housing_alloc = 0
        if equity_alloc < 100:
            housing_alloc = st.slider(
                "Housing allocation (%)", 0, 100 - equity_alloc, min(int(plan_defaults.housing_allocation * 100), 100 - equity_alloc)
            )
        cash_alloc = 100 - equity_alloc - housing_alloc
        st.caption(f"Cash allocation: {cash_alloc}%")

    plan = Plan(
        monthly_expenses=float(expenses),
        pension_monthly=float(pension),
        social_security_monthly=float(social_security),
        other_income_monthly=float(other_income),
        equity_return_rate=equity_return / 100.0,
        cash_return_rate=cash_return / 100.0,
        housing_return_rate=housing_return / 100.0,
        equity_allocation=equity_alloc / 100.0,
        cash_allocation=cash_alloc / 100.0,
        housing_allocation=housing_alloc / 100.0,
        inflation_rate=inflation / 100.0,
        life_expectancy=int(life_expectancy),
        planning_horizon_years=max(1, int(life_expectancy) - int(retirement_age)),
        target_balance=float(target) if target else None,
    )

    return BaselineRequest(
        plan=plan,
        liquid_assets=float(liquid),
        non_spendable_assets=float(property_value),
        current_age=int(current_age),
        retirement_age=int(retirement_age),
        life_expectancy=int(life_expectancy),
        monthly_contribution=float(contribution),
        rental_income_monthly=float(rental),
    )


def what_if_inputs(plan: Plan) -> tuple[ScenarioOverrides, AdjustmentSet]:
    st.subheader("What-if sliders")
    preset_names = ["Custom"] + [scenario.name for scenario in QUICK_SCENARIOS]
    preset_name = st.selectbox("Quick scenario", options=preset_names, index=0)
    preset = next((s for s in QUICK_SCENARIOS if s.name == preset_name), None)
    base = preset.adjustments if preset else AdjustmentSet()
    if preset:
        st.caption(preset.description)

    col1, col2 = st.columns(2)
    age_low, age_high = ADJUSTMENT_BOUNDS["retirement_age_offset"]
    retirement_offset = col1.slider("Retirement age offset (years)", int(age_low), int(age_high), int(base.retirement_age_offset))
    expenses_pct = col1.slider("Expenses (% of plan)", *_bounds("expenses_percent"), float(base.expenses_percent), 5.0)
    contribution_pct = col1.slider("Contribution (% of plan)", *_bounds("contribution_percent"), float(base.contribution_percent), 5.0)
    return_offset = col2.slider("Return rate offset (pp)", *_bounds("return_rate_offset"), float(base.return_rate_offset), 0.25)
    inflation_offset = col2.slider("Inflation offset (pp)", *_bounds("inflation_offset"), float(base.inflation_offset), 0.25)
    threshold = col2.slider("Sell property below (% of starting liquid)", *_bounds("liquidation_threshold"), float(base.liquidation_threshold), 1.0)

    override_equity = st.checkbox("Override equity/cash split", value=base.equity_percent is not None)
    equity_pct = None
    if override_equity:
        equity_pct = st.slider("Equity share of liquid assets (%)", *_bounds("equity_percent"), float(base.equity_percent if base.equity_percent is not None else liquid_equity_percent(plan)), 5.0)

    with st.expander("Scenario overrides", expanded=False):
        ov1, ov2 = st.columns(2)
        pension = ov1.number_input("Pension (monthly)", min_value=0, value=int(plan.pension_monthly), step=50)
        social_security = ov1.number_input("Social security (monthly)", min_value=0, value=int(plan.social_security_monthly), step=50)
        other_income = ov2.number_input("Other income (monthly)", min_value=0, value=int(plan.other_income_monthly), step=50)
        inflation = ov2.number_input("Inflation (annual %)", min_value=0.0, value=float(plan.inflation_rate * 100), step=0.1)

    overrides = ScenarioOverrides(
        pension_monthly=float(pension) if pension != plan.pension_monthly else None,
        social_security_monthly=float(social_security) if social_security != plan.social_security_monthly else None,
        other_income_monthly=float(other_income) if other_income != plan.other_income_monthly else None,
        inflation_rate=inflation / 100.0 if abs(inflation / 100.0 - plan.inflation_rate) > 1e-9 else None,
    )
    adjustments = AdjustmentSet(
        retirement_age_offset=int(retirement_offset),
        expenses_percent=float(expenses_pct),
        return_rate_offset=float(return_offset),
        inflation_offset=float(inflation_offset),
        contribution_percent=float(contribution_pct),
        equity_percent=float(equity_pct) if equity_pct is not None else None,
        liquidation_threshold=float(threshold),
    )
    return overrides, adjustments


def render_fi_metrics(request: BaselineRequest) -> None:
    plan = request.plan
    net_monthly = max(0.0, plan.monthly_expenses - plan.pension_monthly - plan.social_security_monthly - plan.other_income_monthly)
    target = fi_metrics.fi_number_from_monthly(net_monthly)
    progress = fi_metrics.fi_progress(request.liquid_assets, target)
    years = fi_metrics.years_to_target(request.current_age, request.retirement_age)
    coast = fi_metrics.coast_fi_number(target, years or 0, plan_blended_return_rate(plan))
    coast_progress = fi_metrics.coast_fi_progress(request.liquid_assets, coast)

    cols = st.columns(4)
    cols[0].metric("FI number", f"${target:,.0f}")
    cols[1].metric("FI progress", f"{progress:.1f}%")
    cols[2].metric("Gap to FI", f"${fi_metrics.gap_to_fi(target, request.liquid_assets):,.0f}")
    cols[3].metric("Coast FI", f"{coast_progress:.1f}%" if coast_progress is not None else "n/a")
    st.progress(fi_metrics.clamp_progress(progress) / 100)

    if request.current_age is None:
        return
    st.subheader("Retire at age")
    working_income = st.number_input("Working income (monthly, after tax)", min_value=0, value=8000, step=500)
    current_rate = fi_metrics.savings_rate(request.monthly_contribution, float(working_income))
    if current_rate is not None:
        st.caption(f"Current savings rate: {current_rate:.1f}%")

    real_rate = real_return_rate(plan_blended_return_rate(plan), plan.inflation_rate)
    rows = []
    for age in (age for age in FI_TARGET_AGES if age > request.current_age):
        required = fi_metrics.required_monthly_investment(
            request.liquid_assets, target, age - request.current_age, real_rate
        )
        if required is None:
            continue
        rate = fi_metrics.savings_rate(required, float(working_income))
        rows.append(
            {
                "Retire at": age,
                "Years": age - request.current_age,
                "Monthly investment": f"${required:,.0f}",
                "Savings rate": f"{rate:.0f}%" if rate is not None else "-",
            }
        )
    if rows:
        st.table(pd.DataFrame(rows).set_index("Retire at"))
    else:
        st.caption("No target ages remain above the current age.")


def render_summary(projection: AdjustedProjection, baseline, life_expectancy: int) -> None:
    impact = scenario_impact(projection, baseline, projection.target_balance)
    cols = st.columns(4)
    cols[0].metric(
        "Runway",
        f"{projection.runway_years} yrs",
        delta=f"{impact.runway_change_years:+d} yrs" if impact.runway_change_years else None,
    )
    cols[1].metric("Depletion age", str(projection.depletion_age) if projection.depletion_age else f"Beyond {life_expectancy}")
    cols[2].metric(
        "Liquid funds last to",
        f"Age {impact.liquid_funds_last_to_age}" if impact.liquid_funds_last_to_age else f"Beyond {life_expectancy}",
    )
    cols[3].metric("Final total wealth", f"${impact.final_total_wealth:,.0f}")

    if impact.has_illiquid_assets:
        if impact.property_sale_age is not None:
            st.info(
                f"Property sold at age {impact.property_sale_age} when liquid assets fell to "
                f"${impact.liquid_balance_at_sale:,.0f} (threshold {projection.liquidation_threshold_percent:.0f}%)."
            )
        else:
            st.caption("Property is never sold within the horizon.")
    if impact.surplus_or_deficit is not None:
        label = "Surplus" if impact.surplus_or_deficit >= 0 else "Shortfall"
        st.caption(f"{label} against target end balance: ${abs(impact.surplus_or_deficit):,.0f}")


def render_timeline(projection: AdjustedProjection) -> None:
    frame = projection.to_frame()
    if frame.empty:
        st.warning("Life expectancy is before the adjusted retirement age; nothing to project.")
        return
    st.markdown("**Balance and total wealth**")
    st.line_chart(frame.set_index("age")[["ending_balance", "non_spendable_value", "total_wealth"]], height=280)

    display = frame.reset_index()[
        ["year", "age", "starting_balance", "investment", "withdrawals", "ending_balance", "non_spendable_value", "total_wealth", "property_liquidated"]
    ]
    money_cols = ["starting_balance", "investment", "withdrawals", "ending_balance", "non_spendable_value", "total_wealth"]
    display[money_cols] = display[money_cols].apply(lambda col: col.map(lambda x: f"${x:,.0f}"))
    display["property_liquidated"] = display["property_liquidated"].map(lambda x: "Sold" if x else "")
    st.dataframe(display, use_container_width=True, hide_index=True)


def _session() -> BaselineSession:
    if "baseline_session" not in st.session_state:
        st.session_state["baseline_session"] = BaselineSession()
    return st.session_state["baseline_session"]


def main():
    st.title("Retirement Drawdown")
    st.write(
        "Project liquid and property balances from retirement to life expectancy, then drag the what-if sliders to see the trajectory change instantly."
    )

    request = sidebar_inputs()
    session = _session()

    try:
        validate_request(request)
    except ValueError as exc:
        st.error(f"Unable to project: {exc}")
        return

    baseline = session.request(request)
    if st.sidebar.button("Recalculate baseline"):
        baseline = session.recalculate()
    if session.error is not None:
        st.error(f"Unable to compute baseline: {session.error}")
    if baseline is None:
        st.info("No baseline projection yet.")
        return

    tab_fi, tab_whatif, tab_baseline = st.tabs(["FI metrics", "What-if scenarios", "Baseline"])

    with tab_fi:
        render_fi_metrics(request)

    with tab_whatif:
        overrides, adjustments = what_if_inputs(request.plan)
        try:
            validate_adjustments(adjustments)
        except ValueError as exc:
            st.error(f"Invalid adjustment: {exc}")
        else:
            projection = session.adjusted(overrides, adjustments)
            if projection is not None:
                if not has_scenario_changes(adjustments):
                    st.caption("Sliders at defaults: this replays the baseline.")
                render_summary(projection, baseline, request.resolved_life_expectancy())
                render_timeline(projection)

    with tab_baseline:
        accumulation = baseline.pre_retirement_accumulation
        if accumulation is not None:
            summary = pd.DataFrame(
                [
                    ("Years to retirement", f"{accumulation.years_to_retirement}"),
                    ("Liquid assets today", f"${accumulation.starting_balance:,.0f}"),
                    ("Liquid assets at retirement", f"${accumulation.liquid_assets_at_retirement:,.0f}"),
                    ("Total contributions", f"${accumulation.total_contributions:,.0f}"),
                    ("Growth on contributions", f"${accumulation.growth_on_contributions:,.0f}"),
                    ("Property at retirement", f"${accumulation.non_spendable_at_retirement:,.0f}"),
                ],
                columns=["Item", "Value"],
            )
            st.table(summary)
        st.dataframe(baseline.to_frame().reset_index(), use_container_width=True)


if __name__ == "__main__":
    main()
