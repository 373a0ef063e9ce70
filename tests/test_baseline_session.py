from __future__ import annotations

from dataclasses import replace

import pytest

from drawdown_projection.core.baseline import BaselineRequest, accumulate_to_retirement, compute_local_baseline
from drawdown_projection.core.inputs import AdjustmentSet, BaselineProjection, ScenarioOverrides
from drawdown_projection.core.session import BaselineSession, baseline_key
from drawdown_projection.core.what_if import adjust


@pytest.fixture
def request_(plan) -> BaselineRequest:
    return BaselineRequest(
        plan=plan,
        liquid_assets=300_000,
        non_spendable_assets=150_000,
        current_age=55,
        retirement_age=65,
        monthly_contribution=1_000,
        blended_return_rate=0.06,
        as_of_date="2026-01-01",
    )


def test_accumulation_compounds_assets_and_contributions(request_):
    accumulation = accumulate_to_retirement(request_)

    assert accumulation.years_to_retirement == 10
    fv_contributions = sum(12_000 * 1.06**k for k in range(10))
    assert accumulation.future_value_of_contributions == pytest.approx(fv_contributions)
    assert accumulation.liquid_assets_at_retirement == pytest.approx(300_000 * 1.06**10 + fv_contributions)
    assert accumulation.total_contributions == pytest.approx(120_000)
    assert accumulation.non_spendable_at_retirement == pytest.approx(150_000 * 1.03**10)


def test_accumulation_without_current_age_is_already_retired(request_):
    accumulation = accumulate_to_retirement(replace(request_, current_age=None))

    assert accumulation.years_to_retirement == 0
    assert accumulation.liquid_assets_at_retirement == 300_000


def test_default_adjustments_replay_local_baseline(request_):
    baseline = compute_local_baseline(request_)
    replay = adjust(baseline, request_.plan, ScenarioOverrides(), AdjustmentSet(), request_.context())

    assert replay.yearly_projections == baseline.yearly_projections
    assert replay.runway_years == baseline.runway_years
    assert replay.depletion_age == baseline.depletion_age
    assert baseline.as_of_date == "2026-01-01"
    assert baseline.total_assets == 450_000


def test_target_balance_surplus(request_, plan):
    baseline = compute_local_baseline(replace(request_, plan=replace(plan, target_balance=100_000)))

    final = baseline.yearly_projections[-1].ending_balance
    assert baseline.surplus_or_deficit == pytest.approx(final - 100_000)


def test_provider_called_once_per_request_key(request_):
    calls = []

    def provider(req):
        calls.append(req)
        return compute_local_baseline(req)

    session = BaselineSession(provider)
    first = session.request(request_)
    session.adjusted(ScenarioOverrides(), AdjustmentSet(expenses_percent=80))
    second = session.request(request_)

    assert first is second
    assert len(calls) == 1

    session.request(replace(request_, liquid_assets=310_000))
    assert len(calls) == 2


def test_what_if_changes_do_not_change_key(request_):
    assert baseline_key(request_) == baseline_key(replace(request_, as_of_date="2030-01-01"))
    assert baseline_key(request_) != baseline_key(replace(request_, retirement_age=66))


def test_recalculate_is_explicit(request_):
    session = BaselineSession()
    assert session.recalculate() is None

    session.request(request_)
    session.recalculate()
    assert session.calls == 2


def test_failure_keeps_previous_baseline(request_):
    good = BaselineProjection(liquid_assets=1.0)
    responses = [good, RuntimeError("service unavailable")]

    def provider(req):
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    session = BaselineSession(provider)
    session.request(request_)
    result = session.request(replace(request_, liquid_assets=1.0))

    assert result is good
    assert session.baseline is good
    assert isinstance(session.error, RuntimeError)


def test_first_failure_leaves_no_baseline(request_):
    def provider(req):
        raise ConnectionError("offline")

    session = BaselineSession(provider)

    assert session.request(request_) is None
    assert session.adjusted(ScenarioOverrides(), AdjustmentSet()) is None
    assert isinstance(session.error, ConnectionError)


def test_reset_clears_state(request_):
    session = BaselineSession()
    session.request(request_)
    session.reset()

    assert session.baseline is None
    assert session.adjusted(ScenarioOverrides(), AdjustmentSet()) is None
