from __future__ import annotations

import pytest

from drawdown_projection.core import fi_metrics


def test_fi_number_is_25x_annual_expenses():
    assert fi_metrics.fi_number(40_000) == 1_000_000
    assert fi_metrics.fi_number_from_monthly(2_000) == 600_000


def test_fi_progress_and_gap():
    assert fi_metrics.fi_progress(250_000, 1_000_000) == pytest.approx(25.0)
    assert fi_metrics.fi_progress(10, 0) == 100.0
    assert fi_metrics.gap_to_fi(1_000_000, 1_200_000) == -200_000
    assert fi_metrics.is_financially_independent(100.0)
    assert not fi_metrics.is_financially_independent(99.9)


@pytest.mark.parametrize("raw, clamped", [(-5, 0), (42.5, 42.5), (180, 100)])
def test_clamp_progress(raw, clamped):
    assert fi_metrics.clamp_progress(raw) == clamped


def test_coast_fi():
    coast = fi_metrics.coast_fi_number(1_000_000, 10, 0.07)

    assert coast == pytest.approx(1_000_000 / 1.07**10)
    assert fi_metrics.coast_fi_progress(coast, coast) == pytest.approx(100)
    assert fi_metrics.is_coast_fire_achieved(100.0)
    assert fi_metrics.coast_fi_number(1_000_000, 0, 0.07) is None
    assert fi_metrics.coast_fi_number(1_000_000, 10, 0.0) is None
    assert fi_metrics.coast_fi_progress(5, None) is None
    assert not fi_metrics.is_coast_fire_achieved(None)


def test_years_to_target_and_savings_rate():
    assert fi_metrics.years_to_target(40, 60) == 20
    assert fi_metrics.years_to_target(60, 60) is None
    assert fi_metrics.years_to_target(None, 60) is None
    assert fi_metrics.savings_rate(1_000, 5_000) == pytest.approx(20)
    assert fi_metrics.savings_rate(1_000, 0) is None


def test_required_monthly_investment_needs_positive_horizon():
    assert fi_metrics.required_monthly_investment(100_000, 1_000_000, 0, 0.04) is None
    assert fi_metrics.required_monthly_investment(100_000, 1_000_000, -3, 0.04) is None


def test_required_monthly_investment_is_zero_once_target_is_reached():
    assert fi_metrics.required_monthly_investment(1_000_000, 1_000_000, 10, 0.04) == 0
    # 600k growing at 5% for 15 years already passes 1.2M
    assert fi_metrics.required_monthly_investment(600_000, 1_200_000, 15, 0.05) == 0


@pytest.mark.parametrize("real_rate", [0.0, -0.01])
def test_required_monthly_investment_without_real_growth_spreads_the_gap(real_rate):
    required = fi_metrics.required_monthly_investment(100_000, 700_000, 10, real_rate)

    assert required == pytest.approx(5_000)


def test_required_monthly_investment_solves_the_annuity():
    required = fi_metrics.required_monthly_investment(100_000, 1_000_000, 20, 0.04)

    compound = 1.04**20
    balance = 100_000 * compound + required * 12 * (compound - 1) / 0.04
    assert balance == pytest.approx(1_000_000)
    assert fi_metrics.savings_rate(required, 10_000) == pytest.approx(required / 100)
