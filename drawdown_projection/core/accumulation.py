"""Approximate the balance at a shifted retirement date.

The baseline service owns the real pre-retirement accumulation model and its
per-asset contribution history. Locally we only have its results, so a
contribution change is treated as a constant annual difference compounded
over the whole working period, and a retirement-age shift adds or removes
whole years of growth plus contribution. Both are approximations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .inputs import BaselineProjection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccumulationAdjustment:
    liquid_assets: float
    non_spendable: float
    contribution_value: float  # extra (or lost) value from the contribution change
    clamped: bool = False  # reverse compounding hit zero before the shift was used up


def contribution_difference_value(annual_difference: float, years: int, return_rate: float) -> float:
    """Future value of a constant annual difference, contributed then grown each year."""
    value = 0.0
    for _ in range(years):
        value = (value + annual_difference) * (1 + return_rate)
    return value


def _grow(value: float, rate: float, years: int, contribution: float = 0.0) -> float:
    for _ in range(years):
        value = value * (1 + rate) + contribution
    return value


def _shrink(value: float, rate: float, years: int, contribution: float = 0.0) -> float:
    divisor = 1 + rate
    for _ in range(years):
        value -= contribution
        if divisor > 0:
            value /= divisor
    return value


def adjust_for_retirement_shift(
    baseline: BaselineProjection,
    retirement_age_offset: int,
    monthly_investment: float,
    contribution_percent: float,
    base_return_rate: float,
    housing_return_rate: float,
) -> AccumulationAdjustment:
    base_annual = monthly_investment * 12.0
    adjusted_annual = monthly_investment * (contribution_percent / 100.0) * 12.0

    liquid = baseline.liquid_assets
    non_spendable = baseline.non_spendable_at_retirement
    contribution_value = 0.0
    clamped = False

    accumulation = baseline.pre_retirement_accumulation
    if contribution_percent != 100 and accumulation is not None and accumulation.years_to_retirement > 0:
        contribution_value = contribution_difference_value(
            adjusted_annual - base_annual, accumulation.years_to_retirement, base_return_rate
        )
        liquid += contribution_value

    if retirement_age_offset > 0:
        liquid = _grow(liquid, base_return_rate, retirement_age_offset, adjusted_annual)
        non_spendable = _grow(non_spendable, housing_return_rate, retirement_age_offset)
    elif retirement_age_offset < 0:
        years = -retirement_age_offset
        liquid = _shrink(liquid, base_return_rate, years, adjusted_annual)
        non_spendable = _shrink(non_spendable, housing_return_rate, years)
        clamped = liquid < 0 or non_spendable < 0
        if clamped:
            logger.debug("Reverse compounding over %d years clamped balances at zero", years)
        liquid = max(0.0, liquid)
        non_spendable = max(0.0, non_spendable)

    return AccumulationAdjustment(
        liquid_assets=liquid, non_spendable=non_spendable, contribution_value=contribution_value, clamped=clamped
    )
