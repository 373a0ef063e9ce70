"""Financial-independence headline numbers shared by the summary views."""

from __future__ import annotations

from typing import Optional

import numpy as np

SAFE_WITHDRAWAL_MULTIPLE = 25  # 4% rule


def fi_number(annual_expenses: float) -> float:
    return annual_expenses * SAFE_WITHDRAWAL_MULTIPLE


def fi_number_from_monthly(monthly_expenses: float) -> float:
    return fi_number(monthly_expenses * 12)


def fi_progress(liquid_assets: float, target: float) -> float:
    """Percent of the FI number already held; can exceed 100."""
    if target <= 0:
        return 100.0
    return liquid_assets / target * 100


def gap_to_fi(target: float, liquid_assets: float) -> float:
    """Positive is the remaining gap, negative a surplus."""
    return target - liquid_assets


def is_financially_independent(progress: float) -> bool:
    return progress >= 100


def clamp_progress(progress: float) -> float:
    return float(np.clip(progress, 0, 100))


def coast_fi_number(target: float, years_to_target: int, expected_return_rate: float) -> Optional[float]:
    """Amount needed today for growth alone to reach ``target``."""
    if years_to_target <= 0 or expected_return_rate <= 0:
        return None
    return target / (1 + expected_return_rate) ** years_to_target


def coast_fi_progress(liquid_assets: float, coast_number: Optional[float]) -> Optional[float]:
    if coast_number is None or coast_number <= 0:
        return None
    return liquid_assets / coast_number * 100


def is_coast_fire_achieved(progress: Optional[float]) -> bool:
    return progress is not None and progress >= 100


def years_to_target(current_age: Optional[int], target_age: Optional[int]) -> Optional[int]:
    if current_age is None or target_age is None or target_age <= current_age:
        return None
    return target_age - current_age


def savings_rate(monthly_investment: float, working_income_monthly: float) -> Optional[float]:
    if working_income_monthly <= 0 or monthly_investment <= 0:
        return None
    return monthly_investment / working_income_monthly * 100


def required_monthly_investment(
    liquid_assets: float, target: float, target_years: int, real_rate: float
) -> Optional[float]:
    """Monthly saving needed to reach ``target`` in ``target_years``.

    Solves FV = PV(1+r)^n + PMT((1+r)^n - 1)/r for the annual payment.
    """
    if target_years <= 0:
        return None
    if liquid_assets >= target:
        return 0.0
    if real_rate <= 0:
        return (target - liquid_assets) / target_years / 12

    compound = (1 + real_rate) ** target_years
    future_current = liquid_assets * compound
    if future_current >= target:
        return 0.0
    annual = (target - future_current) * real_rate / (compound - 1)
    return annual / 12
