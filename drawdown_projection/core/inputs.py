from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Tuple

import pandas as pd

DEFAULT_LIQUIDATION_THRESHOLD = 10.0  # % of initial liquid assets

# (min, max) slider ranges; the adjuster itself never enforces them
ADJUSTMENT_BOUNDS: Dict[str, Tuple[float, float]] = {
    "retirement_age_offset": (-5, 10),
    "expenses_percent": (50, 150),
    "return_rate_offset": (-4, 4),
    "inflation_offset": (-2, 4),
    "contribution_percent": (0, 200),
    "equity_percent": (0, 100),
    "liquidation_threshold": (0, 100),
}


@dataclass
class Plan:
    monthly_expenses: float
    pension_monthly: float = 0.0
    social_security_monthly: float = 0.0
    other_income_monthly: float = 0.0  # stops once property is liquidated
    equity_return_rate: float = 0.07
    cash_return_rate: float = 0.03
    housing_return_rate: float = 0.03
    equity_allocation: float = 0.6
    cash_allocation: float = 0.2
    housing_allocation: float = 0.2
    inflation_rate: float = 0.025
    life_expectancy: int = 90
    planning_horizon_years: int = 30
    target_balance: Optional[float] = None
    plan_id: str = "local"
    name: str = "Retirement plan"
    expenses_currency: str = "USD"


@dataclass
class AdjustmentSet:
    retirement_age_offset: int = 0
    expenses_percent: float = 100.0
    return_rate_offset: float = 0.0  # percentage points
    inflation_offset: float = 0.0  # percentage points
    contribution_percent: float = 100.0
    equity_percent: Optional[float] = None  # None = keep plan blend
    liquidation_threshold: float = DEFAULT_LIQUIDATION_THRESHOLD


def has_scenario_changes(adjustments: AdjustmentSet) -> bool:
    """True when any slider has moved away from its default."""
    return adjustments != AdjustmentSet()


@dataclass
class ScenarioOverrides:
    """Absolute replacements for plan values; None falls through to the plan."""

    pension_monthly: Optional[float] = None
    social_security_monthly: Optional[float] = None
    other_income_monthly: Optional[float] = None
    inflation_rate: Optional[float] = None


@dataclass
class ProjectionContext:
    retirement_age: int
    life_expectancy: int
    plan_currency: str = "USD"
    monthly_investment: float = 0.0
    blended_return_rate: float = 0.05
    rental_income_monthly: float = 0.0  # net rent, stops once property is sold


@dataclass(frozen=True)
class PreRetirementAccumulation:
    years_to_retirement: int
    starting_balance: float
    liquid_assets_at_retirement: float = 0.0
    growth_on_existing_assets: float = 0.0
    monthly_contribution: float = 0.0
    total_contributions: float = 0.0
    future_value_of_contributions: float = 0.0
    growth_on_contributions: float = 0.0
    current_non_spendable_assets: float = 0.0
    non_spendable_at_retirement: float = 0.0
    blended_return_rate: float = 0.0
    housing_return_rate: float = 0.0


@dataclass(frozen=True)
class IncomeBreakdown:
    investment_returns: float
    pension: float
    social_security: float
    other_income: float
    rental_income: float

    @property
    def passive_income(self) -> float:
        return self.pension + self.social_security + self.other_income + self.rental_income

    @property
    def total_income(self) -> float:
        return self.investment_returns + self.passive_income


@dataclass(frozen=True)
class YearlyRow:
    year: int
    age: int
    starting_balance: float
    investment: float
    withdrawals: float
    ending_balance: float
    inflation_adjusted_expenses: float
    non_spendable_value: float
    total_wealth: float
    property_liquidated: bool = False
    currency: str = "USD"
    income: Optional[IncomeBreakdown] = None

    def as_record(self) -> dict:
        record = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "income"}
        if self.income is not None:
            record.update(
                {
                    "income_investment_returns": self.income.investment_returns,
                    "income_pension": self.income.pension,
                    "income_social_security": self.income.social_security,
                    "income_other": self.income.other_income,
                    "income_rental": self.income.rental_income,
                    "income_total": self.income.total_income,
                }
            )
        return record


def rows_to_frame(rows: Tuple[YearlyRow, ...]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=[f.name for f in fields(YearlyRow) if f.name != "income"]).set_index("year")
    return pd.DataFrame([row.as_record() for row in rows]).set_index("year")


@dataclass(frozen=True)
class BaselineProjection:
    liquid_assets: float
    non_spendable_at_retirement: float = 0.0
    pre_retirement_accumulation: Optional[PreRetirementAccumulation] = None
    yearly_projections: Tuple[YearlyRow, ...] = field(default_factory=tuple)
    runway_years: int = 0
    runway_months: int = 0
    depletion_age: Optional[int] = None
    currency: str = "USD"
    plan_id: str = "local"
    as_of_date: Optional[str] = None
    total_assets: float = 0.0
    monthly_expenses: float = 0.0
    housing_return_rate: float = 0.0
    target_balance: Optional[float] = None
    surplus_or_deficit: Optional[float] = None

    def to_frame(self) -> pd.DataFrame:
        return rows_to_frame(self.yearly_projections)


@dataclass(frozen=True)
class AdjustedProjection(BaselineProjection):
    liquid_balance_at_liquidation: Optional[float] = None
    liquidation_threshold_percent: float = DEFAULT_LIQUIDATION_THRESHOLD

    @classmethod
    def from_baseline(cls, baseline: BaselineProjection, **recomputed) -> "AdjustedProjection":
        """Shallow copy of the baseline with only the recomputed fields replaced."""
        copied = {f.name: getattr(baseline, f.name) for f in fields(BaselineProjection)}
        copied.update(recomputed)
        return cls(**copied)
