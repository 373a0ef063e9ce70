from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .inputs import AdjustedProjection, BaselineProjection


@dataclass(frozen=True)
class ScenarioImpact:
    liquid_funds_last_to_age: Optional[int]  # None = beyond life expectancy
    property_sale_age: Optional[int]
    liquid_balance_at_sale: Optional[float]
    has_illiquid_assets: bool
    final_total_wealth: float
    final_liquid_balance: float
    runway_change_years: Optional[int]
    surplus_or_deficit: Optional[float]


def scenario_impact(
    adjusted: AdjustedProjection,
    baseline: Optional[BaselineProjection] = None,
    target_balance: Optional[float] = None,
) -> ScenarioImpact:
    """Headline effects of a what-if, for the scenario summary panel."""
    rows = adjusted.yearly_projections
    sale_row = next((row for row in rows if row.property_liquidated), None)
    last = rows[-1] if rows else None

    final_liquid = last.ending_balance if last else 0.0
    runway_change = None
    if baseline is not None:
        runway_change = adjusted.runway_years - baseline.runway_years

    return ScenarioImpact(
        liquid_funds_last_to_age=sale_row.age if sale_row else None,
        property_sale_age=sale_row.age if sale_row else None,
        liquid_balance_at_sale=adjusted.liquid_balance_at_liquidation,
        has_illiquid_assets=sale_row is not None or (bool(rows) and rows[0].non_spendable_value > 0),
        final_total_wealth=last.total_wealth if last else 0.0,
        final_liquid_balance=final_liquid,
        runway_change_years=runway_change,
        surplus_or_deficit=final_liquid - target_balance if target_balance is not None else None,
    )
