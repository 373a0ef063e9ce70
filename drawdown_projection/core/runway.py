from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .inputs import YearlyRow


@dataclass(frozen=True)
class RunwaySummary:
    runway_years: int
    runway_months: int
    depletion_age: Optional[int]
    depletion_index: Optional[int] = None


def summarize_runway(rows: Sequence[YearlyRow], retirement_age: int) -> RunwaySummary:
    """Runway is counted through the first year whose ending balance hits zero."""
    ending = np.array([row.ending_balance for row in rows], dtype=float)
    depleted = np.flatnonzero(ending <= 0)

    if depleted.size:
        index = int(depleted[0])
        runway_years = index + 1
        depletion_age: Optional[int] = retirement_age + index + 1
    else:
        index = None
        runway_years = len(rows)
        depletion_age = None

    return RunwaySummary(
        runway_years=runway_years,
        runway_months=runway_years * 12,
        depletion_age=depletion_age,
        depletion_index=index,
    )
