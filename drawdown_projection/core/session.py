from __future__ import annotations

import logging
from dataclasses import astuple
from typing import Callable, Hashable, Optional, Tuple

from .baseline import BaselineRequest, compute_local_baseline
from .inputs import AdjustedProjection, AdjustmentSet, BaselineProjection, ScenarioOverrides
from .what_if import adjust

logger = logging.getLogger(__name__)

BaselineProvider = Callable[[BaselineRequest], BaselineProjection]


def baseline_key(request: BaselineRequest) -> Tuple[Hashable, ...]:
    """Everything that changes the baseline; what-if adjustments are not part of it."""
    return (
        astuple(request.plan),
        request.liquid_assets,
        request.non_spendable_assets,
        tuple(request.portfolio_ids),
        request.current_age,
        request.retirement_age,
        request.resolved_life_expectancy(),
        request.monthly_contribution,
        request.rental_income_monthly,
        request.blended_return_rate,
    )


class BaselineSession:
    """Holds the one expensive baseline and recomputes what-ifs against it.

    The provider runs once per distinct request key. A failing provider leaves
    the previous baseline in place and records the exception on ``error``.
    """

    def __init__(self, provider: BaselineProvider = compute_local_baseline):
        self._provider = provider
        self._key: Optional[Tuple[Hashable, ...]] = None
        self._request: Optional[BaselineRequest] = None
        self.baseline: Optional[BaselineProjection] = None
        self.error: Optional[Exception] = None
        self.calls = 0

    def request(self, request: BaselineRequest) -> Optional[BaselineProjection]:
        key = baseline_key(request)
        if key == self._key:
            return self.baseline
        self._key = key
        self._request = request
        return self._fetch(request)

    def recalculate(self) -> Optional[BaselineProjection]:
        """Explicitly re-run the provider for the last request."""
        if self._request is None:
            return self.baseline
        return self._fetch(self._request)

    def reset(self) -> None:
        self._key = None
        self._request = None
        self.baseline = None
        self.error = None

    def adjusted(
        self, overrides: ScenarioOverrides, adjustments: AdjustmentSet
    ) -> Optional[AdjustedProjection]:
        if self._request is None:
            return None
        return adjust(self.baseline, self._request.plan, overrides, adjustments, self._request.context())

    def _fetch(self, request: BaselineRequest) -> Optional[BaselineProjection]:
        self.calls += 1
        try:
            baseline = self._provider(request)
        except Exception as exc:  # provider is remote/opaque; keep the last good baseline
            logger.warning("Failed to compute baseline projection for plan %s: %s", request.plan.plan_id, exc)
            self.error = exc
            return self.baseline
        self.error = None
        self.baseline = baseline
        return baseline
