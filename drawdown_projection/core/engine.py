from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from .inputs import IncomeBreakdown, YearlyRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    """Property still held."""


@dataclass(frozen=True)
class Liquidated:
    age: int
    balance_at_event: float  # liquid balance before the sale proceeds


LiquidationState = Union[Pending, Liquidated]


@dataclass(frozen=True)
class DrawdownParams:
    retirement_age: int
    return_rate: float
    inflation_rate: float
    housing_return_rate: float
    pension_annual: float
    social_security_annual: float
    other_income_annual: float
    rental_income_annual: float
    initial_liquid_assets: float
    liquidation_threshold: float  # fraction of initial liquid assets
    currency: str = "USD"


@dataclass(frozen=True)
class DrawdownState:
    balance: float
    non_spendable: float
    expenses: float  # annual expense level for the coming year
    liquidation: LiquidationState = Pending()

    @property
    def has_liquidated(self) -> bool:
        return isinstance(self.liquidation, Liquidated)


def _should_liquidate(state: DrawdownState, params: DrawdownParams) -> bool:
    floor = params.initial_liquid_assets * params.liquidation_threshold
    return (
        not state.has_liquidated
        and state.non_spendable > 0
        and 0 < state.balance < floor
    )


def _liquidate(state: DrawdownState, age: int) -> DrawdownState:
    return replace(
        state,
        balance=state.balance + state.non_spendable,
        non_spendable=0.0,
        liquidation=Liquidated(age=age, balance_at_event=state.balance),
    )


def step_year(state: DrawdownState, year_index: int, params: DrawdownParams) -> Tuple[DrawdownState, YearlyRow]:
    """Advance one retirement year and emit its row."""
    age = params.retirement_age + year_index

    if _should_liquidate(state, params):
        state = _liquidate(state, age)
        logger.debug("Property liquidated at age %d with liquid balance %.2f", age, state.liquidation.balance_at_event)

    balance = state.balance
    starting_balance = max(0.0, balance)
    investment = starting_balance * params.return_rate

    liquidated = state.has_liquidated
    income = IncomeBreakdown(
        investment_returns=investment,
        pension=params.pension_annual,
        social_security=params.social_security_annual,
        other_income=0.0 if liquidated else params.other_income_annual,
        rental_income=0.0 if liquidated else params.rental_income_annual,
    )
    withdrawals = max(0.0, state.expenses - income.passive_income) if balance > 0 else 0.0

    balance = balance + investment - withdrawals
    non_spendable = state.non_spendable
    if not liquidated:
        non_spendable = non_spendable * (1 + params.housing_return_rate)
    expenses = state.expenses * (1 + params.inflation_rate)

    next_state = replace(state, balance=balance, non_spendable=non_spendable, expenses=expenses)
    ending_balance = max(0.0, balance)
    row = YearlyRow(
        year=year_index + 1,
        age=age,
        starting_balance=starting_balance,
        investment=investment,
        withdrawals=withdrawals,
        ending_balance=ending_balance,
        inflation_adjusted_expenses=expenses,
        non_spendable_value=non_spendable,
        total_wealth=ending_balance + non_spendable,
        property_liquidated=liquidated and state.liquidation.age == age,
        currency=params.currency,
        income=income,
    )
    return next_state, row


def run_drawdown(
    params: DrawdownParams,
    starting_balance: float,
    starting_non_spendable: float,
    annual_expenses: float,
    life_expectancy: int,
) -> Tuple[List[YearlyRow], DrawdownState]:
    """Fold ``step_year`` from retirement age through life expectancy inclusive."""
    state = DrawdownState(balance=starting_balance, non_spendable=starting_non_spendable, expenses=annual_expenses)
    rows: List[YearlyRow] = []

    years_in_retirement = life_expectancy - params.retirement_age
    for year_index in range(years_in_retirement + 1):
        state, row = step_year(state, year_index, params)
        rows.append(row)

    return rows, state


def liquidation_event(state: DrawdownState) -> Optional[Liquidated]:
    return state.liquidation if isinstance(state.liquidation, Liquidated) else None
