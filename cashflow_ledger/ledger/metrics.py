"""Mini README: Derived metrics computed from a ``FinancialState``.

Structure:
    * round_half_up - arithmetic rounding used by the game's money rules.
    * passive_income / total_income / total_expenses / monthly_cashflow.
    * progress_to_freedom - passive income as a percentage of expenses.
    * fast_track_investment_income / fast_track_goal_progress / payday_amount.
    * max_loan - available bank credit.
    * LedgerMetrics / compute_metrics - one summary of every figure above.

Everything here is a pure function of the record. Nothing is cached, so a
read right after an update always reflects it.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict

from .state import FinancialState, HoldingKind, Number

BANK_CREDIT_MULTIPLIER = 10
BANK_CREDIT_STEP = 1000


def round_half_up(value: float) -> int:
    """Round halves away from negative infinity (2.5 -> 3), unlike ``round``."""

    return int(math.floor(value + 0.5))


def clamp_percent(value: float) -> float:
    """Clamp a progress value into 0..100 for progress bars."""

    return max(0.0, min(100.0, float(value)))


def passive_income(state: FinancialState) -> Number:
    """Unit-weighted cashflow of every holding plus dividends."""

    holdings_income = sum(
        holding.weighted_cashflow for kind in HoldingKind for holding in state.holdings(kind)
    )
    return holdings_income + state.dividends


def total_income(state: FinancialState) -> Number:
    """Salary plus passive income."""

    return state.salary + passive_income(state)


def total_expenses(state: FinancialState) -> Number:
    return (
        state.taxes
        + state.home_mortgage_payment
        + state.school_loan_payment
        + state.car_loan_payment
        + state.credit_card_payment
        + state.retail_payment
        + state.bank_loan_payment
        + state.other_expenses
        + state.child_count * state.per_child_expense
    )


def monthly_cashflow(state: FinancialState) -> Number:
    return total_income(state) - total_expenses(state)


def progress_to_freedom(state: FinancialState) -> float:
    """Passive income over expenses in percent; uncapped, 0 without expenses."""

    expenses = total_expenses(state)
    if expenses <= 0:
        return 0.0
    return passive_income(state) / expenses * 100


def max_loan(state: FinancialState) -> int:
    """Ten months of cashflow, floored to a whole thousand."""

    raw_limit = max(0, monthly_cashflow(state) * BANK_CREDIT_MULTIPLIER)
    return int(math.floor(raw_limit / BANK_CREDIT_STEP) * BANK_CREDIT_STEP)


def fast_track_investment_income(state: FinancialState) -> Number:
    """Income of fast-track businesses; counts are not applied here."""

    return sum(holding.cashflow for holding in state.fast_track_business_investments)


def fast_track_goal_progress(state: FinancialState) -> float:
    goal = state.winning_passive_income_goal
    if goal <= 0:
        return 0.0
    return fast_track_investment_income(state) / goal * 100


def payday_amount(state: FinancialState) -> Number:
    amount = state.fast_track_cashflow_day_income
    if state.fast_track_sum_business_income:
        amount += fast_track_investment_income(state)
    return amount


@dataclass(slots=True)
class LedgerMetrics:
    """Summary figures shown alongside the ledger."""

    passive_income: Number
    total_income: Number
    total_expenses: Number
    monthly_cashflow: Number
    progress_to_freedom: float
    max_loan: int
    fast_track_investment_income: Number
    fast_track_goal_progress: float
    payday_amount: Number
    has_won_fast_track: bool

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


def compute_metrics(state: FinancialState) -> LedgerMetrics:
    """Recompute every derived figure from the current record."""

    investment_income = fast_track_investment_income(state)
    return LedgerMetrics(
        passive_income=passive_income(state),
        total_income=total_income(state),
        total_expenses=total_expenses(state),
        monthly_cashflow=monthly_cashflow(state),
        progress_to_freedom=progress_to_freedom(state),
        max_loan=max_loan(state),
        fast_track_investment_income=investment_income,
        fast_track_goal_progress=fast_track_goal_progress(state),
        payday_amount=payday_amount(state),
        has_won_fast_track=(
            state.is_on_fast_track
            and state.winning_passive_income_goal > 0
            and investment_income >= state.winning_passive_income_goal
        ),
    )
