"""Mini README: Tests for the derived metrics calculator.

Structure:
    * test_worked_example_matches_board_figures - salary/holding/expense example.
    * test_passive_income_weights_count_and_defaults_zero_count_to_one.
    * test_passive_income_ignores_order_and_drops_removed_holding.
    * test_progress_to_freedom_guards_zero_expenses_and_is_uncapped.
    * test_fast_track_income_is_unweighted.
    * test_round_half_up_differs_from_bankers_rounding.
"""

from __future__ import annotations

import pytest

from cashflow_ledger.ledger import FinancialState, Holding, compute_metrics
from cashflow_ledger.ledger.metrics import (
    clamp_percent,
    fast_track_goal_progress,
    fast_track_investment_income,
    passive_income,
    payday_amount,
    progress_to_freedom,
    round_half_up,
    total_expenses,
)


def _holding(holding_id: str, cashflow: float, count: float = 1, **extra: object) -> Holding:
    return Holding(holding_id=holding_id, name=holding_id, cashflow=cashflow, count=count, **extra)


def test_worked_example_matches_board_figures() -> None:
    """Salary 3000, one 100 cashflow house and 2500 expenses leave 600 a month."""

    state = FinancialState(
        salary=3000,
        real_estate_assets=[_holding("house", 100)],
        taxes=1000,
        home_mortgage_payment=700,
        other_expenses=800,
    )

    metrics = compute_metrics(state)

    assert metrics.passive_income == 100
    assert metrics.total_income == 3100
    assert metrics.total_expenses == 2500
    assert metrics.monthly_cashflow == 600
    assert metrics.max_loan == 6000


def test_total_expenses_includes_every_payment_and_children() -> None:
    """Expenses add every payment plus the per-child cost."""

    state = FinancialState(
        taxes=10,
        home_mortgage_payment=20,
        school_loan_payment=30,
        car_loan_payment=40,
        credit_card_payment=50,
        retail_payment=60,
        bank_loan_payment=70,
        other_expenses=80,
        child_count=3,
        per_child_expense=100,
    )

    assert total_expenses(state) == 660


def test_passive_income_weights_count_and_defaults_zero_count_to_one() -> None:
    """Securities multiply by count; a zero count still counts once."""

    state = FinancialState(
        dividends=25,
        business_assets=[_holding("shop", 200, count=0)],
        stock_assets=[_holding("div-stock", 5, count=40)],
    )

    assert passive_income(state) == 25 + 200 + 5 * 40


def test_passive_income_ignores_order_and_drops_removed_holding() -> None:
    """Passive income is order independent and excludes removed holdings."""

    houses = [_holding("a", 100), _holding("b", 250, count=2), _holding("c", 75)]
    forward = FinancialState(real_estate_assets=list(houses))
    backward = FinancialState(real_estate_assets=list(reversed(houses)))
    without_b = FinancialState(real_estate_assets=[houses[0], houses[2]])

    assert passive_income(forward) == passive_income(backward)
    assert passive_income(forward) - passive_income(without_b) == 250 * 2


def test_progress_to_freedom_guards_zero_expenses_and_is_uncapped() -> None:
    """Freedom progress is zero without expenses and may exceed 100."""

    assert progress_to_freedom(FinancialState(dividends=500)) == 0

    rich = FinancialState(dividends=3000, taxes=1000)
    assert progress_to_freedom(rich) == pytest.approx(300.0)
    assert clamp_percent(progress_to_freedom(rich)) == 100.0


def test_max_loan_is_zero_for_negative_cashflow() -> None:
    """Negative cashflow gives no credit line."""

    state = FinancialState(salary=1000, taxes=1500)

    assert compute_metrics(state).max_loan == 0


def test_max_loan_floors_to_whole_thousands() -> None:
    """The credit line rounds down to whole thousands."""

    state = FinancialState(salary=1999)

    assert compute_metrics(state).max_loan == 19000


def test_fast_track_income_is_unweighted() -> None:
    """Fast Track businesses add raw cashflow regardless of count."""

    state = FinancialState(
        is_on_fast_track=True,
        fast_track_cashflow_day_income=100000,
        fast_track_business_investments=[_holding("mall", 20000, count=3), _holding("bank", 5000)],
    )

    assert fast_track_investment_income(state) == 25000
    assert fast_track_goal_progress(state) == pytest.approx(50.0)
    assert payday_amount(state) == 100000

    state.fast_track_sum_business_income = True
    assert payday_amount(state) == 125000


def test_goal_reached_when_business_income_meets_target() -> None:
    """The game is won once business income meets the goal."""

    state = FinancialState(
        is_on_fast_track=True,
        fast_track_business_investments=[_holding("empire", 50000)],
    )

    assert compute_metrics(state).has_won_fast_track is True
    assert compute_metrics(FinancialState()).has_won_fast_track is False


def test_round_half_up_differs_from_bankers_rounding() -> None:
    """Halves always round up, unlike Python's round."""

    assert round_half_up(2.5) == 3
    assert round_half_up(650.5) == 651
    assert round_half_up(123.456) == 123
    assert round(2.5) == 2
