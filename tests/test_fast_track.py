"""Mini README: Tests for the phase transition and the Fast Track economy.

Structure:
    * transition tests - rounding, day income, re-entry guard, revert.
    * payday/purchase tests - cash sufficiency and business creation.
    * opportunity tests - the pay-then-resolve flow.
    * expense tests - audit, lawsuit, divorce.
"""

from __future__ import annotations

import pytest

from cashflow_ledger.ledger import (
    ExpenseEvent,
    FinancialState,
    Holding,
    OpportunityOutcome,
)
from cashflow_ledger.ledger.fast_track import (
    add_investment,
    apply_expense_event,
    fast_track_buy_business,
    fast_track_buy_dream,
    fast_track_payday,
    pay_for_opportunity,
    remove_investment,
    resolve_opportunity,
    revert_to_accumulation_phase,
    transition_to_fast_track,
    update_investment,
)


def _on_fast_track(cash: int = 100000, **extra: object) -> FinancialState:
    return FinancialState(
        is_on_fast_track=True,
        fast_track_cash=cash,
        fast_track_cashflow_day_income=100000,
        **extra,
    )


def test_transition_rounds_passive_income_to_nearest_thousand() -> None:
    """Entering the Fast Track snapshots passive income to the nearest thousand."""

    state = FinancialState(salary=5000, dividends=123456, taxes=300)

    outcome = transition_to_fast_track(state)

    assert outcome.accepted
    entered = outcome.state
    assert entered.is_on_fast_track is True
    assert entered.fast_track_start_passive_income == 123000
    assert entered.fast_track_cashflow_day_income == 12300000
    assert entered.fast_track_cash == 12300000
    assert entered.salary == 5000
    assert entered.taxes == 300


def test_transition_rounds_half_up() -> None:
    """Exact halves round up as the board game does."""

    state = FinancialState(real_estate_assets=[Holding(holding_id="h", name="h", cashflow=1500)])

    outcome = transition_to_fast_track(state)

    assert outcome.state.fast_track_start_passive_income == 2000


def test_transition_is_guarded_against_re_entry() -> None:
    """A second transition is refused while already on the Fast Track."""

    state = _on_fast_track()

    outcome = transition_to_fast_track(state)

    assert not outcome.accepted
    assert outcome.state is state


def test_revert_keeps_fast_track_fields() -> None:
    """Going back to the Rat Race keeps the Fast Track balances."""

    state = _on_fast_track(cash=42000)

    reverted = revert_to_accumulation_phase(state).state

    assert reverted.is_on_fast_track is False
    assert reverted.fast_track_cash == 42000
    assert reverted.fast_track_cashflow_day_income == 100000


def test_payday_adds_business_income_only_when_toggled() -> None:
    """Payday adds business income only when the toggle is on."""

    investments = [Holding(holding_id="b", name="b", cashflow=20000, count=2)]
    plain = _on_fast_track(cash=0, fast_track_business_investments=investments)
    summed = _on_fast_track(
        cash=0, fast_track_business_investments=investments, fast_track_sum_business_income=True
    )

    assert fast_track_payday(plain).state.fast_track_cash == 100000
    assert fast_track_payday(summed).state.fast_track_cash == 120000


def test_cash_operations_require_fast_track() -> None:
    """Fast Track cash actions are refused outside the Fast Track."""

    state = FinancialState(fast_track_cash=1000)

    assert not fast_track_payday(state).accepted
    assert not fast_track_buy_dream(state, 10).accepted
    assert not apply_expense_event(state, ExpenseEvent.AUDIT).accepted


def test_buy_business_debits_cash_and_appends_holding() -> None:
    """Buying a business spends cash and records the investment."""

    state = _on_fast_track(cash=150000)

    outcome = fast_track_buy_business(state, "Ski resort", 100000, 40000)

    assert outcome.state.fast_track_cash == 50000
    [resort] = outcome.state.fast_track_business_investments
    assert resort.cost == resort.down_payment == 100000
    assert resort.cashflow == 40000
    assert resort.count == 1


def test_purchases_reject_insufficient_cash_without_changes() -> None:
    """Purchases above the available cash are refused without side effects."""

    state = _on_fast_track(cash=999)

    business = fast_track_buy_business(state, "Bank", 1000, 10)
    dream = fast_track_buy_dream(state, 1000)
    opportunity, ticket = pay_for_opportunity(state, 1000)

    for outcome in (business, dream, opportunity):
        assert not outcome.accepted
        assert outcome.state is state
    assert ticket is None


def test_dream_only_debits_cash() -> None:
    """A dream purchase spends cash and records nothing else."""

    state = _on_fast_track(cash=500000)

    outcome = fast_track_buy_dream(state, 200000)

    assert outcome.state.fast_track_cash == 300000
    assert outcome.state.fast_track_business_investments == []


def test_opportunity_won_cash_credits_win_amount() -> None:
    """A won cash opportunity credits the winnings."""

    paid, ticket = pay_for_opportunity(_on_fast_track(cash=100000), 25000)

    won = resolve_opportunity(paid.state, ticket, OpportunityOutcome.WON_CASH, win_amount=75000)

    assert paid.state.fast_track_cash == 75000
    assert won.state.fast_track_cash == 150000


def test_opportunity_won_business_has_no_cost_basis() -> None:
    """A won business stake is recorded at zero cost."""

    paid, ticket = pay_for_opportunity(_on_fast_track(cash=100000), 25000)

    won = resolve_opportunity(
        paid.state, ticket, OpportunityOutcome.WON_BUSINESS, name="Patent", income=8000
    )

    [patent] = won.state.fast_track_business_investments
    assert patent.name == "Patent"
    assert patent.cost == 0
    assert patent.down_payment == 0
    assert patent.cashflow == 8000
    assert won.state.fast_track_cash == 75000


def test_failed_opportunity_keeps_paid_price_and_resolves_once() -> None:
    """A failed opportunity keeps the price paid and cannot be resolved twice."""

    paid, ticket = pay_for_opportunity(_on_fast_track(cash=100000), 25000)

    failed = resolve_opportunity(paid.state, ticket, OpportunityOutcome.FAILED)
    again = resolve_opportunity(failed.state, ticket, OpportunityOutcome.WON_CASH, win_amount=1)

    assert failed.accepted
    assert failed.state.fast_track_cash == 75000
    assert not again.accepted


@pytest.mark.parametrize(
    ("event", "expected"),
    [
        (ExpenseEvent.AUDIT, 50000),
        (ExpenseEvent.LAWSUIT, 50000),
        (ExpenseEvent.DIVORCE, 0),
    ],
)
def test_expense_events_transform_cash(event: ExpenseEvent, expected: int) -> None:
    """Audits and lawsuits halve cash while a divorce empties it."""

    investments = [Holding(holding_id="b", name="b", cashflow=1000)]
    state = _on_fast_track(cash=100001, fast_track_business_investments=investments)

    outcome = apply_expense_event(state, event)

    assert outcome.state.fast_track_cash == expected
    assert outcome.state.fast_track_business_investments == investments


def test_investment_list_can_be_edited_by_hand() -> None:
    """Investments can be added, edited and removed directly."""

    added = add_investment(_on_fast_track(), "Franchise", 3000).state
    [franchise] = added.fast_track_business_investments

    edited = update_investment(added, franchise.holding_id, {"cashflow": 4500}).state
    removed = remove_investment(edited, franchise.holding_id)

    assert franchise.cashflow == 3000
    assert franchise.cost == 0
    assert edited.fast_track_business_investments[0].cashflow == 4500
    assert removed.state.fast_track_business_investments == []
    assert not remove_investment(removed.state, franchise.holding_id).accepted


def test_expense_event_from_str() -> None:
    """Expense events parse from loose spellings."""

    assert ExpenseEvent.from_str(" Divorce ") is ExpenseEvent.DIVORCE
    with pytest.raises(ValueError):
        ExpenseEvent.from_str("hurricane")
