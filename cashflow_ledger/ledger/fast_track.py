"""Mini README: Phase transition and the Fast Track cash economy.

Structure:
    * transition_to_fast_track / revert_to_accumulation_phase - phase flag moves.
    * fast_track_payday - credit the day income (plus business income if enabled).
    * fast_track_buy_business / fast_track_buy_dream - cash purchases.
    * OpportunityTicket / pay_for_opportunity / resolve_opportunity - the
      two-step opportunity deal.
    * ExpenseEvent / apply_expense_event - audit, lawsuit, divorce.
    * add_investment / update_investment / remove_investment - manual edits of
      the fast-track business list.

Leaving the Rat Race snapshots the passive income, rounded to the nearest
thousand, and multiplies it by 100 to get the day income that also seeds the
cash balance. Every cash operation requires the player to be on the Fast
Track and enough cash for purchases; otherwise the outcome is rejected and
nothing changes.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from ..logging_utils import get_logger
from .assets import edit_holding
from .metrics import passive_income, payday_amount, round_half_up
from .records import FastTrackAction, FastTrackTransaction, LedgerOutcome
from .state import FinancialState, Holding, Number, new_holding_id, to_number, to_text

LOGGER = get_logger(__name__)

DAY_INCOME_MULTIPLIER = 100
START_INCOME_STEP = 1000


class ExpenseEvent(str, Enum):
    """Fast Track misfortunes and what they do to cash."""

    AUDIT = "audit"
    LAWSUIT = "lawsuit"
    DIVORCE = "divorce"

    @classmethod
    def from_str(cls, value: str) -> "ExpenseEvent":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported expense event: {value}") from error

    def apply(self, cash: Number) -> Number:
        if self is ExpenseEvent.DIVORCE:
            return 0
        return math.floor(cash / 2)


class OpportunityOutcome(str, Enum):
    FAILED = "failed"
    WON_CASH = "won_cash"
    WON_BUSINESS = "won_business"

    @classmethod
    def from_str(cls, value: str) -> "OpportunityOutcome":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported opportunity outcome: {value}") from error


@dataclass(slots=True)
class OpportunityTicket:
    """Proof that an opportunity's entry price has been paid."""

    price: Number
    ticket_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    resolved: bool = False


def _not_on_fast_track(state: FinancialState) -> Optional[LedgerOutcome]:
    if not state.is_on_fast_track:
        return LedgerOutcome.rejected(state, "Player is not on the Fast Track.")
    return None


def _check_purchase(state: FinancialState, price: Number) -> Optional[LedgerOutcome]:
    blocked = _not_on_fast_track(state)
    if blocked is not None:
        return blocked
    if price < 0:
        return LedgerOutcome.rejected(state, "Price cannot be negative.")
    if state.fast_track_cash < price:
        return LedgerOutcome.rejected(state, "Not enough cash.")
    return None


def transition_to_fast_track(state: FinancialState) -> LedgerOutcome:
    """Leave the Rat Race, seeding day income and cash from passive income."""

    if state.is_on_fast_track:
        return LedgerOutcome.rejected(state, "Player is already on the Fast Track.")
    current_passive = passive_income(state)
    start_passive = round_half_up(current_passive / START_INCOME_STEP) * START_INCOME_STEP
    day_income = start_passive * DAY_INCOME_MULTIPLIER
    updated = replace(
        state,
        is_on_fast_track=True,
        fast_track_start_passive_income=start_passive,
        fast_track_cashflow_day_income=day_income,
        fast_track_cash=day_income,
    )
    LOGGER.info(
        "Entered Fast Track passive=%s start=%s day_income=%s",
        current_passive,
        start_passive,
        day_income,
    )
    return LedgerOutcome.ok(
        updated,
        FastTrackTransaction(
            action=FastTrackAction.ENTER,
            amount=start_passive,
            cash_after=day_income,
            detail=f"passive income {current_passive}",
        ),
    )


def revert_to_accumulation_phase(state: FinancialState) -> LedgerOutcome:
    """Return to the Rat Race; Fast Track figures are kept for re-entry."""

    if not state.is_on_fast_track:
        return LedgerOutcome.ok(state)
    LOGGER.info("Returned to the Rat Race")
    return LedgerOutcome.ok(replace(state, is_on_fast_track=False))


def fast_track_payday(state: FinancialState) -> LedgerOutcome:
    blocked = _not_on_fast_track(state)
    if blocked is not None:
        return blocked
    amount = payday_amount(state)
    cash = state.fast_track_cash + amount
    LOGGER.info("Payday credited %s, cash now %s", amount, cash)
    return LedgerOutcome.ok(
        replace(state, fast_track_cash=cash),
        FastTrackTransaction(action=FastTrackAction.PAYDAY, amount=amount, cash_after=cash),
    )


def _fast_track_business(name: str, cost: Number, income: Number, default_name: str) -> Holding:
    return Holding(
        holding_id=new_holding_id(),
        name=to_text(name).strip() or default_name,
        cost=cost,
        down_payment=cost,
        cashflow=income,
        count=1,
    )


def fast_track_buy_business(
    state: FinancialState, name: str, price: object, income: object
) -> LedgerOutcome:
    """Buy a Fast Track business outright from cash."""

    cost = to_number(price)
    blocked = _check_purchase(state, cost)
    if blocked is not None:
        return blocked
    business = _fast_track_business(name, cost, to_number(income), "Fast Track business")
    cash = state.fast_track_cash - cost
    updated = replace(
        state,
        fast_track_cash=cash,
        fast_track_business_investments=[*state.fast_track_business_investments, business],
    )
    LOGGER.info("Bought Fast Track business '%s' for %s", business.name, cost)
    return LedgerOutcome.ok(
        updated,
        FastTrackTransaction(
            action=FastTrackAction.BUY_BUSINESS, amount=cost, cash_after=cash, detail=business.name
        ),
    )


def fast_track_buy_dream(state: FinancialState, price: object) -> LedgerOutcome:
    """Spend Fast Track cash on a dream; nothing is added to the investments."""

    cost = to_number(price)
    blocked = _check_purchase(state, cost)
    if blocked is not None:
        return blocked
    cash = state.fast_track_cash - cost
    LOGGER.info("Bought a dream for %s", cost)
    return LedgerOutcome.ok(
        replace(state, fast_track_cash=cash),
        FastTrackTransaction(action=FastTrackAction.BUY_DREAM, amount=cost, cash_after=cash),
    )


def pay_for_opportunity(
    state: FinancialState, price: object
) -> Tuple[LedgerOutcome, Optional[OpportunityTicket]]:
    """First step of an opportunity: pay the entry price and get a ticket."""

    cost = to_number(price)
    blocked = _check_purchase(state, cost)
    if blocked is not None:
        return blocked, None
    ticket = OpportunityTicket(price=cost)
    cash = state.fast_track_cash - cost
    LOGGER.info("Paid %s for opportunity %s", cost, ticket.ticket_id)
    outcome = LedgerOutcome.ok(
        replace(state, fast_track_cash=cash),
        FastTrackTransaction(
            action=FastTrackAction.OPPORTUNITY_PAID,
            amount=cost,
            cash_after=cash,
            detail=ticket.ticket_id,
        ),
    )
    return outcome, ticket


def resolve_opportunity(
    state: FinancialState,
    ticket: OpportunityTicket,
    outcome: OpportunityOutcome,
    *,
    win_amount: object = 0,
    name: str = "",
    income: object = 0,
) -> LedgerOutcome:
    """Second step of an opportunity: settle a paid ticket exactly once."""

    if ticket.resolved:
        return LedgerOutcome.rejected(state, "Opportunity has already been resolved.")
    blocked = _not_on_fast_track(state)
    if blocked is not None:
        return blocked

    if outcome is OpportunityOutcome.FAILED:
        updated = state
        record = FastTrackTransaction(
            action=FastTrackAction.OPPORTUNITY_FAILED, amount=0, cash_after=state.fast_track_cash
        )
    elif outcome is OpportunityOutcome.WON_CASH:
        amount = to_number(win_amount)
        if amount < 0:
            return LedgerOutcome.rejected(state, "Win amount cannot be negative.")
        updated = replace(state, fast_track_cash=state.fast_track_cash + amount)
        record = FastTrackTransaction(
            action=FastTrackAction.OPPORTUNITY_WON_CASH,
            amount=amount,
            cash_after=updated.fast_track_cash,
        )
    else:
        # A stake won through an opportunity carries no cost basis.
        business = _fast_track_business(name, 0, to_number(income), "Opportunity business")
        updated = replace(
            state,
            fast_track_business_investments=[*state.fast_track_business_investments, business],
        )
        record = FastTrackTransaction(
            action=FastTrackAction.OPPORTUNITY_WON_BUSINESS,
            amount=business.cashflow,
            cash_after=state.fast_track_cash,
            detail=business.name,
        )
    ticket.resolved = True
    LOGGER.info("Opportunity %s resolved as %s", ticket.ticket_id, outcome.value)
    return LedgerOutcome.ok(updated, record)


def apply_expense_event(state: FinancialState, event: ExpenseEvent) -> LedgerOutcome:
    """Apply one misfortune to Fast Track cash; investments are untouched."""

    blocked = _not_on_fast_track(state)
    if blocked is not None:
        return blocked
    cash = event.apply(state.fast_track_cash)
    lost = state.fast_track_cash - cash
    LOGGER.info("Expense event %s cost %s", event.value, lost)
    return LedgerOutcome.ok(
        replace(state, fast_track_cash=cash),
        FastTrackTransaction(
            action=FastTrackAction.EXPENSE_EVENT, amount=lost, cash_after=cash, detail=event.value
        ),
    )


def add_investment(state: FinancialState, name: str = "", income: object = 0) -> LedgerOutcome:
    """Record a Fast Track business by hand without touching cash."""

    business = _fast_track_business(name, 0, to_number(income), "Business investment")
    LOGGER.debug("Added Fast Track investment %s", business.holding_id)
    return LedgerOutcome.ok(
        replace(
            state,
            fast_track_business_investments=[*state.fast_track_business_investments, business],
        )
    )


def update_investment(
    state: FinancialState, holding_id: str, overrides: Dict[str, object]
) -> LedgerOutcome:
    """Edit the name or income of a Fast Track investment."""

    investments = state.fast_track_business_investments
    if not any(item.holding_id == holding_id for item in investments):
        return LedgerOutcome.rejected(state, f"Investment {holding_id} not found.")
    edited = [
        edit_holding(item, overrides, None) if item.holding_id == holding_id else item
        for item in investments
    ]
    return LedgerOutcome.ok(replace(state, fast_track_business_investments=edited))


def remove_investment(state: FinancialState, holding_id: str) -> LedgerOutcome:
    investments = state.fast_track_business_investments
    remaining = [item for item in investments if item.holding_id != holding_id]
    if len(remaining) == len(investments):
        return LedgerOutcome.rejected(state, f"Investment {holding_id} not found.")
    LOGGER.info("Removed Fast Track investment %s", holding_id)
    return LedgerOutcome.ok(replace(state, fast_track_business_investments=remaining))
