"""Mini README: Bank Credit Processor.

Structure:
    * is_valid_loan_amount - positive whole thousands only.
    * take_loan / repay_loan - move the single bank loan account.
    * close_fixed_liability - pay off one of the five fixed debts in full.

The bank loan always costs 10% of its principal per month, recomputed from
the new principal after each movement. Fixed liabilities are binary: they
are either owed in full or closed, never partially repaid.
"""

from __future__ import annotations

from dataclasses import replace

from ..logging_utils import get_logger
from .metrics import max_loan, round_half_up
from .records import BankAction, BankTransaction, LedgerOutcome
from .state import FinancialState, FixedLiability, Number, to_number

LOGGER = get_logger(__name__)

LOAN_STEP = 1000
LOAN_PAYMENT_RATE = 0.10


def is_valid_loan_amount(amount: Number) -> bool:
    return amount > 0 and amount % LOAN_STEP == 0


def loan_payment(principal: Number) -> int:
    return round_half_up(principal * LOAN_PAYMENT_RATE)


def _move_bank_loan(state: FinancialState, action: BankAction, amount: Number) -> LedgerOutcome:
    principal = state.bank_loan + amount if action is BankAction.TAKE else state.bank_loan - amount
    payment = loan_payment(principal)
    updated = replace(state, bank_loan=principal, bank_loan_payment=payment)
    LOGGER.info(
        "Bank loan %s %s -> principal=%s payment=%s", action.value, amount, principal, payment
    )
    return LedgerOutcome.ok(
        updated,
        BankTransaction(action=action, amount=amount, new_balance=principal, new_payment=payment),
    )


def take_loan(state: FinancialState, amount: object) -> LedgerOutcome:
    """Borrow ``amount`` if it is a whole thousand within the credit limit."""

    value = to_number(amount)
    limit = max_loan(state)
    if not is_valid_loan_amount(value):
        return LedgerOutcome.rejected(state, "Loan amount must be a positive multiple of 1000.")
    if value > limit:
        return LedgerOutcome.rejected(state, f"Loan amount exceeds the available credit of {limit}.")
    return _move_bank_loan(state, BankAction.TAKE, value)


def repay_loan(state: FinancialState, amount: object) -> LedgerOutcome:
    """Repay ``amount`` of the bank loan in whole thousands."""

    value = to_number(amount)
    if not is_valid_loan_amount(value):
        return LedgerOutcome.rejected(state, "Repayment must be a positive multiple of 1000.")
    if value > state.bank_loan:
        return LedgerOutcome.rejected(
            state, f"Repayment exceeds the outstanding bank loan of {state.bank_loan}."
        )
    return _move_bank_loan(state, BankAction.REPAY, value)


def close_fixed_liability(
    state: FinancialState, liability: FixedLiability, repayment: object
) -> LedgerOutcome:
    """Zero a fixed liability and its payment when repaid to the exact amount."""

    principal = getattr(state, liability.principal_field)
    value = to_number(repayment)
    if principal <= 0:
        return LedgerOutcome.rejected(state, f"{liability.label} has nothing outstanding.")
    if value != principal:
        return LedgerOutcome.rejected(
            state, f"{liability.label} must be repaid in full ({principal})."
        )
    updated = replace(state, **{liability.principal_field: 0, liability.payment_field: 0})
    LOGGER.info("Closed %s by repaying %s", liability.label, principal)
    return LedgerOutcome.ok(
        updated,
        BankTransaction(
            action=BankAction.CLOSE_LIABILITY,
            amount=principal,
            new_balance=0,
            new_payment=0,
            liability_name=liability.label,
        ),
    )
