"""Mini README: Unchecked field edits for the simple ledger entries.

Structure:
    * EDITABLE_TEXT_FIELDS / EDITABLE_NUMBER_FIELDS / EDITABLE_FLAG_FIELDS.
    * coerce_field_updates - validate names and coerce values by field type.
    * apply_field_updates - return a new record with the edits applied.

Salary, debts, expenses and the like are typed in by the player and are not
rule-checked. Holding collections and the phase flag are deliberately absent
from the editable set: they only change through the asset, bank and
fast-track processors. Zeroing any debt principal here also zeroes its
monthly payment in the same update.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Mapping

from ..logging_utils import get_logger
from .state import PRINCIPAL_PAYMENT_PAIRS, FinancialState, to_flag, to_number, to_text

LOGGER = get_logger(__name__)

EDITABLE_TEXT_FIELDS = frozenset({"player", "auditor", "profession", "goal"})

EDITABLE_NUMBER_FIELDS = frozenset(
    {
        "salary",
        "dividends",
        "home_mortgage",
        "school_loans",
        "car_loans",
        "credit_card_debt",
        "retail_debt",
        "bank_loan",
        "other_liabilities",
        "taxes",
        "home_mortgage_payment",
        "school_loan_payment",
        "car_loan_payment",
        "credit_card_payment",
        "retail_payment",
        "other_expenses",
        "bank_loan_payment",
        "child_count",
        "per_child_expense",
        "fast_track_start_passive_income",
        "fast_track_cashflow_day_income",
        "fast_track_cash",
        "winning_passive_income_goal",
    }
)

EDITABLE_FLAG_FIELDS = frozenset({"fast_track_sum_business_income"})

EDITABLE_FIELDS = EDITABLE_TEXT_FIELDS | EDITABLE_NUMBER_FIELDS | EDITABLE_FLAG_FIELDS


def coerce_field_updates(changes: Mapping[str, object]) -> Dict[str, object]:
    """Validate field names and coerce values, expanding the debt reset rule."""

    coerced: Dict[str, object] = {}
    for key, value in changes.items():
        if key in EDITABLE_TEXT_FIELDS:
            coerced[key] = to_text(value)
        elif key in EDITABLE_NUMBER_FIELDS:
            coerced[key] = to_number(value)
        elif key in EDITABLE_FLAG_FIELDS:
            coerced[key] = to_flag(value)
        else:
            raise ValueError(f"Field '{key}' cannot be edited directly.")

    for principal, payment in PRINCIPAL_PAYMENT_PAIRS.items():
        if principal in coerced and coerced[principal] == 0:
            coerced[payment] = 0
    return coerced


def apply_field_updates(state: FinancialState, changes: Mapping[str, object]) -> FinancialState:
    """Return ``state`` with the given simple fields overwritten."""

    coerced = coerce_field_updates(changes)
    if not coerced:
        return state
    LOGGER.debug("Applying field updates: %s", sorted(coerced))
    return replace(state, **coerced)
