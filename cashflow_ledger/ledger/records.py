"""Mini README: Operation outcomes and observational transaction records.

Structure:
    * LedgerOutcome - result of every rule-checked operation.
    * AssetTransaction - buy/sell receipt for accumulation-phase holdings.
    * BankTransaction - receipt for loan and liability operations.
    * FastTrackTransaction - receipt for accelerated-phase cash movements.

Records exist for display only; they are never stored in the ledger state.
A rejected outcome carries the unchanged state and a human readable reason
instead of raising, so callers can surface the message and retry.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .state import FinancialState, HoldingKind, Number


class AssetAction(str, Enum):
    BUY = "buy"
    SELL = "sell"


class BankAction(str, Enum):
    TAKE = "take"
    REPAY = "repay"
    CLOSE_LIABILITY = "close_liability"


class FastTrackAction(str, Enum):
    ENTER = "enter"
    PAYDAY = "payday"
    BUY_BUSINESS = "buy_business"
    BUY_DREAM = "buy_dream"
    OPPORTUNITY_PAID = "opportunity_paid"
    OPPORTUNITY_FAILED = "opportunity_failed"
    OPPORTUNITY_WON_CASH = "opportunity_won_cash"
    OPPORTUNITY_WON_BUSINESS = "opportunity_won_business"
    EXPENSE_EVENT = "expense_event"


@dataclass(slots=True)
class AssetTransaction:
    """Receipt describing a holding purchase or sale."""

    action: AssetAction
    kind: HoldingKind
    asset_name: str
    price: Number
    count: Number
    total: Number
    debt: Number
    cashflow: Number
    is_short: bool = False

    @property
    def label(self) -> str:
        if self.kind is HoldingKind.SECURITY and self.is_short:
            return "Short sale" if self.action is AssetAction.BUY else "Short cover"
        return "Purchase" if self.action is AssetAction.BUY else "Sale"

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["action"] = self.action.value
        payload["kind"] = self.kind.value
        payload["label"] = self.label
        return payload


@dataclass(slots=True)
class BankTransaction:
    """Receipt describing a bank loan movement or a liability closure."""

    action: BankAction
    amount: Number
    new_balance: Optional[Number] = None
    new_payment: Optional[Number] = None
    liability_name: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["action"] = self.action.value
        return payload


@dataclass(slots=True)
class FastTrackTransaction:
    """Receipt describing an accelerated-phase cash movement."""

    action: FastTrackAction
    amount: Number
    cash_after: Number
    detail: str = ""

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["action"] = self.action.value
        return payload


TransactionRecord = Union[AssetTransaction, BankTransaction, FastTrackTransaction]


@dataclass(slots=True)
class LedgerOutcome:
    """State produced by an operation plus whether the rules allowed it."""

    state: FinancialState
    accepted: bool
    reason: str = ""
    record: Optional[TransactionRecord] = None

    @classmethod
    def ok(cls, state: FinancialState, record: Optional[TransactionRecord] = None) -> "LedgerOutcome":
        return cls(state=state, accepted=True, record=record)

    @classmethod
    def rejected(cls, state: FinancialState, reason: str) -> "LedgerOutcome":
        return cls(state=state, accepted=False, reason=reason)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "accepted": self.accepted,
            "reason": self.reason,
            "record": self.record.as_dict() if self.record is not None else None,
        }
