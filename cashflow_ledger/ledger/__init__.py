"""Mini README: Financial ledger and transaction engine.

This package holds the authoritative state record of a Cashflow game
session and every rule that changes it. ``state`` defines the record,
``metrics`` derives income and progress figures, ``assets``, ``bank`` and
``fast_track`` are the rule-checked processors, and ``session`` ties them to
a key-value store so each committed change is persisted.
"""

from .assets import HoldingDraft
from .fast_track import ExpenseEvent, OpportunityOutcome, OpportunityTicket
from .metrics import LedgerMetrics, compute_metrics
from .payday import HoldPhase, PaydayHold
from .records import (
    AssetTransaction,
    BankTransaction,
    FastTrackTransaction,
    LedgerOutcome,
)
from .session import FastTrackPurchase, LedgerSession
from .state import FinancialState, FixedLiability, Holding, HoldingKind
from .storage import JsonDirectoryStore, KeyValueStore, MemoryStore

__all__ = [
    "AssetTransaction",
    "BankTransaction",
    "ExpenseEvent",
    "FastTrackPurchase",
    "FastTrackTransaction",
    "FinancialState",
    "FixedLiability",
    "Holding",
    "HoldingDraft",
    "HoldingKind",
    "HoldPhase",
    "JsonDirectoryStore",
    "KeyValueStore",
    "LedgerMetrics",
    "LedgerOutcome",
    "LedgerSession",
    "MemoryStore",
    "OpportunityOutcome",
    "OpportunityTicket",
    "PaydayHold",
    "compute_metrics",
]
