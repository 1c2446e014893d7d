"""Mini README: The ledger session, the single owner of a player's state.

Structure:
    * FastTrackPurchase - business, dream, or opportunity buy modes.
    * LedgerSession - loads the stored snapshot once, routes every caller
      operation to its processor, and writes the full snapshot back after
      each committed change.

Callers never touch ``FinancialState`` directly. Simple fields go through
``update_state``; anything rule-checked goes through the processor methods,
which return the processor's ``LedgerOutcome``. Rejected outcomes are
logged and leave both the in-memory and the stored state alone. A snapshot
that is missing, unreadable, or lacks a player and profession puts the
session into setup mode.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple, Union

from ..configuration import LedgerSettings, get_settings
from ..logging_utils import get_logger
from . import assets, bank, fast_track
from .assets import HoldingDraft
from .fast_track import ExpenseEvent, OpportunityOutcome, OpportunityTicket
from .metrics import LedgerMetrics, compute_metrics
from .payday import DEFAULT_HOLD_SECONDS, DEFAULT_TICK_SECONDS, PaydayHold
from .records import LedgerOutcome, TransactionRecord
from .state import FinancialState, FixedLiability, HoldingKind
from .storage import JsonDirectoryStore, KeyValueStore
from .updates import apply_field_updates

LOGGER = get_logger(__name__)

DEFAULT_SNAPSHOT_KEY = "cashflow_state_v1"


class FastTrackPurchase(str, Enum):
    BUSINESS = "business"
    DREAM = "dream"
    OPPORTUNITY = "opportunity"

    @classmethod
    def from_str(cls, value: str) -> "FastTrackPurchase":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported Fast Track purchase: {value}") from error


def _as_kind(kind: Union[HoldingKind, str]) -> HoldingKind:
    return kind if isinstance(kind, HoldingKind) else HoldingKind.from_str(kind)


class LedgerSession:
    """Own one player's ledger and keep the stored snapshot in step."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_SNAPSHOT_KEY,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ) -> None:
        self._store = store
        self._key = key
        self.hold_seconds = hold_seconds
        self.tick_seconds = tick_seconds
        self.last_record: Optional[TransactionRecord] = None
        self.pending_opportunity: Optional[OpportunityTicket] = None
        self._state, self.setup_required = self._load()

    @classmethod
    def from_settings(cls, settings: Optional[LedgerSettings] = None) -> "LedgerSession":
        """Open the session stored under the configured data directory."""

        settings = settings or get_settings()
        return cls(
            JsonDirectoryStore(settings.data_directory),
            key=settings.snapshot_key,
            hold_seconds=settings.payday_hold_seconds,
            tick_seconds=settings.payday_tick_seconds,
        )

    def _load(self) -> Tuple[FinancialState, bool]:
        try:
            raw = self._store.get(self._key)
            if raw is None:
                LOGGER.info("No stored session under '%s'; starting setup", self._key)
                return FinancialState(), True
            state = FinancialState.from_snapshot(json.loads(raw))
        except (OSError, ValueError, TypeError) as error:
            LOGGER.warning("Stored session '%s' is unreadable, starting fresh: %s", self._key, error)
            return FinancialState(), True
        return state, state.needs_setup

    def _persist(self) -> None:
        self._store.set(self._key, json.dumps(self._state.to_snapshot(), ensure_ascii=False))

    def _commit(self, outcome: LedgerOutcome, operation: str) -> LedgerOutcome:
        if not outcome.accepted:
            LOGGER.warning("%s rejected: %s", operation, outcome.reason)
            return outcome
        self._state = outcome.state
        if outcome.record is not None:
            self.last_record = outcome.record
        self._persist()
        return outcome

    @property
    def state(self) -> FinancialState:
        return self._state

    def metrics(self) -> LedgerMetrics:
        return compute_metrics(self._state)

    def snapshot(self) -> Dict[str, object]:
        return self._state.to_snapshot()

    # Setup and free-form edits

    def update_state(self, changes: Optional[Mapping[str, object]] = None, **fields: object) -> LedgerOutcome:
        """Overwrite simple fields without rule checks."""

        merged: Dict[str, object] = dict(changes or {})
        merged.update(fields)
        return self._commit(LedgerOutcome.ok(apply_field_updates(self._state, merged)), "update")

    def complete_setup(self) -> bool:
        """Leave setup mode once a player and profession have been entered."""

        self.setup_required = self._state.needs_setup
        if self.setup_required:
            LOGGER.warning("Setup incomplete: player and profession are required")
        return not self.setup_required

    def reset_session(self) -> None:
        """Discard the stored snapshot and start over from defaults."""

        self._store.delete(self._key)
        self._state = FinancialState()
        self.last_record = None
        self.pending_opportunity = None
        self.setup_required = True
        self._persist()
        LOGGER.info("Session '%s' reset", self._key)

    # Rat Race holdings

    def buy_holding(self, kind: Union[HoldingKind, str], draft: HoldingDraft) -> LedgerOutcome:
        return self._commit(assets.buy_holding(self._state, _as_kind(kind), draft), "buy")

    def sell_holding(
        self,
        kind: Union[HoldingKind, str],
        holding_id: str,
        sell_count: object = 1,
        sale_price: object = 0,
    ) -> LedgerOutcome:
        outcome = assets.sell_holding(self._state, _as_kind(kind), holding_id, sell_count, sale_price)
        return self._commit(outcome, "sell")

    def remove_holding(self, kind: Union[HoldingKind, str], holding_id: str) -> LedgerOutcome:
        return self._commit(assets.remove_holding(self._state, _as_kind(kind), holding_id), "remove")

    def update_holding(
        self, kind: Union[HoldingKind, str], holding_id: str, overrides: Dict[str, object]
    ) -> LedgerOutcome:
        outcome = assets.update_holding(self._state, _as_kind(kind), holding_id, overrides)
        return self._commit(outcome, "edit holding")

    # Bank

    def take_loan(self, amount: object) -> LedgerOutcome:
        return self._commit(bank.take_loan(self._state, amount), "take loan")

    def repay_loan(self, amount: object) -> LedgerOutcome:
        return self._commit(bank.repay_loan(self._state, amount), "repay loan")

    def close_fixed_liability(
        self, liability: Union[FixedLiability, str], repayment: object
    ) -> LedgerOutcome:
        if not isinstance(liability, FixedLiability):
            liability = FixedLiability.from_str(liability)
        outcome = bank.close_fixed_liability(self._state, liability, repayment)
        return self._commit(outcome, "close liability")

    # Phases

    def transition_to_fast_track(self) -> LedgerOutcome:
        return self._commit(fast_track.transition_to_fast_track(self._state), "enter Fast Track")

    def revert_to_accumulation_phase(self) -> LedgerOutcome:
        self.pending_opportunity = None
        return self._commit(fast_track.revert_to_accumulation_phase(self._state), "leave Fast Track")

    # Fast Track

    def fast_track_buy(
        self,
        purchase: Union[FastTrackPurchase, str],
        price: object,
        *,
        name: str = "",
        income: object = 0,
    ) -> LedgerOutcome:
        """Buy a business or a dream, or pay into an opportunity.

        Paying into an opportunity leaves it pending until
        ``resolve_opportunity`` settles it.
        """

        if not isinstance(purchase, FastTrackPurchase):
            purchase = FastTrackPurchase.from_str(purchase)
        if purchase is FastTrackPurchase.BUSINESS:
            outcome = fast_track.fast_track_buy_business(self._state, name, price, income)
        elif purchase is FastTrackPurchase.DREAM:
            outcome = fast_track.fast_track_buy_dream(self._state, price)
        else:
            if self.pending_opportunity is not None:
                outcome = LedgerOutcome.rejected(self._state, "An opportunity is already pending.")
                return self._commit(outcome, "Fast Track opportunity")
            outcome, ticket = fast_track.pay_for_opportunity(self._state, price)
            if outcome.accepted:
                self.pending_opportunity = ticket
        return self._commit(outcome, f"Fast Track {purchase.value}")

    def resolve_opportunity(
        self,
        outcome: Union[OpportunityOutcome, str],
        *,
        win_amount: object = 0,
        name: str = "",
        income: object = 0,
    ) -> LedgerOutcome:
        if not isinstance(outcome, OpportunityOutcome):
            outcome = OpportunityOutcome.from_str(outcome)
        ticket = self.pending_opportunity
        if ticket is None:
            return self._commit(
                LedgerOutcome.rejected(self._state, "No opportunity has been paid for."),
                "resolve opportunity",
            )
        result = fast_track.resolve_opportunity(
            self._state, ticket, outcome, win_amount=win_amount, name=name, income=income
        )
        if ticket.resolved:
            self.pending_opportunity = None
        return self._commit(result, "resolve opportunity")

    def fast_track_apply_expense_event(self, event: Union[ExpenseEvent, str]) -> LedgerOutcome:
        if not isinstance(event, ExpenseEvent):
            event = ExpenseEvent.from_str(event)
        return self._commit(fast_track.apply_expense_event(self._state, event), f"{event.value} event")

    def fast_track_payday(self) -> LedgerOutcome:
        return self._commit(fast_track.fast_track_payday(self._state), "payday")

    def payday_hold(self, clock: Optional[Callable[[], float]] = None) -> PaydayHold:
        """Gesture that triggers ``fast_track_payday`` after a full hold."""

        options = {"hold_seconds": self.hold_seconds, "tick_seconds": self.tick_seconds}
        if clock is not None:
            options["clock"] = clock
        return PaydayHold(self.fast_track_payday, **options)

    def add_investment(self, name: str = "", income: object = 0) -> LedgerOutcome:
        return self._commit(fast_track.add_investment(self._state, name, income), "add investment")

    def update_investment(self, holding_id: str, overrides: Dict[str, object]) -> LedgerOutcome:
        outcome = fast_track.update_investment(self._state, holding_id, overrides)
        return self._commit(outcome, "edit investment")

    def remove_investment(self, holding_id: str) -> LedgerOutcome:
        return self._commit(fast_track.remove_investment(self._state, holding_id), "remove investment")
