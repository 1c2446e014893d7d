"""Mini README: Asset Transaction Processor for accumulation-phase holdings.

Structure:
    * HoldingDraft - caller input for a purchase, normalised per holding kind.
    * buy_holding - append a new holding and emit a purchase receipt.
    * sell_holding - realise proceeds and shrink or drop the position.
    * remove_holding - delete an entry without a sale (data-entry fixes).
    * update_holding - inline edits of an existing holding.

The accumulation phase tracks net worth rather than a cash account, so
neither buying nor selling moves any cash field. Rule violations come back
as rejected ``LedgerOutcome`` objects and leave the record untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from ..logging_utils import get_logger
from .records import AssetAction, AssetTransaction, LedgerOutcome
from .state import (
    FinancialState,
    Holding,
    HoldingKind,
    Number,
    new_holding_id,
    normalise_count,
    to_flag,
    to_number,
    to_text,
)

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class HoldingDraft:
    """Purchase form contents before normalisation.

    ``count`` is ``None`` when the caller left it blank; ``down_payment`` is
    ignored for securities, which are always paid in full.
    """

    name: str = ""
    cost: object = 0
    down_payment: object = 0
    cashflow: object = 0
    count: object = None
    is_short: bool = False

    def to_holding(self, kind: HoldingKind) -> Holding:
        cost = to_number(self.cost)
        count = normalise_count(self.count, kind)
        is_security = kind is HoldingKind.SECURITY
        return Holding(
            holding_id=new_holding_id(),
            name=to_text(self.name).strip() or kind.default_name,
            cost=cost,
            down_payment=cost * count if is_security else to_number(self.down_payment),
            cashflow=to_number(self.cashflow),
            count=count,
            is_short=to_flag(self.is_short) if is_security else False,
        )


def _purchase_total(kind: HoldingKind, holding: Holding) -> Number:
    if kind is HoldingKind.SECURITY:
        return holding.cost * holding.count
    return holding.down_payment


def sale_proceeds(kind: HoldingKind, holding: Holding, sell_count: Number, sale_price: Number) -> Number:
    """Money realised by a sale; may be negative when debt exceeds the price."""

    if kind is not HoldingKind.SECURITY:
        return sale_price - holding.debt
    if holding.is_short:
        return (holding.cost - sale_price) * sell_count
    return sale_price * sell_count


def buy_holding(state: FinancialState, kind: HoldingKind, draft: HoldingDraft) -> LedgerOutcome:
    """Append a holding built from ``draft`` to its collection."""

    if to_number(draft.cost) < 0:
        return LedgerOutcome.rejected(state, "Cost cannot be negative.")
    holding = draft.to_holding(kind)
    if holding.count < 0:
        return LedgerOutcome.rejected(state, "Count cannot be negative.")

    updated = state.with_holdings(kind, [*state.holdings(kind), holding])
    record = AssetTransaction(
        action=AssetAction.BUY,
        kind=kind,
        asset_name=holding.name,
        price=holding.cost,
        count=holding.count,
        total=_purchase_total(kind, holding),
        debt=holding.debt if kind is not HoldingKind.SECURITY else 0,
        cashflow=holding.cashflow,
        is_short=holding.is_short,
    )
    LOGGER.info(
        "Bought %s '%s' cost=%s count=%s debt=%s",
        kind.value,
        holding.name,
        holding.cost,
        holding.count,
        record.debt,
    )
    return LedgerOutcome.ok(updated, record)


def sell_holding(
    state: FinancialState,
    kind: HoldingKind,
    holding_id: str,
    sell_count: object,
    sale_price: object,
) -> LedgerOutcome:
    """Sell a holding, wholly for property and business, partially for securities."""

    holding = state.find_holding(kind, holding_id)
    if holding is None:
        return LedgerOutcome.rejected(state, f"Holding {holding_id} not found.")

    price = to_number(sale_price)
    is_security = kind is HoldingKind.SECURITY
    if is_security:
        quantity = to_number(sell_count)
        if quantity <= 0:
            return LedgerOutcome.rejected(state, "Sell count must be positive.")
        if quantity > holding.count:
            return LedgerOutcome.rejected(
                state, f"Only {holding.count} units of '{holding.name}' are held."
            )
    else:
        quantity = 1

    total = sale_proceeds(kind, holding, quantity, price)
    remaining: List[Holding] = []
    for existing in state.holdings(kind):
        if existing.holding_id != holding_id:
            remaining.append(existing)
        elif is_security and quantity < existing.count:
            remaining.append(replace(existing, count=existing.count - quantity))

    record = AssetTransaction(
        action=AssetAction.SELL,
        kind=kind,
        asset_name=holding.name,
        price=price,
        count=quantity,
        total=total,
        debt=holding.debt if not is_security else 0,
        cashflow=holding.cashflow,
        is_short=holding.is_short,
    )
    LOGGER.info(
        "Sold %s '%s' count=%s price=%s proceeds=%s",
        kind.value,
        holding.name,
        quantity,
        price,
        total,
    )
    return LedgerOutcome.ok(state.with_holdings(kind, remaining), record)


def remove_holding(state: FinancialState, kind: HoldingKind, holding_id: str) -> LedgerOutcome:
    """Drop a holding outright; no proceeds are computed."""

    holdings = state.holdings(kind)
    remaining = [holding for holding in holdings if holding.holding_id != holding_id]
    if len(remaining) == len(holdings):
        return LedgerOutcome.rejected(state, f"Holding {holding_id} not found.")
    LOGGER.info("Removed %s holding %s", kind.value, holding_id)
    return LedgerOutcome.ok(state.with_holdings(kind, remaining))


def coerce_holding_overrides(
    overrides: Dict[str, object], kind: Optional[HoldingKind]
) -> Dict[str, object]:
    """Validate and coerce inline edit payloads for a holding."""

    coerced: Dict[str, object] = {}
    for key, value in overrides.items():
        if key == "name" and value is not None:
            coerced[key] = to_text(value)
        elif key in {"cost", "down_payment", "cashflow"} and value is not None:
            coerced[key] = to_number(value)
        elif key == "count" and value is not None:
            coerced[key] = normalise_count(value, kind)
        elif key == "is_short" and value is not None:
            coerced[key] = to_flag(value) if kind is HoldingKind.SECURITY else False
        elif value is not None:
            raise ValueError(f"Override of field '{key}' is not supported.")
    return coerced


def edit_holding(holding: Holding, overrides: Dict[str, object], kind: Optional[HoldingKind]) -> Holding:
    edited = replace(holding, **coerce_holding_overrides(overrides, kind))
    if kind is HoldingKind.SECURITY:
        edited = replace(edited, down_payment=edited.cost * edited.count)
    return edited


def update_holding(
    state: FinancialState,
    kind: HoldingKind,
    holding_id: str,
    overrides: Dict[str, object],
) -> LedgerOutcome:
    """Apply inline edits to one holding, keeping securities fully paid."""

    holding = state.find_holding(kind, holding_id)
    if holding is None:
        return LedgerOutcome.rejected(state, f"Holding {holding_id} not found.")
    edited = edit_holding(holding, overrides, kind)
    holdings = [edited if item.holding_id == holding_id else item for item in state.holdings(kind)]
    LOGGER.debug("Updated %s holding %s with %s", kind.value, holding_id, sorted(overrides))
    return LedgerOutcome.ok(state.with_holdings(kind, holdings))
