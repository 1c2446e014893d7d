"""Mini README: Financial state record and holding types.

Structure:
    * HoldingKind - enum of the three accumulation-phase collections.
    * FixedLiability - the five named debts and their paired payment fields.
    * Holding - one real-estate, business, or security position.
    * FinancialState - the single snapshot of a player's session.
    * to_number / normalise_count - boundary normalisation helpers.

The record is a plain dataclass. Processors never mutate it in place; they
build a new record with ``dataclasses.replace`` so a rejected operation
always leaves the caller's snapshot untouched. Snapshots use the camelCase
keys of the board-game calculator's storage format so existing saves load
verbatim.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

Number = Union[int, float]

DEFAULT_FREEDOM_GOAL = 50000


def to_number(value: object, default: Number = 0) -> Number:
    """Coerce ledger input into a number, treating blanks and junk as ``default``.

    Integral results are returned as ``int`` so persisted snapshots keep whole
    amounts whole.
    """

    if value is None or isinstance(value, bool):
        return default
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (OverflowError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if number.is_integer():
        return int(number)
    return number


def to_text(value: object) -> str:
    """Render stored text, mapping ``None`` to an empty string."""

    if value is None:
        return ""
    return str(value)


def to_flag(value: object) -> bool:
    """Interpret form and JSON style booleans."""

    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def camel_case(name: str) -> str:
    """Convert a field name to the camelCase key used in snapshots."""

    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


class HoldingKind(str, Enum):
    """Enumerate the accumulation-phase holding collections."""

    REAL_ESTATE = "realEstate"
    BUSINESS = "business"
    SECURITY = "security"

    @classmethod
    def from_str(cls, value: str) -> "HoldingKind":
        """Accept any casing plus the stored collection names."""

        try:
            normalised = value.strip().replace("-", "").replace("_", "").lower()
        except AttributeError as error:
            raise ValueError(f"Unsupported holding kind: {value}") from error
        aliases = {
            "realestate": cls.REAL_ESTATE,
            "realestateassets": cls.REAL_ESTATE,
            "business": cls.BUSINESS,
            "businessassets": cls.BUSINESS,
            "security": cls.SECURITY,
            "securities": cls.SECURITY,
            "stock": cls.SECURITY,
            "stocks": cls.SECURITY,
            "stockassets": cls.SECURITY,
        }
        if normalised not in aliases:
            raise ValueError(f"Unsupported holding kind: {value}")
        return aliases[normalised]

    @property
    def collection(self) -> str:
        """Name of the ``FinancialState`` attribute holding this kind."""

        return {
            HoldingKind.REAL_ESTATE: "real_estate_assets",
            HoldingKind.BUSINESS: "business_assets",
            HoldingKind.SECURITY: "stock_assets",
        }[self]

    @property
    def default_name(self) -> str:
        """Name given to a holding bought without one."""

        return {
            HoldingKind.REAL_ESTATE: "House",
            HoldingKind.BUSINESS: "Business",
            HoldingKind.SECURITY: "Shares",
        }[self]

    @property
    def debt_label(self) -> str:
        return "Liability" if self is HoldingKind.BUSINESS else "Mortgage"


class FixedLiability(str, Enum):
    """The five binary debt lines set up at the start of a game."""

    HOME_MORTGAGE = "homeMortgage"
    SCHOOL_LOANS = "schoolLoans"
    CAR_LOANS = "carLoans"
    CREDIT_CARD_DEBT = "creditCardDebt"
    RETAIL_DEBT = "retailDebt"

    @classmethod
    def from_str(cls, value: str) -> "FixedLiability":
        normalised = str(value).strip().replace("_", "").lower()
        for member in cls:
            if member.value.lower() == normalised or member.name.replace("_", "").lower() == normalised:
                return member
        raise ValueError(f"Unsupported liability: {value}")

    @property
    def principal_field(self) -> str:
        return _LIABILITY_FIELDS[self][0]

    @property
    def payment_field(self) -> str:
        return _LIABILITY_FIELDS[self][1]

    @property
    def label(self) -> str:
        return _LIABILITY_FIELDS[self][2]


_LIABILITY_FIELDS: Dict[FixedLiability, Tuple[str, str, str]] = {
    FixedLiability.HOME_MORTGAGE: ("home_mortgage", "home_mortgage_payment", "Home mortgage"),
    FixedLiability.SCHOOL_LOANS: ("school_loans", "school_loan_payment", "School loans"),
    FixedLiability.CAR_LOANS: ("car_loans", "car_loan_payment", "Car loans"),
    FixedLiability.CREDIT_CARD_DEBT: ("credit_card_debt", "credit_card_payment", "Credit cards"),
    FixedLiability.RETAIL_DEBT: ("retail_debt", "retail_payment", "Retail debt"),
}

# Principal -> payment pairs covered by the zero-principal reset rule.
PRINCIPAL_PAYMENT_PAIRS: Dict[str, str] = {
    **{liability.principal_field: liability.payment_field for liability in FixedLiability},
    "bank_loan": "bank_loan_payment",
}


def new_holding_id() -> str:
    return uuid.uuid4().hex


def normalise_count(value: object, kind: Optional[HoldingKind]) -> Number:
    """Default a missing count per kind.

    Real-estate and business entries (and fast-track investments, ``kind`` is
    ``None``) are single units, so an absent count means 1. Securities have no
    implicit quantity and default to 0.
    """

    if value is None or value == "":
        return 0 if kind is HoldingKind.SECURITY else 1
    return to_number(value)


@dataclass(slots=True)
class Holding:
    """A real-estate, business, or security position."""

    holding_id: str
    name: str
    cost: Number = 0
    down_payment: Number = 0
    cashflow: Number = 0
    count: Number = 1
    is_short: bool = False

    @property
    def debt(self) -> Number:
        """Outstanding financing, never negative."""

        return max(0, self.cost - self.down_payment)

    @property
    def weighted_cashflow(self) -> Number:
        return self.cashflow * max(self.count, 1)

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.holding_id,
            "name": self.name,
            "cost": self.cost,
            "downPayment": self.down_payment,
            "cashflow": self.cashflow,
            "count": self.count,
            "isShort": self.is_short,
        }

    @classmethod
    def from_snapshot(cls, payload: Mapping[str, Any], kind: Optional[HoldingKind] = None) -> "Holding":
        if not isinstance(payload, Mapping):
            raise ValueError("Holding entries must be JSON objects.")
        return cls(
            holding_id=to_text(payload.get("id")) or new_holding_id(),
            name=to_text(payload.get("name")),
            cost=to_number(payload.get("cost")),
            down_payment=to_number(payload.get("downPayment")),
            cashflow=to_number(payload.get("cashflow")),
            count=normalise_count(payload.get("count"), kind),
            is_short=to_flag(payload.get("isShort", False)) if kind is HoldingKind.SECURITY else False,
        )


@dataclass(slots=True)
class FinancialState:
    """The whole financial position of one player for one session."""

    player: str = ""
    auditor: str = ""
    profession: str = ""
    goal: str = ""

    salary: Number = 0
    dividends: Number = 0

    real_estate_assets: List[Holding] = field(default_factory=list)
    business_assets: List[Holding] = field(default_factory=list)
    stock_assets: List[Holding] = field(default_factory=list)

    home_mortgage: Number = 0
    school_loans: Number = 0
    car_loans: Number = 0
    credit_card_debt: Number = 0
    retail_debt: Number = 0
    bank_loan: Number = 0
    other_liabilities: Number = 0

    taxes: Number = 0
    home_mortgage_payment: Number = 0
    school_loan_payment: Number = 0
    car_loan_payment: Number = 0
    credit_card_payment: Number = 0
    retail_payment: Number = 0
    other_expenses: Number = 0
    bank_loan_payment: Number = 0

    child_count: Number = 0
    per_child_expense: Number = 0

    is_on_fast_track: bool = False
    fast_track_start_passive_income: Number = 0
    fast_track_cashflow_day_income: Number = 0
    fast_track_cash: Number = 0
    fast_track_business_investments: List[Holding] = field(default_factory=list)
    winning_passive_income_goal: Number = DEFAULT_FREEDOM_GOAL
    fast_track_sum_business_income: bool = False

    def holdings(self, kind: HoldingKind) -> List[Holding]:
        return getattr(self, kind.collection)

    def find_holding(self, kind: HoldingKind, holding_id: str) -> Optional[Holding]:
        for holding in self.holdings(kind):
            if holding.holding_id == holding_id:
                return holding
        return None

    def with_holdings(self, kind: HoldingKind, holdings: List[Holding]) -> "FinancialState":
        """Return a copy with one collection replaced."""

        return replace(self, **{kind.collection: holdings})

    @property
    def needs_setup(self) -> bool:
        """A session is only playable once a player and profession are known."""

        return not self.player or not self.profession

    def to_snapshot(self) -> Dict[str, Any]:
        """Export the record under the calculator's camelCase storage keys."""

        snapshot: Dict[str, Any] = {}
        for record_field in fields(self):
            value = getattr(self, record_field.name)
            if isinstance(value, list):
                value = [holding.to_snapshot() for holding in value]
            snapshot[camel_case(record_field.name)] = value
        return snapshot

    @classmethod
    def from_snapshot(cls, payload: Mapping[str, Any]) -> "FinancialState":
        """Rebuild a record, defaulting every absent or malformed field."""

        if not isinstance(payload, Mapping):
            raise ValueError("Snapshot must be a JSON object.")
        defaults = cls()
        values: Dict[str, Any] = {}
        collection_kinds = {kind.collection: kind for kind in HoldingKind}
        for record_field in fields(cls):
            key = camel_case(record_field.name)
            raw = payload.get(key)
            default = getattr(defaults, record_field.name)
            if isinstance(default, list):
                if raw is None:
                    values[record_field.name] = []
                    continue
                if not isinstance(raw, list):
                    raise ValueError(f"Snapshot field '{key}' must be a list.")
                kind = collection_kinds.get(record_field.name)
                values[record_field.name] = [Holding.from_snapshot(entry, kind) for entry in raw]
            elif isinstance(default, bool):
                values[record_field.name] = to_flag(raw) if raw is not None else default
            elif isinstance(default, str):
                values[record_field.name] = to_text(raw)
            else:
                values[record_field.name] = to_number(raw, default)
        state = cls(**values)
        LOGGER.debug(
            "Restored snapshot for player=%r with %s holdings",
            state.player,
            sum(len(state.holdings(kind)) for kind in HoldingKind),
        )
        return state
