"""Mini README: FastAPI JSON API over a ledger session.

Structure:
    * create_application - application factory wiring routes to a session.
    * _ledger_payload / _respond - shared response shaping.

Each route maps to one session operation. Accepted operations return the
transaction record together with the refreshed snapshot and metrics. Rule
rejections become HTTP 409 with the reason as detail; malformed identifiers
(unknown holding kinds, liabilities, events) become HTTP 400.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from fastapi import Body, FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse

from ..ledger import HoldingDraft, LedgerOutcome, LedgerSession
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def _ledger_payload(session: LedgerSession) -> Dict[str, Any]:
    return {
        "state": session.snapshot(),
        "metrics": session.metrics().as_dict(),
        "setup_required": session.setup_required,
        "pending_opportunity": session.pending_opportunity is not None,
    }


def _respond(session: LedgerSession, operation: Callable[[], LedgerOutcome]) -> JSONResponse:
    """Run an operation, translating rejections and bad input into HTTP errors."""

    try:
        outcome = operation()
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    if not outcome.accepted:
        raise HTTPException(status_code=409, detail=outcome.reason)
    payload = outcome.as_dict()
    payload.update(_ledger_payload(session))
    return JSONResponse(payload)


def create_application(session: Optional[LedgerSession] = None) -> FastAPI:
    """Create the FastAPI application bound to ``session``.

    Without an explicit session the one stored under the configured data
    directory is opened.
    """

    app = FastAPI(title="Cashflow Ledger", version="0.1.0")
    ledger = session or LedgerSession.from_settings()
    LOGGER.debug("Serving ledger session (setup_required=%s)", ledger.setup_required)

    @app.get("/state")
    async def read_state() -> JSONResponse:
        """Return the snapshot with freshly computed metrics."""

        payload = _ledger_payload(ledger)
        record = ledger.last_record
        payload["last_record"] = record.as_dict() if record is not None else None
        return JSONResponse(payload)

    @app.patch("/state")
    async def update_state(changes: Dict[str, Any] = Body(...)) -> JSONResponse:
        """Overwrite simple ledger fields such as salary or debts."""

        return _respond(ledger, lambda: ledger.update_state(changes))

    @app.post("/setup/complete")
    async def complete_setup() -> JSONResponse:
        if not ledger.complete_setup():
            raise HTTPException(status_code=409, detail="Player name and profession are required.")
        return JSONResponse(_ledger_payload(ledger))

    @app.post("/reset")
    async def reset_session() -> JSONResponse:
        ledger.reset_session()
        LOGGER.info("Session reset through the API")
        return JSONResponse(_ledger_payload(ledger))

    @app.post("/holdings/{kind}")
    async def buy_holding(
        kind: str,
        name: str = Form(""),
        cost: float = Form(0.0),
        down_payment: float = Form(0.0),
        cashflow: float = Form(0.0),
        count: Optional[float] = Form(None),
        is_short: bool = Form(False),
    ) -> JSONResponse:
        """Record a real-estate, business, or security purchase."""

        draft = HoldingDraft(
            name=name,
            cost=cost,
            down_payment=down_payment,
            cashflow=cashflow,
            count=count,
            is_short=is_short,
        )
        return _respond(ledger, lambda: ledger.buy_holding(kind, draft))

    @app.post("/holdings/{kind}/{holding_id}/sell")
    async def sell_holding(
        kind: str,
        holding_id: str,
        sale_price: float = Form(0.0),
        sell_count: float = Form(1.0),
    ) -> JSONResponse:
        return _respond(
            ledger, lambda: ledger.sell_holding(kind, holding_id, sell_count, sale_price)
        )

    @app.patch("/holdings/{kind}/{holding_id}")
    async def update_holding(
        kind: str, holding_id: str, overrides: Dict[str, Any] = Body(...)
    ) -> JSONResponse:
        return _respond(ledger, lambda: ledger.update_holding(kind, holding_id, overrides))

    @app.delete("/holdings/{kind}/{holding_id}")
    async def remove_holding(kind: str, holding_id: str) -> JSONResponse:
        """Delete a mistyped holding without recording a sale."""

        return _respond(ledger, lambda: ledger.remove_holding(kind, holding_id))

    @app.post("/bank/take")
    async def take_loan(amount: float = Form(...)) -> JSONResponse:
        return _respond(ledger, lambda: ledger.take_loan(amount))

    @app.post("/bank/repay")
    async def repay_loan(amount: float = Form(...)) -> JSONResponse:
        return _respond(ledger, lambda: ledger.repay_loan(amount))

    @app.post("/bank/liabilities/{liability}/close")
    async def close_liability(liability: str, repayment: float = Form(...)) -> JSONResponse:
        """Pay off a fixed liability; the amount must match the debt exactly."""

        return _respond(ledger, lambda: ledger.close_fixed_liability(liability, repayment))

    @app.post("/fast-track/enter")
    async def enter_fast_track() -> JSONResponse:
        return _respond(ledger, ledger.transition_to_fast_track)

    @app.post("/fast-track/exit")
    async def exit_fast_track() -> JSONResponse:
        return _respond(ledger, ledger.revert_to_accumulation_phase)

    @app.post("/fast-track/payday")
    async def payday() -> JSONResponse:
        """Credit one payday; clients gate this behind the hold gesture."""

        return _respond(ledger, ledger.fast_track_payday)

    @app.post("/fast-track/buy")
    async def fast_track_buy(
        purchase: str = Form(...),
        price: float = Form(0.0),
        name: str = Form(""),
        income: float = Form(0.0),
    ) -> JSONResponse:
        return _respond(
            ledger, lambda: ledger.fast_track_buy(purchase, price, name=name, income=income)
        )

    @app.post("/fast-track/opportunity/resolve")
    async def resolve_opportunity(
        outcome: str = Form(...),
        win_amount: float = Form(0.0),
        name: str = Form(""),
        income: float = Form(0.0),
    ) -> JSONResponse:
        return _respond(
            ledger,
            lambda: ledger.resolve_opportunity(
                outcome, win_amount=win_amount, name=name, income=income
            ),
        )

    @app.post("/fast-track/expense")
    async def expense_event(event: str = Form(...)) -> JSONResponse:
        return _respond(ledger, lambda: ledger.fast_track_apply_expense_event(event))

    @app.post("/fast-track/investments")
    async def add_investment(name: str = Form(""), income: float = Form(0.0)) -> JSONResponse:
        return _respond(ledger, lambda: ledger.add_investment(name, income))

    @app.patch("/fast-track/investments/{holding_id}")
    async def update_investment(holding_id: str, overrides: Dict[str, Any] = Body(...)) -> JSONResponse:
        return _respond(ledger, lambda: ledger.update_investment(holding_id, overrides))

    @app.delete("/fast-track/investments/{holding_id}")
    async def remove_investment(holding_id: str) -> JSONResponse:
        return _respond(ledger, lambda: ledger.remove_investment(holding_id))

    return app
