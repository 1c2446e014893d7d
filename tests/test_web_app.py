"""Mini README: Tests for the FastAPI JSON API.

Routes are exercised with ``TestClient`` against an in-memory session so no
files are written. Rejections must surface as HTTP 409, malformed names as 400.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from cashflow_ledger.interface import create_application
from cashflow_ledger.ledger import LedgerSession, MemoryStore


def _client() -> TestClient:
    session = LedgerSession(MemoryStore())
    return TestClient(create_application(session))


def test_setup_then_state_reports_metrics() -> None:
    """Setup completes only once a player and profession are set."""

    client = _client()

    assert client.get("/state").json()["setup_required"] is True
    assert client.post("/setup/complete").status_code == 409

    client.patch("/state", json={"player": "Alex", "profession": "Engineer", "salary": 4900, "taxes": 1050})
    completed = client.post("/setup/complete")

    assert completed.status_code == 200
    body = client.get("/state").json()
    assert body["setup_required"] is False
    assert body["metrics"]["monthly_cashflow"] == 3850
    assert body["metrics"]["max_loan"] == 38000


def test_buy_and_sell_security_over_http() -> None:
    """Share trades over HTTP return receipts and the new state."""

    client = _client()

    bought = client.post("/holdings/security", data={"name": "MYT4U", "cost": 10, "count": 100})
    holding_id = bought.json()["state"]["stockAssets"][0]["id"]
    sold = client.post(f"/holdings/security/{holding_id}/sell", data={"sale_price": 25, "sell_count": 40})

    assert bought.status_code == 200
    assert bought.json()["record"]["total"] == 1000
    assert sold.json()["record"]["total"] == 1000
    assert sold.json()["state"]["stockAssets"][0]["count"] == 60


def test_rule_rejections_map_to_conflict() -> None:
    """Refused operations answer with HTTP 409 and the reason."""

    client = _client()
    client.patch("/state", json={"salary": 600})

    response = client.post("/bank/take", data={"amount": 7000})

    assert response.status_code == 409
    assert "available credit" in response.json()["detail"]


def test_bad_names_map_to_bad_request() -> None:
    """Unknown kinds, fields and liabilities answer with HTTP 400."""

    client = _client()

    assert client.post("/holdings/crypto", data={"cost": 1}).status_code == 400
    assert client.patch("/state", json={"isOnFastTrack": True}).status_code == 400
    assert client.post("/bank/liabilities/unicorn/close", data={"repayment": 1}).status_code == 400


def test_fast_track_round_trip() -> None:
    """The Fast Track can be entered and played over HTTP."""

    client = _client()
    client.patch("/state", json={"dividends": 1000})

    entered = client.post("/fast-track/enter")
    dream = client.post("/fast-track/buy", data={"purchase": "dream", "price": 40000})
    audit = client.post("/fast-track/expense", data={"event": "audit"})
    payday = client.post("/fast-track/payday")

    assert entered.json()["state"]["fastTrackCash"] == 100000
    assert dream.json()["state"]["fastTrackCash"] == 60000
    assert audit.json()["state"]["fastTrackCash"] == 30000
    assert payday.json()["state"]["fastTrackCash"] == 130000
    assert client.post("/fast-track/enter").status_code == 409


def test_close_liability_and_reset() -> None:
    """A debt closes only on the exact amount and reset starts setup again."""

    client = _client()
    client.patch("/state", json={"school_loans": 12000, "school_loan_payment": 60})

    wrong = client.post("/bank/liabilities/schoolLoans/close", data={"repayment": 10000})
    closed = client.post("/bank/liabilities/schoolLoans/close", data={"repayment": 12000})
    reset = client.post("/reset")

    assert wrong.status_code == 409
    assert closed.json()["state"]["schoolLoanPayment"] == 0
    assert closed.json()["record"]["liability_name"] == "School loans"
    assert reset.json()["setup_required"] is True


def test_oversized_field_value_is_treated_as_blank() -> None:
    """A number too large to represent is stored as zero rather than failing the request."""

    client = _client()

    response = client.patch("/state", json={"salary": int("9" * 400)})

    assert response.status_code == 200
    assert response.json()["state"]["salary"] == 0
