"""Mini README: Tests for environment-driven settings and logging levels."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cashflow_ledger.configuration import LedgerSettings
from cashflow_ledger.ledger import LedgerSession
from cashflow_ledger.logging_utils import _resolve_level


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Prefixed environment variables override defaults and create the data directory."""

    target = tmp_path / "saves"
    monkeypatch.setenv("CASHFLOW_DATA_DIRECTORY", str(target))
    monkeypatch.setenv("CASHFLOW_SNAPSHOT_KEY", "table_two")
    monkeypatch.setenv("CASHFLOW_PAYDAY_HOLD_SECONDS", "2.5")

    settings = LedgerSettings()

    assert settings.data_directory == target.resolve()
    assert target.is_dir()
    assert settings.snapshot_key == "table_two"
    assert settings.payday_hold_seconds == pytest.approx(2.5)


def test_session_from_settings_uses_configured_store(tmp_path: Path) -> None:
    """Sessions built from settings save under the configured key and directory."""

    settings = LedgerSettings(data_directory=tmp_path, snapshot_key="table_three")

    session = LedgerSession.from_settings(settings)
    session.update_state(player="Kim", profession="Mechanic")

    assert (tmp_path / "table_three.json").exists()
    assert session.hold_seconds == settings.payday_hold_seconds
    assert session.payday_hold().tick_seconds == settings.payday_tick_seconds


def test_resolve_level_accepts_names_and_numbers() -> None:
    """Level names are case-insensitive; unknown names are refused."""

    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError):
        _resolve_level("chatty")
