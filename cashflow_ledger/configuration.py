"""Mini README: Centralised configuration for the cashflow ledger.

Structure:
    * LedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to locate the snapshot store, pick the storage key
    the session is saved under, and tune the Payday hold gesture. Values are
    read from ``CASHFLOW_*`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class LedgerSettings(BaseSettings):
    """Runtime configuration for the ledger service and CLI."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted session snapshot.",
    )
    snapshot_key: str = Field(
        "cashflow_state_v1",
        description="Key the full state snapshot is stored under.",
        min_length=1,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the JSON API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the JSON API exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level name.",
    )
    payday_hold_seconds: float = Field(
        1.5,
        description="How long the Payday control must be held before it fires.",
        gt=0,
    )
    payday_tick_seconds: float = Field(
        0.016,
        description="Interval at which hold progress is sampled.",
        gt=0,
    )

    class Config:
        env_prefix = "CASHFLOW_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache()
def get_settings() -> LedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerSettings()
