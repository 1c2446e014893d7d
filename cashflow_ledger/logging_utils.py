"""Mini README: Application-wide logging helpers for the cashflow ledger.

Structure:
    * configure_root_logger - one-time root logger setup with a readable format.
    * get_logger - factory returning module loggers after baseline setup.

Usage:
    Every module creates ``LOGGER = get_logger(__name__)`` at import time. The
    CLI and web entry points call ``configure_root_logger`` with the level from
    ``LedgerSettings``; repeat calls only change the level, so module reloads
    never stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def _resolve_level(level: Union[int, str]) -> int:
    """Translate level names such as ``"debug"`` into logging constants."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Attach a single stream handler to the root logger.

    Later calls only adjust the level, and only when one is given.
    """

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if _LOGGER_INITIALISED:
        if level is not None:
            root_logger.setLevel(_resolve_level(level))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(_resolve_level(logging.INFO if level is None else level))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
