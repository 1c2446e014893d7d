"""Mini README: Held-confirmation gesture guarding the Payday action.

Structure:
    * HoldPhase - IDLE, HOLDING, FIRED, CANCELLED.
    * PaydayHold - clock-driven state machine that fires a callback once the
      control has been held for the full duration.

A client calls ``press`` when the control goes down, ``tick`` on every frame
and ``release`` when it comes up, or hands the whole cycle to ``run`` which
samples the control every ``tick_seconds`` (16 ms by default). Releasing early
cancels and resets progress. A completed hold fires exactly once, stays at 100%
and ignores further ticks until the next press.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

DEFAULT_HOLD_SECONDS = 1.5
DEFAULT_TICK_SECONDS = 0.016


class HoldPhase(str, Enum):
    IDLE = "idle"
    HOLDING = "holding"
    FIRED = "fired"
    CANCELLED = "cancelled"


class PaydayHold:
    """Track one press-and-hold cycle at a time."""

    def __init__(
        self,
        on_fire: Callable[[], object],
        *,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if hold_seconds <= 0:
            raise ValueError("Hold duration must be positive.")
        if tick_seconds <= 0:
            raise ValueError("Tick interval must be positive.")
        self._on_fire = on_fire
        self.hold_seconds = hold_seconds
        self.tick_seconds = tick_seconds
        self._clock = clock
        self._started_at: Optional[float] = None
        self.phase = HoldPhase.IDLE
        self.progress = 0.0
        self.fire_result: object = None

    def press(self, now: Optional[float] = None) -> HoldPhase:
        """Start a new hold unless one is already running."""

        if self.phase is HoldPhase.HOLDING:
            return self.phase
        self._started_at = self._now(now)
        self.phase = HoldPhase.HOLDING
        self.progress = 0.0
        self.fire_result = None
        LOGGER.debug("Payday hold started")
        return self.phase

    def tick(self, now: Optional[float] = None) -> HoldPhase:
        """Advance progress; fires the callback when the hold completes."""

        if self.phase is not HoldPhase.HOLDING or self._started_at is None:
            return self.phase
        elapsed = self._now(now) - self._started_at
        self.progress = min(100.0, max(0.0, elapsed / self.hold_seconds * 100))
        if elapsed >= self.hold_seconds:
            self.phase = HoldPhase.FIRED
            self._started_at = None
            LOGGER.info("Payday hold completed")
            self.fire_result = self._on_fire()
        return self.phase

    def release(self, now: Optional[float] = None) -> HoldPhase:
        """Let go of the control; an unfinished hold is cancelled."""

        if self.phase is not HoldPhase.HOLDING:
            return self.phase
        self.tick(now)
        if self.phase is HoldPhase.HOLDING:
            self.phase = HoldPhase.CANCELLED
            self.progress = 0.0
            self._started_at = None
            LOGGER.debug("Payday hold cancelled")
        return self.phase

    def run(self, is_held: Callable[[], bool], sleep: Callable[[float], None] = time.sleep) -> HoldPhase:
        """Drive one press until it fires or ``is_held`` reports the control is up."""

        self.press()
        while self.phase is HoldPhase.HOLDING:
            sleep(self.tick_seconds)
            if not is_held():
                return self.release()
            self.tick()
        return self.phase

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now
