from __future__ import annotations

import logging
from typing import Optional


logger = logging.getLogger(__name__)

BASE_PERIOD_MS = 1000
PERIOD_STEP_MS = 100
MIN_PERIOD_MS = 100


def descent_period_ms(
    level: int,
    base_ms: int = BASE_PERIOD_MS,
    step_ms: int = PERIOD_STEP_MS,
    min_ms: int = MIN_PERIOD_MS,
) -> int:
    """Automatic descent interval for ``level``: 1000ms at level 1, 100ms less per level, floor 100ms."""
    return max(min_ms, base_ms - (level - 1) * step_ms)


class GameClock:
    """Gravity timer driven by the caller.

    The clock never sleeps or schedules callbacks on its own. The owner feeds
    it elapsed time through ``advance`` and receives the number of descent
    ticks that fell due. A stopped clock accumulates nothing.
    """

    def __init__(self) -> None:
        self.period_ms: Optional[int] = None
        self._elapsed_ms = 0.0

    @property
    def running(self) -> bool:
        return self.period_ms is not None

    def start(self, period_ms: int) -> None:
        if period_ms <= 0:
            raise ValueError("period_ms must be positive")
        if self.period_ms == period_ms:
            return
        logger.debug("Descent clock set to %d ms", period_ms)
        self.period_ms = int(period_ms)
        self._elapsed_ms = 0.0

    def stop(self) -> None:
        if self.period_ms is not None:
            logger.debug("Descent clock stopped")
        self.period_ms = None
        self._elapsed_ms = 0.0

    def advance(self, elapsed_ms: float) -> int:
        if self.period_ms is None or elapsed_ms <= 0:
            return 0
        self._elapsed_ms += elapsed_ms
        due = int(self._elapsed_ms // self.period_ms)
        self._elapsed_ms -= due * self.period_ms
        return due
