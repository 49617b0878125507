"""Build timer — measures one build cycle and reports its completion.

State is a single nullable start instant:

    idle  --reset()-->          armed   (no-op while already armed)
    armed --reset(clear=True)-> idle
    armed --report_done(n)-->   idle    (logs the summary)
    idle  --report_done(n)-->   idle    (no-op, nothing logged)

Rebuilds triggered by watchers finish almost instantly, and several
tools report per cycle; only a cycle that armed the timer gets a
summary.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class BuildTimer:
    """Tracks elapsed wall-clock time for a build cycle."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start: float | None = None

    @property
    def armed(self) -> bool:
        return self._start is not None

    @property
    def started_at(self) -> float | None:
        return self._start

    def reset(self, clear: bool = False) -> None:
        """Arm the timer unless it is already armed; ``clear`` disarms it."""
        if self._start is None:
            self._start = self._clock()
        if clear:
            self._start = None

    def report_done(self, n: int) -> str | None:
        """Log the completion summary for an armed timer and disarm it.

        Returns the logged message, or ``None`` when the timer was idle.
        """
        if self._start is None:
            return None
        elapsed = max(0.0, self._clock() - self._start)
        if n > 0:
            results = f"Built {n} module{'s' if n > 1 else ''}"
        else:
            results = "Done"
        message = f"{results} in {elapsed:.2f}s"
        logger.info(message)
        self._start = None
        return message
