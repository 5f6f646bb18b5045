"""
Wall-clock budget shared by the solving strategies.
"""

import time
from typing import Callable, Optional


DEFAULT_TIME_LIMIT = 600.0  # seconds; 10 minutes


class TimeBudget:
    """
    Fixed wall-clock budget started at construction time.

    Strategies poll ``expired()`` cooperatively (once per greedy order,
    once per generation) and stop early when it returns True.
    """

    def __init__(self,
                 limit_seconds: float = DEFAULT_TIME_LIMIT,
                 safety_margin: float = 0.0,
                 clock: Optional[Callable[[], float]] = None):
        if limit_seconds < 0:
            raise ValueError("limit_seconds must be non-negative")
        self.limit_seconds = float(limit_seconds)
        self.safety_margin = float(safety_margin)
        self._clock = clock or time.monotonic
        self._start = self._clock()

    def elapsed(self) -> float:
        """Seconds since the budget was started"""
        return self._clock() - self._start

    def remaining(self) -> float:
        """Seconds left, never negative"""
        return max(self.limit_seconds - self.elapsed(), 0.0)

    def expired(self, margin: Optional[float] = None) -> bool:
        """True once the remaining time drops to the safety margin"""
        if margin is None:
            margin = self.safety_margin
        return self.remaining() <= margin

    def __repr__(self) -> str:
        return f"TimeBudget(limit={self.limit_seconds:.1f}s, remaining={self.remaining():.1f}s)"
