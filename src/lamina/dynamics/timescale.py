"""
Time scales of the laminar circuit dynamics.

The circuit couples processes that run at very different speeds:

- FAST (10-100 ms): shunting activation dynamics, lateral competition
- MEDIUM (100 ms-1 s): attention shifts, temporal chunk formation
- SLOW (500 ms-5 s): habituative transmitter depletion and recovery
- VERY_SLOW (>= 5 s): consolidation, template learning

Fast variables settle long before slow ones move, so a slow variable can
be treated as a fixed gain while the fast equations equilibrate.

References:
- Grossberg (1980): How does a brain build a cognitive code?
- Kazerounian & Grossberg (2014): Real-time learning of predictive
  recognition categories that chunk sequences of items stored in working
  memory, Section 3.2
"""

from __future__ import annotations

import math
from enum import Enum

from lamina.constants.time import SECONDS_PER_MS


class TimeScale(Enum):
    """Characteristic time scale of a dynamical process.

    Each member carries (min_ms, max_ms, typical_ms). VERY_SLOW has no
    upper bound (max_ms is infinite).
    """

    FAST = (10.0, 100.0, 50.0)
    MEDIUM = (100.0, 1000.0, 500.0)
    SLOW = (500.0, 5000.0, 2500.0)
    VERY_SLOW = (5000.0, math.inf, 10000.0)

    def __init__(self, min_ms: float, max_ms: float, typical_ms: float):
        self.min_ms = min_ms
        self.max_ms = max_ms
        self.typical_ms = typical_ms

    @property
    def typical_time_step(self) -> float:
        """Typical duration in seconds (the integration step for this scale)."""
        return self.typical_ms * SECONDS_PER_MS

    def contains(self, duration_ms: float) -> bool:
        """Whether ``duration_ms`` falls inside this scale's range."""
        return self.min_ms <= duration_ms <= self.max_ms

    def separation_factor(self, other: TimeScale) -> float:
        """Ratio of the slower to the faster typical duration (always >= 1)."""
        slower = max(self.typical_ms, other.typical_ms)
        faster = min(self.typical_ms, other.typical_ms)
        return slower / faster

    def is_slower_than(self, other: TimeScale) -> bool:
        return self.typical_ms > other.typical_ms


__all__ = ["TimeScale"]
