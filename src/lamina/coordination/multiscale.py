"""
Multi-Scale Coordinator - sequences fast, medium and slow updates.

The laminar circuit runs three clocks at once:

- fast (every step): shunting activation and signal propagation
- medium (every ``chunking_interval`` fast steps): temporal chunking
- slow (every ``slow_interval`` fast steps): transmitter habituation

The coordinator owns the fast clock and two step counters. Each
``advance_fast_time_step()`` moves time forward by the fast scale's
typical step and bumps both counters; ``should_update_chunking()`` and
``should_update_slow_dynamics()`` report True once their counter reaches
its interval, and reset it.

    coordinator = MultiScaleCoordinator.standard()
    for pattern in stream:
        dt = coordinator.advance_fast_time_step()
        ...  # fast update
        if coordinator.should_update_chunking():
            ...  # medium update with coordinator.get_chunking_time_step()
        if coordinator.should_update_slow_dynamics():
            ...  # slow update with coordinator.get_slow_time_step()

Because ``slow_interval`` is a multiple of ``chunking_interval`` the
ratios compose exactly: slow/fast = (chunking/fast) * (slow/chunking).

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lamina.config import ValidatedConfig
from lamina.dynamics import TimeScale
from lamina.mixins import ResettableMixin

logger = logging.getLogger(__name__)


@dataclass
class CoordinatorConfig(ValidatedConfig):
    """Update intervals, in fast steps.

    Attributes:
        chunking_interval: Fast steps per chunking (medium) update
        slow_interval: Fast steps per slow-dynamics update
    """

    chunking_interval: int = 10
    slow_interval: int = 50

    _validation_rules = {
        "chunking_interval": ("positive_integer",),
        "slow_interval": ("positive_integer",),
    }

    def __post_init__(self) -> None:
        self.validate_config()

    def _validate_relations(self) -> List[str]:
        if self.slow_interval % self.chunking_interval != 0:
            return [
                f"slow_interval ({self.slow_interval}) must be a multiple of "
                f"chunking_interval ({self.chunking_interval})"
            ]
        return []

    @classmethod
    def standard(cls) -> CoordinatorConfig:
        return cls(chunking_interval=10, slow_interval=50)

    @classmethod
    def real_time(cls) -> CoordinatorConfig:
        """Shorter intervals for interactive use."""
        return cls(chunking_interval=5, slow_interval=25)


@dataclass(frozen=True)
class CoordinatorStatistics:
    """Snapshot of the coordinator's clocks and counts."""

    current_time: float
    fast_steps: int
    chunking_updates: int
    slow_updates: int
    chunking_to_fast_ratio: float
    slow_to_fast_ratio: float
    slow_to_chunking_ratio: float


class MultiScaleCoordinator(ResettableMixin):
    """Fast clock plus medium and slow update schedules.

    Args:
        config: Update intervals (default CoordinatorConfig.standard())
        fast: Scale of one fast step
        medium: Scale tag of chunking updates
        slow: Scale tag of slow-dynamics updates
    """

    def __init__(
        self,
        config: Optional[CoordinatorConfig] = None,
        fast: TimeScale = TimeScale.FAST,
        medium: TimeScale = TimeScale.MEDIUM,
        slow: TimeScale = TimeScale.SLOW,
    ):
        self.config = config or CoordinatorConfig.standard()
        self.fast_time_scale = fast
        self.medium_time_scale = medium
        self.slow_time_scale = slow
        self.reset_state()

    @classmethod
    def standard(cls) -> MultiScaleCoordinator:
        return cls(CoordinatorConfig.standard())

    @classmethod
    def real_time(cls) -> MultiScaleCoordinator:
        return cls(CoordinatorConfig.real_time())

    # =========================================================================
    # Clock
    # =========================================================================

    @property
    def fast_time_step(self) -> float:
        return self.fast_time_scale.typical_time_step

    @property
    def current_time(self) -> float:
        return self._fast_steps * self.fast_time_step

    def advance_fast_time_step(self) -> float:
        """Advance one fast step and return its duration in seconds."""
        self._fast_steps += 1
        self._chunking_counter += 1
        self._slow_counter += 1
        return self.fast_time_step

    def should_update_chunking(self) -> bool:
        if self._chunking_counter >= self.config.chunking_interval:
            self._chunking_counter = 0
            self._chunking_updates += 1
            return True
        return False

    def should_update_slow_dynamics(self) -> bool:
        if self._slow_counter >= self.config.slow_interval:
            self._slow_counter = 0
            self._slow_updates += 1
            return True
        return False

    def get_chunking_time_step(self) -> float:
        """Time covered by one chunking update, in seconds."""
        return self.config.chunking_interval * self.fast_time_step

    def get_slow_time_step(self) -> float:
        """Time covered by one slow update, in seconds."""
        return self.config.slow_interval * self.fast_time_step

    # =========================================================================
    # Ratios and statistics
    # =========================================================================

    @property
    def chunking_to_fast_ratio(self) -> float:
        return float(self.config.chunking_interval)

    @property
    def slow_to_fast_ratio(self) -> float:
        return float(self.config.slow_interval)

    @property
    def slow_to_chunking_ratio(self) -> float:
        return self.config.slow_interval / self.config.chunking_interval

    @property
    def fast_step_count(self) -> int:
        return self._fast_steps

    @property
    def chunking_update_count(self) -> int:
        return self._chunking_updates

    @property
    def slow_update_count(self) -> int:
        return self._slow_updates

    def get_statistics(self) -> CoordinatorStatistics:
        return CoordinatorStatistics(
            current_time=self.current_time,
            fast_steps=self._fast_steps,
            chunking_updates=self._chunking_updates,
            slow_updates=self._slow_updates,
            chunking_to_fast_ratio=self.chunking_to_fast_ratio,
            slow_to_fast_ratio=self.slow_to_fast_ratio,
            slow_to_chunking_ratio=self.slow_to_chunking_ratio,
        )

    def get_diagnostics(self) -> Dict[str, float]:
        stats = self.get_statistics()
        return {
            "current_time": stats.current_time,
            "fast_steps": stats.fast_steps,
            "chunking_updates": stats.chunking_updates,
            "slow_updates": stats.slow_updates,
        }

    def reset_state(self) -> None:
        """Zero the clock and all counters."""
        self._fast_steps = 0
        self._chunking_counter = 0
        self._slow_counter = 0
        self._chunking_updates = 0
        self._slow_updates = 0
        logger.debug("Coordinator reset")

    def __repr__(self) -> str:
        return (
            f"MultiScaleCoordinator(chunking_interval={self.config.chunking_interval}, "
            f"slow_interval={self.config.slow_interval}, time={self.current_time:.3f}s)"
        )


__all__ = [
    "CoordinatorConfig",
    "CoordinatorStatistics",
    "MultiScaleCoordinator",
]
