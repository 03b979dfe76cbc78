"""
Multi-scale coordination of fast, medium and slow circuit updates.
"""

from __future__ import annotations

from lamina.coordination.multiscale import (
    CoordinatorConfig,
    CoordinatorStatistics,
    MultiScaleCoordinator,
)
from lamina.coordination.processor import MultiScaleLayerProcessor, ProcessorStatistics

__all__ = [
    "CoordinatorConfig",
    "CoordinatorStatistics",
    "MultiScaleCoordinator",
    "MultiScaleLayerProcessor",
    "ProcessorStatistics",
]
