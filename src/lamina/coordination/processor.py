"""
Multi-scale layer processor - one layer and its input pathway on three clocks.

Each input is one fast step:

1. propagate the input through the temporal-dynamics pathway (shunting
   activation and transmitter gating)
2. when a chunking update is due, run the chunking layer on the pathway
   output with the time accumulated since the previous chunking update;
   otherwise only the base layer runs and the current temporal context is
   blended in
3. when a slow update is due, evolve the pathway's transmitter gates by
   the slow time step
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import torch

from lamina.coordination.multiscale import MultiScaleCoordinator
from lamina.errors import InvalidArgumentError
from lamina.mixins import ResettableMixin
from lamina.pathways import PathwayConfig, TemporalDynamicsPathway
from lamina.temporal import LayerState, TemporalChunkingLayer
from lamina.utils import PatternLike


@dataclass(frozen=True)
class ProcessorStatistics:
    """Counts of updates actually performed, and the resulting ratios."""

    total_fast_steps: int
    total_chunking_updates: int
    total_slow_updates: int
    actual_chunking_to_fast_ratio: float
    actual_slow_to_fast_ratio: float
    current_time: float


class MultiScaleLayerProcessor(ResettableMixin):
    """Drives a chunking layer and its pathway under a multi-scale schedule.

    Args:
        layer: The chunking layer receiving the pathway output
        pathway: The temporal-dynamics pathway feeding the layer
        coordinator: Update schedule (default MultiScaleCoordinator.standard())
    """

    def __init__(
        self,
        layer: TemporalChunkingLayer,
        pathway: TemporalDynamicsPathway,
        coordinator: Optional[MultiScaleCoordinator] = None,
    ):
        self.layer = layer
        self.pathway = pathway
        self.coordinator = coordinator or MultiScaleCoordinator.standard()
        self._medium_elapsed = 0.0
        self.fast_step_count = 0
        self.chunking_update_count = 0
        self.slow_update_count = 0
        self.last_output: Optional[torch.Tensor] = None

    @classmethod
    def standard(
        cls, layer: TemporalChunkingLayer, pathway: TemporalDynamicsPathway
    ) -> MultiScaleLayerProcessor:
        return cls(layer, pathway, MultiScaleCoordinator.standard())

    @classmethod
    def real_time(
        cls, layer: TemporalChunkingLayer, pathway: TemporalDynamicsPathway
    ) -> MultiScaleLayerProcessor:
        return cls(layer, pathway, MultiScaleCoordinator.real_time())

    def process(
        self,
        input_pattern: PatternLike,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        """Run one fast step (plus any due medium and slow updates)."""
        dt = self.coordinator.advance_fast_time_step()
        self.fast_step_count += 1
        self._medium_elapsed += dt

        signal = self.pathway.propagate(input_pattern, params)

        if self.coordinator.should_update_chunking():
            output = self.layer.process_with_chunking(signal, self._medium_elapsed)
            self._medium_elapsed = 0.0
            self.chunking_update_count += 1
        else:
            self.layer.process_bottom_up(signal)
            output = self.layer.get_layer_state().combine(self.layer.context_weight)

        if self.coordinator.should_update_slow_dynamics():
            self.pathway.evolve_transmitters(self.coordinator.get_slow_time_step())
            self.slow_update_count += 1

        self.last_output = output
        return output

    def process_sequence(
        self,
        patterns: Iterable[PatternLike],
        params: Optional[PathwayConfig] = None,
    ) -> LayerState:
        """Process every pattern in order and return the final layer state.

        Raises:
            InvalidArgumentError: If ``patterns`` is empty
        """
        processed = 0
        for pattern in patterns:
            self.process(pattern, params)
            processed += 1
        if processed == 0:
            raise InvalidArgumentError("process_sequence() needs at least one pattern")
        return self.layer.get_layer_state()

    def get_statistics(self) -> ProcessorStatistics:
        chunking_ratio = (
            self.fast_step_count / self.chunking_update_count if self.chunking_update_count else 0.0
        )
        slow_ratio = (
            self.fast_step_count / self.slow_update_count if self.slow_update_count else 0.0
        )
        return ProcessorStatistics(
            total_fast_steps=self.fast_step_count,
            total_chunking_updates=self.chunking_update_count,
            total_slow_updates=self.slow_update_count,
            actual_chunking_to_fast_ratio=chunking_ratio,
            actual_slow_to_fast_ratio=slow_ratio,
            current_time=self.coordinator.current_time,
        )

    def get_diagnostics(self) -> Dict[str, float]:
        diagnostics: Dict[str, float] = {}
        for name, value in self.coordinator.get_diagnostics().items():
            diagnostics[f"coordinator_{name}"] = value
        for name, value in self.pathway.get_diagnostics().items():
            diagnostics[f"pathway_{name}"] = value
        for name, value in self.layer.get_diagnostics().items():
            diagnostics[f"layer_{name}"] = value
        return diagnostics

    def reset_state(self) -> None:
        """Reset the schedule, the layer's chunking and the pathway dynamics."""
        self.coordinator.reset_state()
        self.layer.reset_chunking()
        self.pathway.reset_dynamics()
        self._medium_elapsed = 0.0
        self.fast_step_count = 0
        self.chunking_update_count = 0
        self.slow_update_count = 0
        self.last_output = None


__all__ = [
    "MultiScaleLayerProcessor",
    "ProcessorStatistics",
]
