"""
Temporal Chunking Layer - segments a pattern stream into coherent chunks.

Wraps any layer and watches its activations over time. Sequential
activations that are strong and similar to each other are grouped into
TemporalChunks; the active chunks feed back as a temporal context that is
blended into the layer's output.

Processing cycle (one call to ``process_with_chunking``):
==========================================================
1. Advance the clock by dt, decay chunk strengths, prune weak chunks
2. Pass the input through the base layer
3. Record the activation if its magnitude reaches ``activity_threshold``;
   a weaker activation is a pause that closes the open run
4. Form a chunk when the conditions hold and either the run has reached
   ``max_chunk_size`` items or a pause arrived
5. Return (1 - w) * activation + w * temporal_context

Formation conditions (all must hold for the candidate items, the most
recent max_chunk_size snapshots of the open run):
- at least ``min_chunk_size`` items
- mean activation magnitude >= ``chunk_formation_threshold``
- mean cosine similarity of consecutive items >= ``chunk_coherence_threshold``

The history itself stays a FIFO window: chunked snapshots remain in it
until evicted, but a closed run never joins a later chunk.

Phases: IDLE (no open run) -> ACCUMULATING -> CHUNK_CANDIDATE (conditions
met) -> FORM_CHUNK (a chunk was just formed) -> ACCUMULATING.

References:
- Grossberg & Pearson (2008): LIST PARSE
- Kazerounian & Grossberg (2014): Real-time learning of predictive
  recognition categories that chunk sequences of items stored in working memory
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import torch
import torch.nn as nn

from lamina.errors import (
    ComponentError,
    DimensionMismatchError,
    InvalidArgumentError,
    validate_time_step,
    validate_unit_interval,
)
from lamina.mixins import DiagnosticsMixin, ResettableMixin
from lamina.temporal.chunk import ChunkItem, TemporalChunk, sequence_coherence
from lamina.temporal.chunking_state import ChunkingState
from lamina.temporal.config import ChunkingConfig
from lamina.temporal.layer import Layer, LayerState
from lamina.utils import PatternLike, as_pattern, pattern_magnitude

logger = logging.getLogger(__name__)


class ChunkingPhase(Enum):
    """Where the layer is in the chunk formation cycle."""

    IDLE = "idle"
    ACCUMULATING = "accumulating"
    CHUNK_CANDIDATE = "chunk_candidate"
    FORM_CHUNK = "form_chunk"


@dataclass(frozen=True)
class ChunkingStatistics:
    """Summary of a chunking layer's activity."""

    total_chunks: int
    active_chunks: int
    average_chunk_size: float
    average_coherence: float
    history_size: int


class TemporalChunkingLayer(ResettableMixin, DiagnosticsMixin, nn.Module):
    """Adds temporal chunking and context blending to a base layer.

    Args:
        base_layer: The wrapped layer
        config: Chunking parameters (default ChunkingConfig.paper_defaults())
    """

    def __init__(self, base_layer: Layer, config: Optional[ChunkingConfig] = None):
        super().__init__()
        if not callable(getattr(base_layer, "process_bottom_up", None)):
            raise ComponentError(
                "TemporalChunkingLayer",
                f"{type(base_layer).__name__} has no process_bottom_up() method",
            )
        self.base_layer = base_layer
        self.config = config or ChunkingConfig.paper_defaults()
        self.state = ChunkingState(self.config.max_history_size)
        self.dtype = self.config.get_torch_dtype()
        self.device = self.config.get_torch_device()
        self.phase = ChunkingPhase.IDLE

        self._context_weight = self.config.context_weight
        self._chunking_enabled = True
        self._pending = 0
        self._last_activation: Optional[torch.Tensor] = None

    @property
    def size(self) -> int:
        return self.base_layer.size

    @property
    def activation(self) -> torch.Tensor:
        if self._last_activation is None:
            return self._zeros()
        return self._last_activation.clone()

    def _zeros(self) -> torch.Tensor:
        return torch.zeros(self.size, dtype=self.dtype, device=self.device)

    # =========================================================================
    # Settings
    # =========================================================================

    @property
    def context_weight(self) -> float:
        return self._context_weight

    def set_context_weight(self, weight: float) -> None:
        """Set the blend weight of the temporal context.

        Raises:
            InvalidArgumentError: If weight is outside [0, 1]
        """
        self._context_weight = validate_unit_interval(weight, "context_weight")

    @property
    def chunking_enabled(self) -> bool:
        return self._chunking_enabled

    def set_chunking_enabled(self, enabled: bool) -> None:
        self._chunking_enabled = bool(enabled)

    # =========================================================================
    # Processing
    # =========================================================================

    def process_bottom_up(self, input_pattern: PatternLike) -> torch.Tensor:
        """Base layer processing without touching the chunking state.

        The activation is cast to the config's dtype and device, so history
        snapshots, chunks and the temporal context all share them.
        """
        activation = self.base_layer.process_bottom_up(as_pattern(input_pattern, name="input"))
        activation = activation.to(dtype=self.dtype, device=self.device)
        self._last_activation = activation
        return activation

    def process_with_chunking(self, input_pattern: PatternLike, dt: float) -> torch.Tensor:
        """Process one input, update history and chunks, return the blended output.

        Raises:
            InvalidArgumentError: If input is invalid or dt is not positive
            DimensionMismatchError: If the input size differs from the layer size
        """
        dt = validate_time_step(dt)
        input_pattern = as_pattern(input_pattern, name="input")
        if input_pattern.shape[0] != self.size:
            raise DimensionMismatchError(
                f"input has {input_pattern.shape[0]} elements, layer has {self.size}"
            )

        if not self._chunking_enabled:
            return self.process_bottom_up(input_pattern)

        now = self.state.current_time + dt
        self.state.advance_time(now)
        self.state.decay_chunks(self.config.chunk_decay_rate)
        self.state.prune_inactive_chunks(self.config.prune_threshold)

        activation = self.process_bottom_up(input_pattern)
        magnitude = pattern_magnitude(activation)

        formed: Optional[TemporalChunk] = None
        if magnitude >= self.config.activity_threshold:
            self.state.add_activation(activation, magnitude, now)
            self._pending += 1
            if self._pending >= self.config.max_chunk_size:
                formed = self.form_chunk()
        else:
            if self._pending > 0:
                formed = self.form_chunk()
            self.state.close_run()
            self._pending = 0

        if formed is None:
            self._update_phase()
        return self.get_layer_state().combine(self._context_weight)

    def _update_phase(self) -> None:
        if self.state.open_count == 0:
            self.phase = ChunkingPhase.IDLE
        elif self.should_form_chunk():
            self.phase = ChunkingPhase.CHUNK_CANDIDATE
        else:
            self.phase = ChunkingPhase.ACCUMULATING

    # =========================================================================
    # Chunk formation
    # =========================================================================

    def _candidates(self) -> List[ChunkItem]:
        return self.state.open_items()[-self.config.max_chunk_size:]

    def should_form_chunk(self) -> bool:
        """Whether the open run satisfies size, activation and coherence."""
        candidates = self._candidates()
        if len(candidates) < self.config.min_chunk_size:
            return False
        mean_activation = sum(item.activation for item in candidates) / len(candidates)
        if mean_activation < self.config.chunk_formation_threshold:
            return False
        return sequence_coherence(candidates) >= self.config.chunk_coherence_threshold

    def form_chunk(self) -> Optional[TemporalChunk]:
        """Group the candidate items into a new active chunk and close the run.

        The items stay in the history. Returns None, leaving the run open,
        when the formation conditions do not hold.
        """
        if not self.should_form_chunk():
            return None

        items = self._candidates()
        self.state.close_run()
        chunk = TemporalChunk(items, self.state.current_time, self.state.next_chunk_id())
        self.state.add_chunk(chunk)
        self._pending = 0
        self.phase = ChunkingPhase.FORM_CHUNK
        logger.debug(
            "Formed chunk %d: %d items, coherence %.3f",
            chunk.chunk_id, chunk.size, chunk.coherence,
        )
        return chunk

    def merge_chunks(self, first_id: int, second_id: int) -> TemporalChunk:
        """Replace two active chunks by their merge under a fresh id.

        Raises:
            InvalidArgumentError: If either id is not an active chunk
        """
        first = self.state.get_chunk(first_id)
        second = self.state.get_chunk(second_id)
        if first is None or second is None or first_id == second_id:
            raise InvalidArgumentError(
                f"Cannot merge chunks {first_id} and {second_id}: "
                "both must be distinct active chunks"
            )
        merged = first.merge(second, new_id=self.state.next_chunk_id())
        self.state.remove_chunk(first_id)
        self.state.remove_chunk(second_id)
        self.state.add_chunk(merged)
        logger.debug("Merged chunks %d and %d into %d", first_id, second_id, merged.chunk_id)
        return merged

    # =========================================================================
    # Queries
    # =========================================================================

    def get_temporal_chunks(self) -> List[TemporalChunk]:
        return self.state.active_chunks

    def get_chunking_state(self) -> ChunkingState:
        return self.state

    def get_temporal_context(self) -> torch.Tensor:
        """Strength-weighted mean of the active chunks' representative patterns.

        A zero vector of layer size when there are no chunks or all
        strengths are zero.
        """
        chunks = self.state.active_chunks
        context = self._zeros()
        if not chunks:
            return context
        total = sum(chunk.strength for chunk in chunks)
        if total == 0.0:
            return context
        for chunk in chunks:
            context = context + chunk.strength * chunk.representative_pattern.to(
                dtype=self.dtype, device=self.device
            )
        return context / total

    def get_layer_state(self) -> LayerState:
        """Current activation with the temporal context (None if no chunks)."""
        context = self.get_temporal_context() if self.state.active_chunks else None
        return LayerState(self.activation, context, self.state.current_time)

    def get_chunking_statistics(self) -> ChunkingStatistics:
        chunks = self.state.active_chunks
        if chunks:
            average_size = sum(chunk.size for chunk in chunks) / len(chunks)
            average_coherence = sum(chunk.coherence for chunk in chunks) / len(chunks)
        else:
            average_size = 0.0
            average_coherence = 0.0
        return ChunkingStatistics(
            total_chunks=self.state.total_chunks_formed,
            active_chunks=len(chunks),
            average_chunk_size=average_size,
            average_coherence=average_coherence,
            history_size=self.state.history_size,
        )

    # =========================================================================
    # Reset and diagnostics
    # =========================================================================

    def reset_chunking(self) -> None:
        """Clear history, chunks and clock; the base layer is untouched."""
        self.state.clear()
        self._pending = 0
        self.phase = ChunkingPhase.IDLE
        logger.debug("Chunking state reset")

    def reset_state(self) -> None:
        self.reset_chunking()
        self.base_layer.reset_state()
        self._last_activation = None

    def get_diagnostics(self) -> Dict[str, float]:
        stats = self.get_chunking_statistics()
        diagnostics: Dict[str, float] = {
            "total_chunks": stats.total_chunks,
            "active_chunks": stats.active_chunks,
            "average_chunk_size": stats.average_chunk_size,
            "average_coherence": stats.average_coherence,
            "history_size": stats.history_size,
            "context_weight": self._context_weight,
        }
        diagnostics.update(self.activity_diagnostics(self._last_activation, prefix="activation"))
        diagnostics.update(self.trace_diagnostics(self.get_temporal_context(), prefix="context"))
        return diagnostics


__all__ = [
    "ChunkingPhase",
    "ChunkingStatistics",
    "TemporalChunkingLayer",
]
