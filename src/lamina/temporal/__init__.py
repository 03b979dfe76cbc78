"""
Temporal chunking: activation history, chunk formation and temporal context.
"""

from __future__ import annotations

from lamina.temporal.chunk import ChunkItem, ChunkType, TemporalChunk, sequence_coherence
from lamina.temporal.chunking_layer import (
    ChunkingPhase,
    ChunkingStatistics,
    TemporalChunkingLayer,
)
from lamina.temporal.chunking_state import ChunkingState
from lamina.temporal.config import ChunkingConfig
from lamina.temporal.layer import ActivationLayer, Layer, LayerState

__all__ = [
    "ActivationLayer",
    "ChunkItem",
    "ChunkType",
    "ChunkingConfig",
    "ChunkingPhase",
    "ChunkingState",
    "ChunkingStatistics",
    "Layer",
    "LayerState",
    "TemporalChunk",
    "TemporalChunkingLayer",
    "sequence_coherence",
]
