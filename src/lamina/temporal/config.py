"""
Temporal chunking configuration.

Defaults follow the LIST PARSE working-memory model: chunks of 2 to 7
items (Miller's 7 +/- 2), a history window of 12 items and slow chunk
decay.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from lamina.config import BaseConfig, ValidatedConfig


@dataclass
class ChunkingConfig(BaseConfig, ValidatedConfig):
    """Configuration for temporal chunk formation.

    Attributes:
        min_chunk_size: Fewest items a chunk may hold
        max_chunk_size: Most items a chunk may hold
        max_history_size: Capacity of the activation history (FIFO)
        chunk_formation_threshold: Minimum mean activation magnitude of the
            candidate items
        chunk_coherence_threshold: Minimum mean cosine similarity of
            consecutive candidate items
        chunk_decay_rate: Exponential decay rate of chunk strength (per second)
        activity_threshold: Activation magnitude below which an input is a
            pause and is not recorded
        prune_threshold: Chunks weaker than this are dropped
        context_weight: Default blend weight of the temporal context
    """

    min_chunk_size: int = 2
    max_chunk_size: int = 7
    max_history_size: int = 12
    chunk_formation_threshold: float = 0.5
    chunk_coherence_threshold: float = 0.6
    chunk_decay_rate: float = 0.01
    activity_threshold: float = 0.1
    prune_threshold: float = 0.01
    context_weight: float = 0.3

    _validation_rules = {
        "min_chunk_size": ("positive_integer",),
        "max_chunk_size": ("positive_integer",),
        "max_history_size": ("positive_integer",),
        "chunk_formation_threshold": ("non_negative", "finite"),
        "chunk_coherence_threshold": ("probability",),
        "chunk_decay_rate": ("non_negative", "finite"),
        "activity_threshold": ("non_negative", "finite"),
        "prune_threshold": ("non_negative", "finite"),
        "context_weight": ("probability",),
    }

    def __post_init__(self) -> None:
        self.validate_config()

    def _validate_relations(self) -> List[str]:
        errors = []
        if self.min_chunk_size > self.max_chunk_size:
            errors.append(
                f"min_chunk_size ({self.min_chunk_size}) must not exceed "
                f"max_chunk_size ({self.max_chunk_size})"
            )
        if self.min_chunk_size > self.max_history_size:
            errors.append(
                f"min_chunk_size ({self.min_chunk_size}) must not exceed "
                f"max_history_size ({self.max_history_size})"
            )
        return errors

    @classmethod
    def paper_defaults(cls) -> ChunkingConfig:
        """Parameters of the LIST PARSE model (Grossberg & Pearson 2008)."""
        return cls()

    @classmethod
    def fast_chunking(cls) -> ChunkingConfig:
        """Lower thresholds and faster decay for quick segmentation."""
        return cls(
            min_chunk_size=2,
            max_chunk_size=5,
            max_history_size=8,
            chunk_formation_threshold=0.3,
            chunk_coherence_threshold=0.4,
            chunk_decay_rate=0.05,
            activity_threshold=0.05,
        )


__all__ = ["ChunkingConfig"]
