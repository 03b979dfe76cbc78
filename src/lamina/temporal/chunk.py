"""
Temporal chunks - coherent runs of sequential activations.

A chunk groups consecutive activation snapshots into one higher-level
unit (Miller's "chunk"). Its membership is fixed at formation; only its
strength changes afterwards, decaying exponentially:

    strength <- strength * exp(-decay_rate * dt)

Derived quantities:
- strength: mean item activation at formation
- coherence: mean cosine similarity of consecutive items (1.0 for a single
  item, negative similarities count as 0)
- representative pattern: activation-weighted mean of the item patterns
- type: SMALL (1-3 items), MEDIUM (4-5), LARGE (6-7), SUPER (8+)

References:
- Miller (1956): The magical number seven, plus or minus two
- Grossberg & Pearson (2008): Laminar cortical dynamics of cognitive and
  motor working memory, sequence learning and performance (LIST PARSE)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import torch

from lamina.constants import TIMESTAMP_TOLERANCE
from lamina.errors import InvalidArgumentError, validate_pattern
from lamina.utils import cosine_similarity_safe


@dataclass(frozen=True, eq=False)
class ChunkItem:
    """One activation snapshot inside a chunk or the history.

    Attributes:
        pattern: Activation pattern
        activation: Scalar activation strength (pattern magnitude)
        timestamp: Simulation time in seconds
        position: Sequence position of the snapshot
    """

    pattern: torch.Tensor
    activation: float
    timestamp: float
    position: int

    def __post_init__(self) -> None:
        validate_pattern(self.pattern, "pattern")

    @property
    def dimension(self) -> int:
        return int(self.pattern.shape[0])


def sequence_coherence(items: Sequence[ChunkItem]) -> float:
    """Mean cosine similarity of consecutive items (1.0 for fewer than two)."""
    if len(items) < 2:
        return 1.0
    similarities = [
        max(0.0, cosine_similarity_safe(a.pattern, b.pattern))
        for a, b in zip(items, items[1:])
    ]
    return sum(similarities) / len(similarities)


class ChunkType(Enum):
    """Size class of a chunk."""

    SMALL = (1, 3)
    MEDIUM = (4, 5)
    LARGE = (6, 7)
    SUPER = (8, 12)

    def __init__(self, min_size: int, max_size: int):
        self.min_size = min_size
        self.max_size = max_size

    @classmethod
    def from_size(cls, size: int) -> ChunkType:
        if size <= 3:
            return cls.SMALL
        if size <= 5:
            return cls.MEDIUM
        if size <= 7:
            return cls.LARGE
        return cls.SUPER


class TemporalChunk:
    """An immutable group of chunk items with a decaying strength.

    Args:
        items: Member snapshots (at least one, all of one dimension)
        formation_time: Simulation time at which the chunk formed
        chunk_id: Identifier, unique within one chunking state
    """

    def __init__(self, items: Sequence[ChunkItem], formation_time: float, chunk_id: int):
        if not items:
            raise InvalidArgumentError("A chunk needs at least one item")
        dimension = items[0].dimension
        if any(item.dimension != dimension for item in items):
            raise InvalidArgumentError("All chunk items must share one dimension")

        self._items: Tuple[ChunkItem, ...] = tuple(items)
        self.formation_time = float(formation_time)
        self.chunk_id = chunk_id
        self._strength = sum(item.activation for item in self._items) / len(self._items)
        self._coherence = sequence_coherence(self._items)
        self._representative = self._compute_representative()

    def _compute_representative(self) -> torch.Tensor:
        patterns = torch.stack([item.pattern for item in self._items])
        weights = torch.tensor(
            [item.activation for item in self._items],
            dtype=patterns.dtype,
            device=patterns.device,
        )
        total = weights.sum().item()
        if total == 0.0:
            return torch.zeros_like(patterns[0])
        return (weights.unsqueeze(1) * patterns).sum(dim=0) / total

    @property
    def items(self) -> Tuple[ChunkItem, ...]:
        return self._items

    @property
    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def dimension(self) -> int:
        return self._items[0].dimension

    @property
    def strength(self) -> float:
        return self._strength

    @property
    def coherence(self) -> float:
        return self._coherence

    @property
    def chunk_type(self) -> ChunkType:
        return ChunkType.from_size(self.size)

    @property
    def representative_pattern(self) -> torch.Tensor:
        """Activation-weighted mean of the item patterns (zeros if all weights are 0)."""
        return self._representative.clone()

    @property
    def start_time(self) -> float:
        return min(item.timestamp for item in self._items)

    @property
    def end_time(self) -> float:
        return max(item.timestamp for item in self._items)

    @property
    def temporal_span(self) -> float:
        return self.end_time - self.start_time

    def decay(self, decay_rate: float, dt: float) -> float:
        """Decay strength by exp(-decay_rate * dt) and return the new strength."""
        if decay_rate < 0 or dt < 0:
            raise InvalidArgumentError(
                f"decay_rate={decay_rate} and dt={dt} must be non-negative"
            )
        self._strength *= math.exp(-decay_rate * dt)
        return self._strength

    def is_active(self, threshold: float) -> bool:
        return self._strength >= threshold

    def merge(self, other: TemporalChunk, new_id: Optional[int] = None) -> TemporalChunk:
        """Combine two chunks into a new one.

        Items of ``other`` whose timestamp is within TIMESTAMP_TOLERANCE of an
        item already present are dropped; the result is sorted by time and
        formed at the earlier of the two formation times.
        """
        if other.dimension != self.dimension:
            raise InvalidArgumentError(
                f"Cannot merge chunks of dimension {self.dimension} and {other.dimension}"
            )
        merged: List[ChunkItem] = list(self._items)
        for item in other.items:
            duplicate = any(
                abs(item.timestamp - kept.timestamp) < TIMESTAMP_TOLERANCE for kept in merged
            )
            if not duplicate:
                merged.append(item)
        merged.sort(key=lambda item: item.timestamp)

        return TemporalChunk(
            merged,
            formation_time=min(self.formation_time, other.formation_time),
            chunk_id=self.chunk_id if new_id is None else new_id,
        )

    def __repr__(self) -> str:
        return (
            f"TemporalChunk(id={self.chunk_id}, size={self.size}, "
            f"type={self.chunk_type.name}, strength={self._strength:.4f}, "
            f"coherence={self._coherence:.4f})"
        )


__all__ = [
    "ChunkItem",
    "ChunkType",
    "TemporalChunk",
    "sequence_coherence",
]
