"""
Chunking state: bounded activation history plus the active chunks.

The history is a FIFO window of ChunkItem snapshots; once it holds
``max_history_size`` items, each new snapshot evicts the oldest one.
Forming a chunk closes the open run instead of removing its snapshots,
so the window stays full while chunks form.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional, Tuple

import torch

from lamina.errors import InvalidArgumentError
from lamina.temporal.chunk import ChunkItem, TemporalChunk

logger = logging.getLogger(__name__)


class ChunkingState:
    """History, active chunks, id counter and clock of one chunking layer.

    Args:
        max_history_size: Capacity of the activation history
    """

    def __init__(self, max_history_size: int = 12):
        if max_history_size <= 0:
            raise InvalidArgumentError(f"max_history_size={max_history_size} must be positive")
        self.max_history_size = max_history_size
        self._history: Deque[ChunkItem] = deque(maxlen=max_history_size)
        self._chunks: List[TemporalChunk] = []
        self._next_id = 0
        self._position = 0
        self._open_from = 0
        self._current_time = 0.0
        self._last_decay_time = 0.0
        self.total_chunks_formed = 0

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    @property
    def current_time(self) -> float:
        return self._current_time

    def advance_time(self, time: float) -> None:
        """Move the clock forward to ``time`` (never backwards)."""
        if time < self._current_time:
            raise InvalidArgumentError(
                f"time={time} is before current time {self._current_time}"
            )
        self._current_time = float(time)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def add_activation(self, pattern: torch.Tensor, activation: float, time: float) -> ChunkItem:
        """Append a snapshot at ``time``, evicting the oldest when full."""
        self.advance_time(time)
        item = ChunkItem(pattern.detach().clone(), float(activation), float(time), self._position)
        self._position += 1
        self._history.append(item)
        return item

    @property
    def history(self) -> Tuple[ChunkItem, ...]:
        return tuple(self._history)

    @property
    def history_size(self) -> int:
        return len(self._history)

    def recent(self, n: int) -> List[ChunkItem]:
        """The ``n`` most recent snapshots, oldest first."""
        if n <= 0:
            return []
        return list(self._history)[-n:]

    # -------------------------------------------------------------------------
    # Open run
    # -------------------------------------------------------------------------

    def open_items(self) -> List[ChunkItem]:
        """Snapshots recorded since the last closed run, oldest first.

        Closing a run never removes snapshots from the history; it only
        stops them from joining a later chunk.
        """
        return [item for item in self._history if item.position >= self._open_from]

    @property
    def open_count(self) -> int:
        return len(self.open_items())

    def close_run(self) -> None:
        """Mark every snapshot recorded so far as closed."""
        self._open_from = self._position

    # -------------------------------------------------------------------------
    # Chunks
    # -------------------------------------------------------------------------

    def next_chunk_id(self) -> int:
        chunk_id = self._next_id
        self._next_id += 1
        return chunk_id

    def add_chunk(self, chunk: TemporalChunk) -> None:
        self._chunks.append(chunk)
        self.total_chunks_formed += 1
        self._next_id = max(self._next_id, chunk.chunk_id + 1)

    def get_chunk(self, chunk_id: int) -> Optional[TemporalChunk]:
        for chunk in self._chunks:
            if chunk.chunk_id == chunk_id:
                return chunk
        return None

    def remove_chunk(self, chunk_id: int) -> bool:
        chunk = self.get_chunk(chunk_id)
        if chunk is None:
            return False
        self._chunks.remove(chunk)
        return True

    @property
    def active_chunks(self) -> List[TemporalChunk]:
        return list(self._chunks)

    def decay_chunks(self, decay_rate: float) -> None:
        """Decay every chunk by the time elapsed since the previous decay."""
        elapsed = self._current_time - self._last_decay_time
        if elapsed > 0:
            for chunk in self._chunks:
                chunk.decay(decay_rate, elapsed)
        self._last_decay_time = self._current_time

    def prune_inactive_chunks(self, threshold: float) -> int:
        """Drop chunks weaker than ``threshold``; returns how many were dropped."""
        before = len(self._chunks)
        self._chunks = [chunk for chunk in self._chunks if chunk.is_active(threshold)]
        pruned = before - len(self._chunks)
        if pruned:
            logger.debug("Pruned %d chunk(s) below strength %.4f", pruned, threshold)
        return pruned

    def clear(self) -> None:
        """Forget history, chunks, counters and time."""
        self._history.clear()
        self._chunks.clear()
        self._next_id = 0
        self._position = 0
        self._open_from = 0
        self._current_time = 0.0
        self._last_decay_time = 0.0
        self.total_chunks_formed = 0

    def __repr__(self) -> str:
        return (
            f"ChunkingState(history={self.history_size}/{self.max_history_size}, "
            f"chunks={len(self._chunks)}, time={self._current_time:.4f})"
        )


__all__ = ["ChunkingState"]
