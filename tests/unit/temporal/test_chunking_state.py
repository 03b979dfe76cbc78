"""
Tests for the chunking state (history window, chunk registry, clock).
"""

import math

import pytest
import torch

from lamina.errors import InvalidArgumentError
from lamina.temporal import ChunkingState, TemporalChunk
from tests.utils.test_helpers import make_chunk_items, uniform_pattern


def _fill(state, count, start=0.0, spacing=0.1):
    for k in range(count):
        state.add_activation(uniform_pattern(3, 0.5), 0.5 + k, start + (k + 1) * spacing)


@pytest.mark.unit
class TestHistory:
    def test_fifo_eviction(self):
        state = ChunkingState(max_history_size=3)
        _fill(state, 5)
        assert state.history_size == 3
        assert [item.position for item in state.history] == [2, 3, 4]

    def test_add_returns_item_and_copies_pattern(self):
        state = ChunkingState()
        pattern = uniform_pattern(3, 0.5)
        item = state.add_activation(pattern, 0.87, 0.1)
        pattern.fill_(0.0)
        assert item.activation == pytest.approx(0.87)
        assert torch.equal(state.history[0].pattern, uniform_pattern(3, 0.5))

    def test_recent_oldest_first(self):
        state = ChunkingState()
        _fill(state, 4)
        assert [item.position for item in state.recent(2)] == [2, 3]
        assert state.recent(0) == []
        assert len(state.recent(10)) == 4

    def test_close_run_keeps_history(self):
        state = ChunkingState()
        _fill(state, 4)
        assert state.open_count == 4
        state.close_run()
        assert state.open_items() == []
        assert state.history_size == 4

        _fill(state, 2, start=1.0)
        assert [item.position for item in state.open_items()] == [4, 5]

    def test_open_run_limited_to_window(self):
        state = ChunkingState(max_history_size=3)
        _fill(state, 5)
        assert [item.position for item in state.open_items()] == [2, 3, 4]

    def test_clock_never_goes_back(self):
        state = ChunkingState()
        state.advance_time(1.0)
        with pytest.raises(InvalidArgumentError):
            state.advance_time(0.5)
        with pytest.raises(InvalidArgumentError):
            state.add_activation(uniform_pattern(3, 0.5), 0.5, 0.2)

    def test_invalid_capacity(self):
        with pytest.raises(InvalidArgumentError):
            ChunkingState(0)


@pytest.mark.unit
class TestChunkRegistry:
    def test_ids_increase(self):
        state = ChunkingState()
        assert state.next_chunk_id() == 0
        assert state.next_chunk_id() == 1

    def test_add_get_remove(self):
        state = ChunkingState()
        chunk = TemporalChunk(make_chunk_items(2), 0.0, state.next_chunk_id())
        state.add_chunk(chunk)
        assert state.get_chunk(0) is chunk
        assert state.total_chunks_formed == 1
        assert state.remove_chunk(0)
        assert not state.remove_chunk(0)
        assert state.get_chunk(0) is None

    def test_add_chunk_keeps_ids_unique(self):
        state = ChunkingState()
        state.add_chunk(TemporalChunk(make_chunk_items(2), 0.0, 9))
        assert state.next_chunk_id() == 10

    def test_decay_uses_elapsed_time(self):
        state = ChunkingState()
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        initial = chunk.strength
        state.add_chunk(chunk)

        state.advance_time(2.0)
        state.decay_chunks(0.1)
        state.decay_chunks(0.1)

        assert chunk.strength == pytest.approx(initial * math.exp(-0.2))

    def test_prune(self):
        state = ChunkingState()
        strong = TemporalChunk(make_chunk_items(2), 0.0, 0)
        weak = TemporalChunk(make_chunk_items(2), 0.0, 1)
        weak.decay(10.0, 10.0)
        state.add_chunk(strong)
        state.add_chunk(weak)

        assert state.prune_inactive_chunks(0.01) == 1
        assert [chunk.chunk_id for chunk in state.active_chunks] == [0]

    def test_clear(self):
        state = ChunkingState()
        _fill(state, 3)
        state.add_chunk(TemporalChunk(make_chunk_items(2), 0.0, state.next_chunk_id()))
        state.clear()
        assert state.history_size == 0
        assert state.active_chunks == []
        assert state.current_time == 0.0
        assert state.total_chunks_formed == 0
        assert state.next_chunk_id() == 0
