"""
Tests for temporal chunks and chunk items.

Test Coverage:
- Strength, coherence and representative pattern at formation
- Exponential strength decay
- Size classes
- Merging with timestamp de-duplication
"""

import math

import pytest
import torch

from lamina.errors import InvalidArgumentError
from lamina.temporal import ChunkItem, ChunkType, TemporalChunk, sequence_coherence
from tests.utils.test_helpers import make_chunk_items, one_hot_pattern


@pytest.mark.unit
class TestChunkItem:
    def test_dimension(self):
        item = ChunkItem(torch.ones(5), 1.0, 0.0, 0)
        assert item.dimension == 5

    def test_rejects_invalid_pattern(self):
        with pytest.raises(InvalidArgumentError):
            ChunkItem(torch.tensor([float("inf")]), 1.0, 0.0, 0)


@pytest.mark.unit
class TestCoherence:
    def test_single_item_fully_coherent(self):
        assert sequence_coherence(make_chunk_items(1)) == 1.0

    def test_parallel_patterns(self):
        assert sequence_coherence(make_chunk_items(4)) == pytest.approx(1.0)

    def test_orthogonal_patterns(self):
        items = [ChunkItem(one_hot_pattern(4, k), 1.0, 0.1 * k, k) for k in range(3)]
        assert sequence_coherence(items) == pytest.approx(0.0)

    def test_negative_similarity_counts_as_zero(self):
        items = [
            ChunkItem(torch.tensor([1.0, 0.0]), 1.0, 0.0, 0),
            ChunkItem(torch.tensor([-1.0, 0.0]), 1.0, 0.1, 1),
            ChunkItem(torch.tensor([-1.0, 0.0]), 1.0, 0.2, 2),
        ]
        assert sequence_coherence(items) == pytest.approx(0.5)


@pytest.mark.unit
class TestTemporalChunk:
    def test_formation_quantities(self):
        items = make_chunk_items(3)
        chunk = TemporalChunk(items, formation_time=0.5, chunk_id=7)

        assert chunk.size == len(chunk) == 3
        assert chunk.chunk_id == 7
        assert chunk.dimension == 4
        assert chunk.strength == pytest.approx((0.8 + 0.79 + 0.78) / 3)
        assert chunk.coherence == pytest.approx(1.0)

        levels = [0.8, 0.79, 0.78]
        expected = sum(level * level for level in levels) / sum(levels)
        assert torch.allclose(chunk.representative_pattern, torch.full((4,), expected))

    def test_representative_zero_when_no_activation(self):
        items = [ChunkItem(torch.ones(3), 0.0, 0.1 * k, k) for k in range(2)]
        chunk = TemporalChunk(items, 0.0, 0)
        assert torch.equal(chunk.representative_pattern, torch.zeros(3))

    def test_representative_is_copy(self):
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        chunk.representative_pattern.fill_(5.0)
        assert chunk.representative_pattern.max().item() < 1.0

    def test_items_immutable(self):
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        assert isinstance(chunk.items, tuple)

    def test_temporal_span(self):
        chunk = TemporalChunk(make_chunk_items(3, start_time=1.0, spacing=0.25), 2.0, 0)
        assert chunk.start_time == pytest.approx(1.0)
        assert chunk.end_time == pytest.approx(1.5)
        assert chunk.temporal_span == pytest.approx(0.5)

    def test_exact_exponential_decay(self):
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        initial = chunk.strength
        assert chunk.decay(0.1, 2.0) == pytest.approx(initial * math.exp(-0.2))
        assert chunk.decay(0.1, 0.0) == pytest.approx(initial * math.exp(-0.2))

    def test_decay_rejects_negative(self):
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        with pytest.raises(InvalidArgumentError):
            chunk.decay(-0.1, 1.0)

    def test_is_active(self):
        chunk = TemporalChunk(make_chunk_items(2), 0.0, 0)
        assert chunk.is_active(0.5)
        chunk.decay(10.0, 10.0)
        assert not chunk.is_active(0.01)

    @pytest.mark.parametrize(
        "size,expected",
        [
            (1, ChunkType.SMALL),
            (3, ChunkType.SMALL),
            (4, ChunkType.MEDIUM),
            (5, ChunkType.MEDIUM),
            (6, ChunkType.LARGE),
            (7, ChunkType.LARGE),
            (8, ChunkType.SUPER),
            (12, ChunkType.SUPER),
        ],
    )
    def test_chunk_type(self, size, expected):
        assert TemporalChunk(make_chunk_items(size), 0.0, 0).chunk_type is expected

    def test_chunk_type_ranges(self):
        assert (ChunkType.MEDIUM.min_size, ChunkType.MEDIUM.max_size) == (4, 5)

    def test_empty_rejected(self):
        with pytest.raises(InvalidArgumentError):
            TemporalChunk([], 0.0, 0)

    def test_mixed_dimensions_rejected(self):
        items = [ChunkItem(torch.ones(3), 1.0, 0.0, 0), ChunkItem(torch.ones(4), 1.0, 0.1, 1)]
        with pytest.raises(InvalidArgumentError):
            TemporalChunk(items, 0.0, 0)


@pytest.mark.unit
class TestChunkMerge:
    def test_merge_deduplicates_by_timestamp(self):
        first = TemporalChunk(make_chunk_items(3, start_time=0.0, spacing=0.01), 0.5, 0)
        second = TemporalChunk(make_chunk_items(3, start_time=0.02, spacing=0.01), 0.3, 1)

        merged = first.merge(second, new_id=5)

        assert merged.size == 5
        assert merged.chunk_id == 5
        assert merged.formation_time == pytest.approx(0.3)
        timestamps = [item.timestamp for item in merged.items]
        assert timestamps == sorted(timestamps)

    def test_merge_keeps_id_by_default(self):
        first = TemporalChunk(make_chunk_items(2, start_time=0.0), 0.0, 3)
        second = TemporalChunk(make_chunk_items(2, start_time=1.0), 1.0, 4)
        merged = first.merge(second)
        assert merged.chunk_id == 3
        assert merged.size == 4

    def test_merge_dimension_mismatch(self):
        first = TemporalChunk(make_chunk_items(2, size=3), 0.0, 0)
        second = TemporalChunk(make_chunk_items(2, size=4), 0.0, 1)
        with pytest.raises(InvalidArgumentError):
            first.merge(second)
