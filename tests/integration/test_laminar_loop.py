"""
Integration tests: the laminar circuit end to end.

A minimal ART category search sits on top of the components:
for each input, categories are tried in order; the first whose top-down
expectation passes the vigilance test learns the input, every other
category is reset. The multi-scale processor supplies the input field.
"""

from typing import Optional

import pytest
import torch

from lamina.coordination import MultiScaleLayerProcessor
from lamina.dynamics import ShuntingConfig, TransmitterConfig
from lamina.matching import (
    MatchingConfig,
    PredictionConfig,
    PredictionErrorProcessor,
    PredictionGenerator,
)
from lamina.pathways import GainPathway, TemporalDynamicsPathway
from lamina.temporal import ActivationLayer, ChunkingConfig, TemporalChunkingLayer
from tests.utils.test_helpers import assert_pattern_valid, noisy_copy, uniform_pattern


class CategorySearch:
    """Sequential category search with fast learning."""

    def __init__(self, input_size: int, vigilance: float, max_categories: int = 10):
        self.matcher = PredictionErrorProcessor(MatchingConfig(vigilance=vigilance))
        self.generator = PredictionGenerator(
            input_size,
            PredictionConfig(top_down_gain=1.0, learning_rate=1.0, max_categories=max_categories),
        )
        self.max_categories = max_categories

    def categorize(self, pattern: torch.Tensor) -> Optional[int]:
        for category in range(self.max_categories):
            activations = torch.zeros(category + 1)
            activations[category] = 1.0
            expectation = self.generator.generate_expectation(activations)
            stats = self.matcher.compute_statistics(pattern, expectation)
            if stats.resonates:
                self.generator.update_template(category, pattern)
                return category
        return None


def _bars(size, start, stop):
    pattern = torch.zeros(size)
    pattern[start:stop] = 1.0
    return pattern


@pytest.mark.integration
class TestCategorySearch:
    def test_distinct_patterns_get_distinct_categories(self):
        search = CategorySearch(input_size=8, vigilance=0.8)
        first = _bars(8, 0, 4)
        second = _bars(8, 4, 8)

        assert search.categorize(first) == 0
        assert search.categorize(second) == 1
        assert search.categorize(first) == 0
        assert search.categorize(second) == 1
        assert search.generator.committed_count == 2

    def test_vigilance_controls_granularity(self):
        variant = _bars(8, 0, 5)

        strict = CategorySearch(input_size=8, vigilance=0.9)
        strict.categorize(_bars(8, 0, 4))
        # match(variant, template) = 4 / 5 = 0.8 < 0.9: new category
        assert strict.categorize(variant) == 1

        lenient = CategorySearch(input_size=8, vigilance=0.7)
        lenient.categorize(_bars(8, 0, 4))
        assert lenient.categorize(variant) == 0

    def test_resets_counted_during_search(self):
        search = CategorySearch(input_size=8, vigilance=0.8)
        search.categorize(_bars(8, 0, 4))
        search.categorize(_bars(8, 4, 8))
        assert search.matcher.reset_count == 1
        assert search.matcher.resonance_count == 2


@pytest.mark.integration
class TestLaminarCircuit:
    @pytest.fixture
    def processor(self):
        pathway = TemporalDynamicsPathway(
            GainPathway(pathway_id="thalamus->L4", source_id="thalamus", target_id="L4"),
            ShuntingConfig.standard(),
            TransmitterConfig.standard(),
        )
        layer = TemporalChunkingLayer(ActivationLayer(10, layer_id="L4"), ChunkingConfig())
        return MultiScaleLayerProcessor.standard(layer, pathway)

    def test_stream_forms_chunks_and_habituates(self, processor):
        base = uniform_pattern(10, 0.6)
        for _ in range(100):
            output = processor.process(noisy_copy(base))
            assert_pattern_valid(output, lower=0.0, upper=1.0)

        assert len(processor.layer.get_temporal_chunks()) >= 1
        level = processor.pathway.transmitter_state.mean_level()
        assert 0.0 < level < 1.0

        state = processor.layer.get_layer_state()
        assert state.has_temporal_context
        assert_pattern_valid(state.temporal_context, lower=0.0, upper=1.0)

    def test_circuit_output_is_categorized_stably(self, processor):
        search = CategorySearch(input_size=10, vigilance=0.9)
        state = processor.process_sequence([uniform_pattern(10, 0.6)] * 30)
        output = state.combine(processor.layer.context_weight)

        assert search.categorize(output) == 0
        # A learned template covers its own pattern exactly
        assert search.categorize(output) == 0
        assert search.matcher.compute_match_score(output, search.generator.get_template(0)) == (
            pytest.approx(1.0)
        )

    def test_reset_restores_fresh_circuit(self, processor):
        processor.process_sequence([uniform_pattern(10, 0.6)] * 80)
        processor.reset_state()

        assert processor.pathway.is_bound
        assert processor.layer.get_temporal_chunks() == []
        assert processor.coordinator.current_time == 0.0
        assert torch.equal(processor.pathway.transmitter_state.levels, torch.ones(10))
