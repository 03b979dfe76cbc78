"""Shared test fixtures and configuration."""

import numpy as np
import pytest
import torch

from lamina.dynamics import ShuntingConfig, TransmitterConfig
from lamina.pathways import GainPathway, PathwayConfig, PathwayType
from lamina.temporal import ActivationLayer, ChunkingConfig


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure reproducible tests by setting all random seeds.

    This fixture runs automatically for every test to ensure deterministic behavior.
    """
    torch.manual_seed(42)
    np.random.seed(42)


@pytest.fixture
def dimension():
    """Standard field size for tests."""
    return 10


@pytest.fixture
def shunting_config():
    """On-centre off-surround parameters used across the circuit."""
    return ShuntingConfig.standard()


@pytest.fixture
def transmitter_config():
    """Standard habituative transmitter parameters."""
    return TransmitterConfig.standard()


@pytest.fixture
def pathway_params():
    """Default per-call pathway parameters."""
    return PathwayConfig(gain=1.0)


@pytest.fixture
def base_pathway():
    """Unit-gain bottom-up reference pathway."""
    return GainPathway(
        gain=1.0,
        pathway_id="test-pathway",
        source_id="source",
        target_id="target",
        pathway_type=PathwayType.BOTTOM_UP,
    )


@pytest.fixture
def base_layer(dimension):
    """Reference activation layer."""
    return ActivationLayer(dimension, layer_id="L4")


@pytest.fixture
def chunking_config():
    """Paper-default chunking parameters."""
    return ChunkingConfig.paper_defaults()
