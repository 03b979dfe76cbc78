"""
LAMINA - temporal dynamics and matching for canonical laminar circuits

Shunting activation, habituative transmitter gating, ART matching,
temporal chunking and multi-scale coordination for Grossberg-style
laminar cortical models.

Quick Start:
============

    import torch
    from lamina import (
        GainPathway, TemporalDynamicsPathway, ShuntingConfig,
        PredictionErrorProcessor, PredictionGenerator,
    )

    pathway = TemporalDynamicsPathway(GainPathway(), ShuntingConfig.standard())
    signal = pathway.propagate(torch.tensor([0.8, 0.2, 0.0, 0.5]))

    processor = PredictionErrorProcessor()
    stats = processor.compute_statistics(signal, expectation, vigilance=0.7)

Internal Development:
====================

Internal code should use explicit imports for clarity:

    from lamina.dynamics.shunting import ShuntingDynamics, ShuntingState
    from lamina.temporal.chunking_layer import TemporalChunkingLayer
"""

__version__ = "0.1.0"

# ============================================================================
# PUBLIC API
# ============================================================================

# Configuration and errors
from lamina.config import BaseConfig, ConfigValidationError, ValidatedConfig
from lamina.errors import (
    ComponentError,
    ConfigurationError,
    DimensionMismatchError,
    InvalidArgumentError,
    LaminaError,
)

# Dynamics
from lamina.dynamics import (
    BoundedIntegrator,
    ShuntingConfig,
    ShuntingDynamics,
    ShuntingState,
    TimeScale,
    TransmitterConfig,
    TransmitterDynamics,
    TransmitterState,
)

# Pathways
from lamina.pathways import (
    GainPathway,
    Pathway,
    PathwayConfig,
    PathwayType,
    TemporalDynamicsPathway,
)

# Matching
from lamina.matching import (
    MatchingConfig,
    PredictionConfig,
    PredictionErrorProcessor,
    PredictionGenerator,
    PredictionStatistics,
)

# Temporal chunking
from lamina.temporal import (
    ActivationLayer,
    ChunkingConfig,
    ChunkingState,
    LayerState,
    TemporalChunk,
    TemporalChunkingLayer,
)

# Coordination
from lamina.coordination import (
    CoordinatorConfig,
    MultiScaleCoordinator,
    MultiScaleLayerProcessor,
)

__all__ = [
    "__version__",
    # Configuration and errors
    "BaseConfig",
    "ConfigValidationError",
    "ValidatedConfig",
    "ComponentError",
    "ConfigurationError",
    "DimensionMismatchError",
    "InvalidArgumentError",
    "LaminaError",
    # Dynamics
    "BoundedIntegrator",
    "ShuntingConfig",
    "ShuntingDynamics",
    "ShuntingState",
    "TimeScale",
    "TransmitterConfig",
    "TransmitterDynamics",
    "TransmitterState",
    # Pathways
    "GainPathway",
    "Pathway",
    "PathwayConfig",
    "PathwayType",
    "TemporalDynamicsPathway",
    # Matching
    "MatchingConfig",
    "PredictionConfig",
    "PredictionErrorProcessor",
    "PredictionGenerator",
    "PredictionStatistics",
    # Temporal chunking
    "ActivationLayer",
    "ChunkingConfig",
    "ChunkingState",
    "LayerState",
    "TemporalChunk",
    "TemporalChunkingLayer",
    # Coordination
    "CoordinatorConfig",
    "MultiScaleCoordinator",
    "MultiScaleLayerProcessor",
]
