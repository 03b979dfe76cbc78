"""
Pathways: signal transmission between layers, with optional temporal dynamics.
"""

from __future__ import annotations

from lamina.pathways.gain_pathway import GainPathway
from lamina.pathways.lateral import gaussian_surround_weights, surround_inhibition_weights
from lamina.pathways.protocol import Pathway, PathwayConfig, PathwayType
from lamina.pathways.temporal_pathway import TemporalDynamicsPathway, WeightProvider

__all__ = [
    "GainPathway",
    "Pathway",
    "PathwayConfig",
    "PathwayType",
    "TemporalDynamicsPathway",
    "WeightProvider",
    "gaussian_surround_weights",
    "surround_inhibition_weights",
]
