"""
ART matching: match scores, prediction errors, vigilance and top-down expectations.
"""

from __future__ import annotations

from lamina.matching.prediction_error import (
    MatchingConfig,
    PredictionErrorProcessor,
    PredictionStatistics,
    compute_match_score,
)
from lamina.matching.prediction_generator import PredictionConfig, PredictionGenerator

__all__ = [
    "MatchingConfig",
    "PredictionConfig",
    "PredictionErrorProcessor",
    "PredictionGenerator",
    "PredictionStatistics",
    "compute_match_score",
]
