"""Pattern utilities shared across Lamina components."""

from __future__ import annotations

from .core_utils import (
    PatternLike,
    as_pattern,
    clamp_pattern,
    cosine_similarity_safe,
    pattern_magnitude,
)

__all__ = [
    "PatternLike",
    "as_pattern",
    "clamp_pattern",
    "cosine_similarity_safe",
    "pattern_magnitude",
]
