"""
Prediction Error Processor - ART matching between input and expectation.

The matching rule compares a bottom-up input X with a top-down expectation
E using the asymmetric ART match:

    match(X, E) = sum_i min(|X_i|, |E_i|) / sum_i |X_i|

The score measures how much of the INPUT is covered by the expectation, so
it is deliberately asymmetric: a broad expectation covering a narrow input
scores high, while a narrow expectation against a broad input scores low.

    X = [1, 0, 0, 0], E = [0.5, 0.5, 0.5, 0.5]
    match(X, E) = 0.5 / 1.0 = 0.5
    match(E, X) = 0.5 / 2.0 = 0.25

Alongside the score the processor reports the signed prediction error
X - E and its mean absolute magnitude. The vigilance test turns the score
into a decision: score >= vigilance means resonance (accept the category),
otherwise a reset sends the category search onward. The search itself
belongs to the enclosing category-learning loop.

References:
- Carpenter & Grossberg (1987): A massively parallel architecture for a
  self-organizing neural pattern recognition machine
- Carpenter, Grossberg & Rosen (1991): Fuzzy ART
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import torch

from lamina.config import ValidatedConfig
from lamina.errors import validate_same_dimension, validate_unit_interval
from lamina.mixins import DiagnosticsMixin, ResettableMixin
from lamina.utils import PatternLike, as_pattern


@dataclass
class MatchingConfig(ValidatedConfig):
    """Configuration for ART matching.

    Attributes:
        vigilance: Default match threshold for resonance
        reset_threshold: Match below which an input counts as a strong mismatch
    """

    vigilance: float = 0.8
    reset_threshold: float = 0.1

    _validation_rules = {
        "vigilance": ("probability",),
        "reset_threshold": ("probability",),
    }

    def __post_init__(self) -> None:
        self.validate_config()


@dataclass(frozen=True, eq=False)
class PredictionStatistics:
    """Outcome of matching one input against one expectation."""

    match_score: float
    error_signal: torch.Tensor
    error_magnitude: float
    resonates: bool

    @property
    def dimension(self) -> int:
        return int(self.error_signal.shape[0])


def compute_match_score(input_pattern: torch.Tensor, expectation: torch.Tensor) -> float:
    """Asymmetric ART match on already validated, same-sized tensors.

    Returns 0.0 when the input has no mass.
    """
    input_abs = input_pattern.abs()
    denominator = input_abs.sum().item()
    if denominator == 0.0:
        return 0.0
    overlap = torch.minimum(input_abs, expectation.abs()).sum().item()
    return float(overlap / denominator)


class PredictionErrorProcessor(ResettableMixin, DiagnosticsMixin):
    """Computes match scores, prediction errors and vigilance decisions.

    Keeps running counts of resonances and resets for diagnostics.

    Args:
        config: Matching parameters (default MatchingConfig())

    Example:
        >>> processor = PredictionErrorProcessor()
        >>> stats = processor.compute_statistics([1, 0, 0, 0], [0.5] * 4, vigilance=0.5)
        >>> stats.match_score, stats.resonates
        (0.5, True)
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()
        self.resonance_count = 0
        self.reset_count = 0
        self._score_total = 0.0
        self._last_error: Optional[torch.Tensor] = None

    def _validate_pair(self, input_pattern: PatternLike, expectation: PatternLike):
        x = as_pattern(input_pattern, name="input")
        e = as_pattern(expectation, name="expectation")
        validate_same_dimension(x, e, ("input", "expectation"))
        return x, e.to(dtype=x.dtype, device=x.device)

    def compute_match_score(self, input_pattern: PatternLike, expectation: PatternLike) -> float:
        """Fraction of the input's mass covered by the expectation, in [0, 1]."""
        x, e = self._validate_pair(input_pattern, expectation)
        return compute_match_score(x, e)

    def compute_error_signal(
        self, input_pattern: PatternLike, expectation: PatternLike
    ) -> torch.Tensor:
        """Signed prediction error: input - expectation."""
        x, e = self._validate_pair(input_pattern, expectation)
        return x - e

    def compute_error_magnitude(
        self, input_pattern: PatternLike, expectation: PatternLike
    ) -> float:
        """Mean absolute prediction error."""
        error = self.compute_error_signal(input_pattern, expectation)
        return float(error.abs().mean().item())

    def vigilance_test(self, match_score: float, vigilance: Optional[float] = None) -> bool:
        """Resonance iff ``match_score >= vigilance`` (boundary resonates).

        Raises:
            InvalidArgumentError: If vigilance is outside [0, 1]
        """
        if vigilance is None:
            vigilance = self.config.vigilance
        vigilance = validate_unit_interval(vigilance, "vigilance")
        return match_score >= vigilance

    def is_strong_mismatch(self, match_score: float) -> bool:
        return match_score < self.config.reset_threshold

    def compute_statistics(
        self,
        input_pattern: PatternLike,
        expectation: PatternLike,
        vigilance: Optional[float] = None,
    ) -> PredictionStatistics:
        """Match score, error vector, error magnitude and vigilance decision."""
        x, e = self._validate_pair(input_pattern, expectation)
        score = compute_match_score(x, e)
        error = x - e
        resonates = self.vigilance_test(score, vigilance)

        if resonates:
            self.resonance_count += 1
        else:
            self.reset_count += 1
        self._score_total += score
        self._last_error = error

        return PredictionStatistics(
            match_score=score,
            error_signal=error,
            error_magnitude=float(error.abs().mean().item()),
            resonates=resonates,
        )

    @property
    def evaluation_count(self) -> int:
        return self.resonance_count + self.reset_count

    def reset_state(self) -> None:
        self.resonance_count = 0
        self.reset_count = 0
        self._score_total = 0.0
        self._last_error = None

    def get_diagnostics(self) -> Dict[str, float]:
        total = self.evaluation_count
        diagnostics: Dict[str, float] = {
            "evaluations": total,
            "resonances": self.resonance_count,
            "resets": self.reset_count,
            "resonance_rate": self.resonance_count / total if total else 0.0,
            "mean_match_score": self._score_total / total if total else 0.0,
        }
        diagnostics.update(self.trace_diagnostics(self._last_error, prefix="last_error"))
        return diagnostics


__all__ = [
    "MatchingConfig",
    "PredictionStatistics",
    "PredictionErrorProcessor",
    "compute_match_score",
]
