"""
Prediction Generator - top-down expectations from category activity.

Every category owns a learned template over the input field. A category
that has never learned is uncommitted and its template is all ones: it
expects everything, so any input matches it fully.

Given category activations y_c the expectation is the activation-weighted
blend of templates, scaled by a top-down gain and clamped to [0, 1]:

    E = clamp(gain * sum_c y_c * t_c / sum_c y_c, 0, 1)

Learning moves a template toward a target pattern:

    t <- t + r * (target - t)

so after n updates with rate r the residual is |t0 - target| * (1 - r)^n.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import torch

from lamina.config import BaseConfig, ValidatedConfig
from lamina.errors import InvalidArgumentError, validate_same_dimension
from lamina.mixins import DiagnosticsMixin, ResettableMixin
from lamina.utils import PatternLike, as_pattern

logger = logging.getLogger(__name__)


@dataclass
class PredictionConfig(BaseConfig, ValidatedConfig):
    """Configuration for top-down expectation generation.

    Attributes:
        top_down_gain: Scale applied to the blended template
        learning_rate: Default template learning rate, in (0, 1]
        max_categories: Number of category ids accepted
    """

    top_down_gain: float = 0.5
    learning_rate: float = 0.5
    max_categories: int = 100

    _validation_rules = {
        "top_down_gain": ("non_negative", "finite"),
        "learning_rate": ("unit_rate",),
        "max_categories": ("positive_integer",),
    }

    def __post_init__(self) -> None:
        self.validate_config()


class PredictionGenerator(ResettableMixin, DiagnosticsMixin):
    """Produces top-down expectations and learns per-category templates.

    Args:
        input_size: Dimension of the input field (template length)
        config: Prediction parameters (default PredictionConfig())
    """

    def __init__(self, input_size: int, config: Optional[PredictionConfig] = None):
        if input_size <= 0:
            raise InvalidArgumentError(f"input_size={input_size} must be positive")
        self.input_size = input_size
        self.config = config or PredictionConfig()
        self.dtype = self.config.get_torch_dtype()
        self.device = self.config.get_torch_device()
        self._templates: Dict[int, torch.Tensor] = {}
        self.update_count = 0

    def _check_category(self, category_id: int) -> None:
        if not 0 <= category_id < self.config.max_categories:
            raise InvalidArgumentError(
                f"category_id={category_id} outside [0, {self.config.max_categories})"
            )

    def _uncommitted_template(self) -> torch.Tensor:
        return torch.ones(self.input_size, dtype=self.dtype, device=self.device)

    def get_template(self, category_id: int) -> torch.Tensor:
        """Copy of the category's template (all ones if uncommitted)."""
        self._check_category(category_id)
        template = self._templates.get(category_id)
        if template is None:
            return self._uncommitted_template()
        return template.clone()

    def is_committed(self, category_id: int) -> bool:
        return category_id in self._templates

    @property
    def committed_count(self) -> int:
        return len(self._templates)

    @property
    def committed_categories(self) -> List[int]:
        return sorted(self._templates)

    def generate_expectation(self, category_activations: PatternLike) -> torch.Tensor:
        """Activation-weighted template blend, scaled by gain and clamped to [0, 1].

        Entry c of ``category_activations`` is the activation of category c.
        All-zero activations yield a zero expectation.

        Raises:
            InvalidArgumentError: If there are more activations than categories
                or an activation is negative
        """
        activations = as_pattern(category_activations, name="category_activations")
        if activations.shape[0] > self.config.max_categories:
            raise InvalidArgumentError(
                f"{activations.shape[0]} category activations exceed "
                f"max_categories={self.config.max_categories}"
            )
        if (activations < 0).any():
            raise InvalidArgumentError("category_activations must be non-negative")

        total = activations.sum().item()
        if total == 0.0:
            return torch.zeros(self.input_size, dtype=self.dtype, device=self.device)

        blended = torch.zeros(self.input_size, dtype=self.dtype, device=self.device)
        for category_id in torch.nonzero(activations).flatten().tolist():
            template = self._templates.get(category_id)
            if template is None:
                template = self._uncommitted_template()
            blended += activations[category_id].item() * template

        expectation = self.config.top_down_gain * blended / total
        return expectation.clamp(0.0, 1.0)

    def update_template(
        self,
        category_id: int,
        target: PatternLike,
        learning_rate: Optional[float] = None,
    ) -> torch.Tensor:
        """Move the category's template toward ``target`` and return the new template.

        Raises:
            InvalidArgumentError: If the rate is outside (0, 1], the category id
                is out of range or the target has the wrong dimension
        """
        self._check_category(category_id)
        rate = self.config.learning_rate if learning_rate is None else learning_rate
        if not 0.0 < rate <= 1.0:
            raise InvalidArgumentError(f"learning_rate={rate} must be in (0, 1]")

        target = as_pattern(target, name="target", dtype=self.dtype, device=self.device)
        template = self._templates.get(category_id)
        if template is None:
            template = self._uncommitted_template()
            logger.debug("Committing category %d", category_id)
        validate_same_dimension(template, target, ("template", "target"))

        template = template + rate * (target - template)
        self._templates[category_id] = template
        self.update_count += 1
        return template.clone()

    def reset_state(self) -> None:
        """Forget all learned templates."""
        self._templates.clear()
        self.update_count = 0

    def get_diagnostics(self) -> Dict[str, float]:
        diagnostics: Dict[str, float] = {
            "committed_categories": self.committed_count,
            "template_updates": self.update_count,
        }
        if self._templates:
            stacked = torch.stack(list(self._templates.values()))
            diagnostics.update(self.activity_diagnostics(stacked.flatten(), prefix="template"))
        return diagnostics


__all__ = [
    "PredictionConfig",
    "PredictionGenerator",
]
