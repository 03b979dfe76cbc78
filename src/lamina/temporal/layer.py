"""
Layer interface, a reference activation layer and the layer state snapshot.

A layer turns bottom-up input into an activation pattern of fixed size.
The chunking layer decorates any object satisfying the ``Layer`` protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

import torch
import torch.nn as nn

from lamina.errors import DimensionMismatchError, InvalidArgumentError, validate_unit_interval
from lamina.mixins import DiagnosticsMixin, ResettableMixin
from lamina.utils import PatternLike, as_pattern


@runtime_checkable
class Layer(Protocol):
    """Minimal interface of a cortical layer."""

    size: int

    @property
    def activation(self) -> torch.Tensor:
        ...

    def process_bottom_up(self, input_pattern: torch.Tensor) -> torch.Tensor:
        ...

    def reset_state(self) -> None:
        ...


@dataclass(frozen=True, eq=False)
class LayerState:
    """Snapshot of a layer: activation, optional temporal context, time.

    ``combine(weight)`` blends the two patterns,

        combined = (1 - weight) * activation + weight * context

    and returns the activation unchanged when there is no context.
    """

    current_activation: torch.Tensor
    temporal_context: Optional[torch.Tensor] = None
    timestamp: float = 0.0

    @property
    def has_temporal_context(self) -> bool:
        return self.temporal_context is not None

    @property
    def dimension(self) -> int:
        return int(self.current_activation.shape[0])

    def combine(self, weight: float) -> torch.Tensor:
        """Blend activation and context.

        Raises:
            InvalidArgumentError: If weight is outside [0, 1]
        """
        weight = validate_unit_interval(weight, "weight")
        if self.temporal_context is None:
            return self.current_activation.clone()
        return (1.0 - weight) * self.current_activation + weight * self.temporal_context


class ActivationLayer(ResettableMixin, DiagnosticsMixin, nn.Module):
    """Reference layer: activation = clamp(gain * input, 0, 1).

    Args:
        size: Number of units
        gain: Input gain
        layer_id: Identifier used in diagnostics and errors
    """

    def __init__(self, size: int, gain: float = 1.0, layer_id: str = "layer"):
        super().__init__()
        if size <= 0:
            raise InvalidArgumentError(f"size={size} must be positive")
        self.size = size
        self.gain = gain
        self.layer_id = layer_id
        self._activation = torch.zeros(size)

    @property
    def activation(self) -> torch.Tensor:
        return self._activation.clone()

    def set_activation(self, activation: PatternLike) -> None:
        activation = as_pattern(activation, name="activation")
        if activation.shape[0] != self.size:
            raise DimensionMismatchError(
                f"[{self.layer_id}] activation has {activation.shape[0]} elements, "
                f"layer has {self.size}"
            )
        self._activation = activation.clone()

    def process_bottom_up(self, input_pattern: PatternLike) -> torch.Tensor:
        input_pattern = as_pattern(input_pattern, name="input")
        if input_pattern.shape[0] != self.size:
            raise DimensionMismatchError(
                f"[{self.layer_id}] input has {input_pattern.shape[0]} elements, "
                f"layer has {self.size}"
            )
        self._activation = (self.gain * input_pattern).clamp(0.0, 1.0)
        return self._activation.clone()

    def forward(self, input_pattern: PatternLike) -> torch.Tensor:
        return self.process_bottom_up(input_pattern)

    def reset_state(self) -> None:
        self._activation = torch.zeros(self.size)

    def get_diagnostics(self) -> Dict[str, float]:
        return self.activity_diagnostics(self._activation, prefix=self.layer_id)


__all__ = [
    "Layer",
    "LayerState",
    "ActivationLayer",
]
