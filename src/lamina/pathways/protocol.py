"""Signal Pathway Protocol - Unified interface for all pathway types.

A pathway carries an activation pattern from a source layer to a target
layer: bottom-up (input to category field), top-down (expectation back to
the input field) or lateral (within one field). Pathways are not passive
wires. They scale, filter and gate what they transmit, and a pathway can
be wrapped with temporal dynamics without changing what it does on its own.

Protocol Design:
================

- Every pathway implements ``propagate(signal, params=None)``; ``params``
  carries per-call settings (gain, learning rate, adaptation flag)
- Identity (``pathway_id``, ``source_id``, ``target_id``, ``pathway_type``)
  lets a decorator stand in for the pathway it wraps
- State management and diagnostics are optional extras

Usage Example
==============

.. code-block:: python

    class InvertingPathway(nn.Module):
        pathway_id = "invert"
        source_id = "L4"
        target_id = "L2/3"
        pathway_type = PathwayType.LATERAL

        def propagate(self, signal, params=None):
            return 1.0 - signal

    assert isinstance(InvertingPathway(), Pathway)

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

import torch

from lamina.config import ValidatedConfig


class PathwayType(Enum):
    """Direction of signal flow through a pathway."""

    BOTTOM_UP = "bottom_up"
    TOP_DOWN = "top_down"
    LATERAL = "lateral"


@dataclass
class PathwayConfig(ValidatedConfig):
    """Per-call pathway parameters.

    Attributes:
        gain: Multiplicative signal gain
    """

    gain: float = 1.0

    _validation_rules = {
        "gain": ("non_negative", "finite"),
    }

    def __post_init__(self) -> None:
        self.validate_config()


@runtime_checkable
class Pathway(Protocol):
    """
    Protocol for anything that transforms a signal on its way between layers.

    Core Methods:
    -------------
    - propagate(): Transform the signal, honouring the per-call parameters

    Identity:
    ---------
    - pathway_id / source_id / target_id / pathway_type
    """

    pathway_id: str
    source_id: str
    target_id: str
    pathway_type: PathwayType

    def propagate(
        self,
        signal: torch.Tensor,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        """Transform ``signal`` (1D tensor) into the pathway's output."""
        ...


__all__ = [
    "Pathway",
    "PathwayConfig",
    "PathwayType",
]
