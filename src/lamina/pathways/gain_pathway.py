"""
Gain Pathway - Reference pathway that scales its signal.

The simplest pathway: ``output = signal * gain``. It is the base unit that
temporal dynamics are layered onto, and the baseline the decorator must
reproduce exactly when its dynamics are disabled.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

import torch
import torch.nn as nn

from lamina.errors import InvalidArgumentError
from lamina.mixins import DiagnosticsMixin
from lamina.pathways.protocol import PathwayConfig, PathwayType
from lamina.utils import PatternLike, as_pattern


class GainPathway(DiagnosticsMixin, nn.Module):
    """Pathway multiplying its input by a scalar gain.

    When called with ``params``, ``params.gain`` replaces the pathway's own
    gain for that call.

    Args:
        gain: Default gain
        pathway_id: Identifier of this pathway
        source_id: Identifier of the source layer
        target_id: Identifier of the target layer
        pathway_type: Direction of flow
    """

    def __init__(
        self,
        gain: float = 1.0,
        pathway_id: str = "pathway",
        source_id: str = "source",
        target_id: str = "target",
        pathway_type: Union[PathwayType, str] = PathwayType.BOTTOM_UP,
    ):
        super().__init__()
        if gain < 0:
            raise InvalidArgumentError(f"gain={gain} must be non-negative")
        self.gain = float(gain)
        self.pathway_id = pathway_id
        self.source_id = source_id
        self.target_id = target_id
        self.pathway_type = PathwayType(pathway_type)
        self.propagation_count = 0
        self.last_output: Optional[torch.Tensor] = None

    def propagate(
        self,
        signal: PatternLike,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        signal = as_pattern(signal, name="signal")
        gain = params.gain if params is not None else self.gain
        output = signal * gain
        self.propagation_count += 1
        self.last_output = output
        return output

    def forward(
        self,
        signal: PatternLike,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        return self.propagate(signal, params)

    def reset_state(self) -> None:
        self.propagation_count = 0
        self.last_output = None

    def get_diagnostics(self) -> Dict[str, float]:
        diagnostics: Dict[str, float] = {
            "gain": self.gain,
            "propagation_count": self.propagation_count,
        }
        diagnostics.update(self.activity_diagnostics(self.last_output, prefix="output"))
        return diagnostics

    def extra_repr(self) -> str:
        return (
            f"id={self.pathway_id!r}, {self.source_id}->{self.target_id}, "
            f"type={self.pathway_type.value}, gain={self.gain}"
        )


__all__ = ["GainPathway"]
