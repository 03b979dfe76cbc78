"""
Temporal Dynamics Pathway - Shunting and transmitter dynamics around any pathway.

This decorator adds two coupled dynamical processes to an existing
pathway without changing the pathway itself:

1. **Shunting activation** (fast): the incoming signal drives a bounded
   on-centre off-surround field, which settles toward B*S/(A+S).
2. **Habituative gating** (slow): per-channel transmitter levels multiply
   the shunting activation and deplete with use.

On every propagation:

    X <- shunting step driven by signal        (dt = time_scale step)
    gated = X * Z                               (transmitter gate)
    Z <- transmitter step driven by signal      (the raw signal, not gated)
    return pathway.propagate(gated, params)

With dynamics disabled, ``propagate`` delegates straight to the wrapped
pathway, so the decorated pathway behaves exactly like the bare one.

State Lifecycle:
================
State is bound lazily: both states are created at the first propagation,
sized to that signal. Before that, ``shunting_state`` and
``transmitter_state`` report empty (dimension 0) states. A later signal of
a different size is an error, never silently resized.

    pathway = TemporalDynamicsPathway(GainPathway(), ShuntingConfig.standard())
    pathway.shunting_state.dimension        # 0 (unbound)
    pathway.propagate(torch.full((10,), 0.5))
    pathway.shunting_state.dimension        # 10
    pathway.update_dynamics(0.01)           # idle evolution
    pathway.reset_dynamics()                # X = 0, Z = 1, still bound

References:
- Grossberg (1973, 1980): Shunting networks and habituative gates
- Grossberg (2013): Adaptive Resonance Theory: How a brain learns to
  consciously attend, learn, and recognize a changing world
"""

from __future__ import annotations

import logging
import warnings
from typing import Callable, Dict, Optional, Union

import torch
import torch.nn as nn

from lamina.constants import DEFAULT_EQUILIBRIUM_THRESHOLD
from lamina.dynamics import (
    ShuntingConfig,
    ShuntingDynamics,
    ShuntingState,
    TimeScale,
    TransmitterConfig,
    TransmitterDynamics,
    TransmitterState,
)
from lamina.errors import ComponentError, DimensionMismatchError, validate_time_step
from lamina.mixins import DiagnosticsMixin, ResettableMixin
from lamina.pathways.lateral import surround_inhibition_weights
from lamina.pathways.protocol import Pathway, PathwayConfig, PathwayType
from lamina.utils import PatternLike, as_pattern

logger = logging.getLogger(__name__)

WeightProvider = Callable[[int], torch.Tensor]
"""Builds an [n, n] lateral connection matrix for a field of n units."""


class TemporalDynamicsPathway(ResettableMixin, DiagnosticsMixin, nn.Module):
    """Decorates a pathway with shunting activation and transmitter gating.

    Args:
        pathway: The wrapped pathway (anything with ``propagate``)
        shunting_config: Shunting parameters (default ShuntingConfig())
        transmitter_config: Transmitter parameters (default TransmitterConfig())
        time_scale: Scale whose typical step each propagation advances
        lateral_weights: Fixed [n, n] matrix, or a provider called with n at
            binding time (default: uniform off-surround)
        method: Integration scheme for both dynamics ("euler" or "rk4")
        track_transmitter_history: Record mean transmitter level per step
        enabled: Start with dynamics switched on
    """

    def __init__(
        self,
        pathway: Pathway,
        shunting_config: Optional[ShuntingConfig] = None,
        transmitter_config: Optional[TransmitterConfig] = None,
        time_scale: TimeScale = TimeScale.FAST,
        lateral_weights: Union[torch.Tensor, WeightProvider, None] = None,
        method: str = "euler",
        track_transmitter_history: bool = False,
        enabled: bool = True,
    ):
        super().__init__()
        if not callable(getattr(pathway, "propagate", None)):
            raise ComponentError(
                "TemporalDynamicsPathway", f"{type(pathway).__name__} has no propagate() method"
            )
        self.pathway = pathway
        self.shunting_config = shunting_config or ShuntingConfig()
        self.transmitter_config = transmitter_config or TransmitterConfig()
        self.time_scale = time_scale
        self._weight_source = lateral_weights if lateral_weights is not None else surround_inhibition_weights

        self.shunting = ShuntingDynamics(self.shunting_config, method=method)
        self.transmitter = TransmitterDynamics(
            self.transmitter_config,
            method=method,
            track_history=track_transmitter_history,
        )

        self._enabled = enabled
        self._shunting: Optional[ShuntingState] = None
        self._transmitter: Optional[TransmitterState] = None
        self.propagation_count = 0
        self.last_output: Optional[torch.Tensor] = None

    # =========================================================================
    # Identity (pass-through to the wrapped pathway)
    # =========================================================================

    @property
    def pathway_id(self) -> str:
        return self.pathway.pathway_id

    @property
    def source_id(self) -> str:
        return self.pathway.source_id

    @property
    def target_id(self) -> str:
        return self.pathway.target_id

    @property
    def pathway_type(self) -> PathwayType:
        return self.pathway.pathway_type

    # =========================================================================
    # Enable / disable
    # =========================================================================

    @property
    def temporal_dynamics_enabled(self) -> bool:
        return self._enabled

    def set_temporal_dynamics_enabled(self, enabled: bool) -> None:
        """Switch dynamics on or off. State is kept while disabled."""
        self._enabled = bool(enabled)

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def is_bound(self) -> bool:
        """Whether state has been sized by a first propagation."""
        return self._shunting is not None

    @property
    def dimension(self) -> int:
        return self._shunting.dimension if self._shunting is not None else 0

    @property
    def shunting_state(self) -> ShuntingState:
        if self._shunting is None:
            return ShuntingState.empty()
        return self._shunting

    @property
    def transmitter_state(self) -> TransmitterState:
        if self._transmitter is None:
            return TransmitterState.empty()
        return self._transmitter

    def _bind(self, signal: torch.Tensor) -> None:
        """Create zero shunting and full transmitter state sized to ``signal``.

        Each state takes the dtype and device of its own config.
        """
        n = signal.shape[0]
        self._shunting = self.shunting.initial_state(n)
        self._transmitter = self.transmitter.initial_state(n)
        reference = self._shunting.activations
        weights = self._weight_source
        if callable(weights) and not isinstance(weights, torch.Tensor):
            weights = weights(n)
        self.shunting.lateral_weights = weights.to(dtype=reference.dtype, device=reference.device)
        logger.debug("%s bound temporal dynamics to dimension %d", self.pathway_id, n)

    # =========================================================================
    # Propagation
    # =========================================================================

    def propagate(
        self,
        signal: PatternLike,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        """Propagate ``signal`` through shunting, gating and the wrapped pathway.

        Raises:
            InvalidArgumentError: If signal is None, not 1D or non-finite
            DimensionMismatchError: If signal size differs from bound state
        """
        if not self._enabled:
            return self.pathway.propagate(signal, params)

        signal = as_pattern(signal, name="signal")
        if self._shunting is None:
            self._bind(signal)
        elif signal.shape[0] != self.dimension:
            raise DimensionMismatchError(
                f"[{self.pathway_id}] signal has {signal.shape[0]} elements, "
                f"temporal state has {self.dimension}"
            )

        dt = self.time_scale.typical_time_step
        activations = self._shunting.activations
        signal = signal.to(dtype=activations.dtype, device=activations.device)

        self._shunting = self.shunting.step(self._shunting.with_inputs(signal), dt)
        gated = self._shunting.activations * self._transmitter.levels.to(activations.dtype)
        self._transmitter = self.transmitter.step(self._transmitter.with_signals(signal), dt)

        self.propagation_count += 1
        output = self.pathway.propagate(gated, params)
        self.last_output = output
        return output

    def forward(
        self,
        signal: PatternLike,
        params: Optional[PathwayConfig] = None,
    ) -> torch.Tensor:
        return self.propagate(signal, params)

    # =========================================================================
    # Explicit time evolution
    # =========================================================================

    def update_dynamics(self, dt: float) -> None:
        """Advance both dynamics by ``dt`` with the most recent inputs held.

        Before the first propagation there is nothing to evolve; a warning
        is issued and the call is ignored.
        """
        dt = validate_time_step(dt)
        if self._shunting is None:
            warnings.warn(
                f"update_dynamics() called on {self.pathway_id} before any propagation; "
                "state is unbound and nothing was evolved.",
                RuntimeWarning,
                stacklevel=2,
            )
            return
        self._shunting = self.shunting.step(self._shunting, dt)
        self._transmitter = self.transmitter.step(self._transmitter, dt)

    def evolve_transmitters(self, dt: float) -> None:
        """Advance only the slow transmitter gates by ``dt``."""
        dt = validate_time_step(dt)
        if self._transmitter is None:
            return
        self._transmitter = self.transmitter.step(self._transmitter, dt)

    def reset_dynamics(self) -> None:
        """Return X to zero and Z to the initial level; the wrapped pathway is untouched."""
        if self._shunting is None:
            return
        n = self.dimension
        self._shunting = self.shunting.initial_state(n)
        self._transmitter = self.transmitter.initial_state(n)
        logger.debug("%s reset temporal dynamics", self.pathway_id)

    def reset_state(self) -> None:
        """Unbind the dynamics state entirely (next propagation re-binds)."""
        self.reset_standard_state()
        self.propagation_count = 0
        self.last_output = None

    # =========================================================================
    # Convergence
    # =========================================================================

    def has_reached_equilibrium(self, threshold: float = DEFAULT_EQUILIBRIUM_THRESHOLD) -> bool:
        """True when max |dX/dt| and max |dZ/dt| are both below ``threshold``.

        An unbound pathway has no pending dynamics and counts as settled.
        """
        if self._shunting is None:
            return True
        return (
            self.shunting.has_converged(self._shunting, threshold)
            and self.transmitter.has_converged(self._transmitter, threshold)
        )

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def get_diagnostics(self) -> Dict[str, float]:
        shunting = self._shunting.activations if self._shunting is not None else None
        levels = self._transmitter.levels if self._transmitter is not None else None

        diagnostics: Dict[str, float] = {
            "enabled": float(self._enabled),
            "dimension": self.dimension,
            "propagation_count": self.propagation_count,
            "time_step": self.time_scale.typical_time_step,
        }
        diagnostics.update(self.activity_diagnostics(shunting, prefix="shunting"))
        diagnostics.update(self.trace_diagnostics(levels, prefix="transmitter"))
        diagnostics["transmitter_depleted_fraction"] = (
            self.transmitter.depleted_fraction(self._transmitter)
            if self._transmitter is not None
            else 0.0
        )
        diagnostics["shunting_derivative_max"] = (
            self.shunting.derivative_magnitude(self._shunting)
            if self._shunting is not None
            else 0.0
        )
        return diagnostics

    def extra_repr(self) -> str:
        return (
            f"pathway={self.pathway_id!r}, time_scale={self.time_scale.name}, "
            f"enabled={self._enabled}, dimension={self.dimension}"
        )


__all__ = ["TemporalDynamicsPathway", "WeightProvider"]
