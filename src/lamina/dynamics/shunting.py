"""
Shunting (membrane-equation) dynamics - Grossberg's bounded activation model.

Shunting networks replace additive input summation with multiplicative
gating by the distance to the activation bounds:

    dX_i/dt = -A * X_i + (B - X_i) * S_i - X_i * I_i

where
- A: passive decay rate
- B: upper bound (saturation level)
- S_i: excitatory input to unit i (bottom-up signal plus self-excitation)
- I_i: inhibitory input to unit i (lateral inhibition from neighbours,
  I_i = sum_{j != i} I_ij, supplied by the enclosing layer's connectivity)

Key properties:
1. Boundedness: excitation vanishes as X -> B and inhibition vanishes as
   X -> 0, so X stays in [0, B] for any non-negative inputs.
2. Normalisation: the total activity of a recurrent field is conserved,
   implementing contrast enhancement without saturation.
3. Equilibrium (no lateral term): X_eq = B * S / (A + S), a Weber-law
   ratio that is used as a test oracle.

References:
- Grossberg (1973): Contour enhancement, short-term memory, and constancies
  in reverberating neural networks
- Grossberg (1980): How does a brain build a cognitive code?
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import torch

from lamina.config import BaseConfig, ValidatedConfig
from lamina.dynamics.integrator import BoundedIntegrator
from lamina.dynamics.timescale import TimeScale
from lamina.errors import DimensionMismatchError, validate_pattern, validate_same_dimension


@dataclass
class ShuntingConfig(BaseConfig, ValidatedConfig):
    """Configuration for shunting dynamics.

    Attributes:
        decay_rate: Passive decay A (>= 0)
        upper_bound: Saturation level B
        lower_bound: Floor of the activation range
        lateral_inhibition: Gain on the off-surround inhibitory sum
        self_excitation: Gain of the on-centre recurrent excitation
    """

    decay_rate: float = 0.1
    upper_bound: float = 1.0
    lower_bound: float = 0.0
    lateral_inhibition: float = 0.0
    self_excitation: float = 0.0

    _validation_rules = {
        "decay_rate": ("non_negative", "finite"),
        "upper_bound": ("non_negative", "finite"),
        "lower_bound": ("non_negative", "finite"),
        "lateral_inhibition": ("non_negative", "finite"),
        "self_excitation": ("non_negative", "finite"),
    }

    def __post_init__(self) -> None:
        self.validate_config()

    def _validate_relations(self) -> list:
        if self.upper_bound <= self.lower_bound:
            return [
                f"upper_bound ({self.upper_bound}) must exceed "
                f"lower_bound ({self.lower_bound})"
            ]
        return []

    @classmethod
    def standard(cls) -> ShuntingConfig:
        """On-centre off-surround field used throughout the laminar circuit."""
        return cls(
            decay_rate=0.1,
            upper_bound=1.0,
            lower_bound=0.0,
            lateral_inhibition=0.5,
            self_excitation=0.2,
        )

    def equilibrium(self, signal: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
        """Steady state B*S/(A+S) for constant input S without lateral terms.

        Returns 0 where A + S == 0 (no input and no decay).
        """
        if isinstance(signal, torch.Tensor):
            denom = self.decay_rate + signal
            safe = torch.where(denom > 0, denom, torch.ones_like(denom))
            return torch.where(denom > 0, self.upper_bound * signal / safe, torch.zeros_like(signal))
        denom = self.decay_rate + signal
        if denom <= 0:
            return 0.0
        return self.upper_bound * signal / denom


@dataclass(frozen=True, eq=False)
class ShuntingState:
    """Activations of a shunting field plus their instantaneous inputs.

    Immutable: every transformation returns a new state. A derivative is a
    ShuntingState whose ``excitatory_inputs`` are zero, so ``state.add(
    derivative.scale(dt))`` leaves the inputs untouched.
    """

    activations: torch.Tensor
    excitatory_inputs: torch.Tensor

    def __post_init__(self) -> None:
        validate_pattern(self.activations, "activations", allow_empty=True)
        validate_pattern(self.excitatory_inputs, "excitatory_inputs", allow_empty=True)
        validate_same_dimension(
            self.activations, self.excitatory_inputs, ("activations", "excitatory_inputs")
        )

    @classmethod
    def zeros(
        cls,
        dimension: int,
        dtype: torch.dtype = torch.float32,
        device: Union[str, torch.device] = "cpu",
    ) -> ShuntingState:
        """Resting state: zero activation, zero input."""
        zeros = torch.zeros(dimension, dtype=dtype, device=device)
        return cls(zeros, zeros.clone())

    @classmethod
    def empty(cls) -> ShuntingState:
        """Dimension-0 state reported before lazy binding."""
        return cls.zeros(0)

    @property
    def dimension(self) -> int:
        return int(self.activations.shape[0])

    def get_excitatory_input(self, index: int) -> float:
        return float(self.excitatory_inputs[index].item())

    def with_inputs(self, excitatory_inputs: torch.Tensor) -> ShuntingState:
        """Same activations, new excitatory drive."""
        inputs = excitatory_inputs.to(self.activations.dtype)
        return ShuntingState(self.activations, inputs)

    def add(self, other: ShuntingState) -> ShuntingState:
        return ShuntingState(
            self.activations + other.activations,
            self.excitatory_inputs + other.excitatory_inputs,
        )

    def scale(self, factor: float) -> ShuntingState:
        return ShuntingState(self.activations * factor, self.excitatory_inputs * factor)

    def clamp(self, lower: float, upper: float) -> ShuntingState:
        return ShuntingState(self.activations.clamp(lower, upper), self.excitatory_inputs)


def shunting_derivative(
    activations: torch.Tensor,
    excitatory: torch.Tensor,
    inhibitory: Optional[torch.Tensor],
    config: ShuntingConfig,
) -> torch.Tensor:
    """Evaluate dX/dt = -A*X + (B - X)*S - X*I element-wise.

    Args:
        activations: Current activations X
        excitatory: Excitatory input S (already including self-excitation)
        inhibitory: Inhibitory sum I, or None for no lateral term
        config: Shunting parameters

    Returns:
        Derivative tensor, always finite for finite inputs
    """
    decay = -config.decay_rate * activations
    excitation = (config.upper_bound - activations) * excitatory
    derivative = decay + excitation
    if inhibitory is not None:
        derivative = derivative - activations * inhibitory

    # Overflow guard for extreme (but finite) drive
    limit = torch.finfo(derivative.dtype).max
    return torch.nan_to_num(derivative, nan=0.0, posinf=limit, neginf=-limit)


class ShuntingDynamics:
    """Fast shunting dynamics of one field, with optional lateral connectivity.

    The excitatory drive of unit i is S_i + self_excitation * X_i; the
    inhibitory drive is lateral_inhibition * (W @ X)_i, where W is a
    connection-weight matrix owned by the enclosing layer (zero diagonal).

    Args:
        config: Shunting parameters (defaults to ShuntingConfig())
        lateral_weights: Optional [n, n] connection matrix
        method: Integration scheme, "euler" or "rk4"

    Example:
        >>> dynamics = ShuntingDynamics(ShuntingConfig(decay_rate=0.1))
        >>> state = ShuntingState.zeros(4).with_inputs(torch.full((4,), 0.8))
        >>> state = dynamics.evolve(state, dt=0.01, n_steps=1000)
        >>> state.activations  # ~ 0.8 / 0.9
    """

    time_scale = TimeScale.FAST

    def __init__(
        self,
        config: Optional[ShuntingConfig] = None,
        lateral_weights: Optional[torch.Tensor] = None,
        method: str = "euler",
    ):
        self.config = config or ShuntingConfig()
        self.lateral_weights = lateral_weights
        self.integrator = BoundedIntegrator(
            method,
            bounds=lambda s: s.clamp(self.config.lower_bound, self.config.upper_bound),
        )

    def initial_state(self, dimension: int) -> ShuntingState:
        """Resting state in the config's dtype and device."""
        return ShuntingState.zeros(
            dimension,
            dtype=self.config.get_torch_dtype(),
            device=self.config.get_torch_device(),
        )

    def inhibition(self, activations: torch.Tensor) -> Optional[torch.Tensor]:
        """Lateral inhibitory sum for the current activations (None if unconnected)."""
        if self.lateral_weights is None or self.config.lateral_inhibition == 0.0:
            return None
        weights = self.lateral_weights.to(activations.dtype)
        n = activations.shape[0]
        if tuple(weights.shape) != (n, n):
            raise DimensionMismatchError(
                f"lateral_weights has shape {tuple(weights.shape)}, expected ({n}, {n})"
            )
        return self.config.lateral_inhibition * (weights @ activations)

    def derivative(self, state: ShuntingState) -> ShuntingState:
        """Time derivative of ``state`` as a ShuntingState with zero input part."""
        x = state.activations
        excitatory = state.excitatory_inputs
        if self.config.self_excitation > 0.0:
            excitatory = excitatory + self.config.self_excitation * x
        dx = shunting_derivative(x, excitatory, self.inhibition(x), self.config)
        return ShuntingState(dx, torch.zeros_like(state.excitatory_inputs))

    def step(self, state: ShuntingState, dt: float) -> ShuntingState:
        return self.integrator.step(state, self.derivative, dt)

    def evolve(self, state: ShuntingState, dt: float, n_steps: int) -> ShuntingState:
        return self.integrator.evolve(state, self.derivative, dt, n_steps)

    def equilibrium(self, signal: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
        return self.config.equilibrium(signal)

    def derivative_magnitude(self, state: ShuntingState) -> float:
        """Max |dX/dt| over all units (0.0 for an unbound state)."""
        if state.dimension == 0:
            return 0.0
        return float(self.derivative(state).activations.abs().max().item())

    def has_converged(self, state: ShuntingState, threshold: float) -> bool:
        return self.derivative_magnitude(state) < threshold


__all__ = [
    "ShuntingConfig",
    "ShuntingState",
    "ShuntingDynamics",
    "shunting_derivative",
]
