"""
Habituative transmitter gates - use-dependent depletion and recovery.

Each channel carries a transmitter pool Z in [0, 1] that multiplies the
signal it transmits. The pool recovers toward full availability at rate
epsilon and is consumed by the presynaptic signal S:

    dZ/dt = epsilon * (1 - Z) - Z * (lambda * S + mu * S^2)

Biological intuition:
- Z = 1.0: transmitter fully available, signal passes unattenuated
- Sustained input depletes Z, so the channel's gain falls (habituation)
- During silence Z recovers with time constant 1/epsilon

The quadratic term makes strong signals deplete disproportionately
faster than weak ones. Over a sequence, items that arrive later meet
depleted gates, which produces the primacy gradient of working memory.

Equilibrium for constant S:

    Z_eq = epsilon / (epsilon + lambda * S + mu * S^2)

which is monotonically decreasing in S.

References:
- Grossberg (1968, 1972): Habituative transmitter gates
- Grossberg (1980): How does a brain build a cognitive code?
- Gaudiano & Grossberg (1991): Vector associative maps
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import torch

from lamina.config import BaseConfig, ValidatedConfig
from lamina.dynamics.integrator import BoundedIntegrator
from lamina.dynamics.timescale import TimeScale
from lamina.errors import InvalidArgumentError, validate_pattern, validate_same_dimension

DEFAULT_HISTORY_LIMIT = 100


@dataclass
class TransmitterConfig(BaseConfig, ValidatedConfig):
    """Configuration for habituative transmitter dynamics.

    Attributes:
        epsilon: Recovery rate toward full availability
        linear_depletion: Linear depletion coefficient (lambda)
        quadratic_depletion: Quadratic depletion coefficient (mu)
        initial_level: Level after reset (1.0 = fully available)
        depletion_threshold: Level below which a channel counts as depleted
        enable_quadratic: Include the mu * S^2 term
    """

    epsilon: float = 0.005
    linear_depletion: float = 0.1
    quadratic_depletion: float = 0.05
    initial_level: float = 1.0
    depletion_threshold: float = 0.2
    enable_quadratic: bool = True

    _validation_rules = {
        "epsilon": ("non_negative", "finite"),
        "linear_depletion": ("non_negative", "finite"),
        "quadratic_depletion": ("non_negative", "finite"),
        "initial_level": ("probability",),
        "depletion_threshold": ("probability",),
    }

    def __post_init__(self) -> None:
        self.validate_config()

    @classmethod
    def standard(cls) -> TransmitterConfig:
        return cls()

    @classmethod
    def linear(cls) -> TransmitterConfig:
        """Linear-only depletion (quadratic term disabled)."""
        return cls(enable_quadratic=False)

    def depletion_rate(self, signal: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
        """Per-unit-transmitter depletion lambda*S (+ mu*S^2 when enabled)."""
        rate = self.linear_depletion * signal
        if self.enable_quadratic:
            rate = rate + self.quadratic_depletion * signal * signal
        return rate

    def equilibrium(self, signal: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
        """Steady-state level for constant signal S.

        With no recovery and no depletion (all rates zero) any level is a
        fixed point; the initial level is reported in that case.
        """
        depletion = self.depletion_rate(signal)
        if isinstance(depletion, torch.Tensor):
            denom = self.epsilon + depletion
            safe = torch.where(denom > 0, denom, torch.ones_like(denom))
            return torch.where(
                denom > 0,
                self.epsilon / safe,
                torch.full_like(depletion, self.initial_level),
            )
        denom = self.epsilon + depletion
        if denom <= 0:
            return self.initial_level
        return self.epsilon / denom

    def is_depleted(self, level: float) -> bool:
        return level < self.depletion_threshold


@dataclass(frozen=True, eq=False)
class TransmitterState:
    """Transmitter levels, their presynaptic signals and an optional trace.

    ``depletion_history`` holds the mean level after each recorded step,
    oldest first.
    """

    levels: torch.Tensor
    signals: torch.Tensor
    depletion_history: Optional[Tuple[float, ...]] = None

    def __post_init__(self) -> None:
        validate_pattern(self.levels, "levels", allow_empty=True)
        validate_pattern(self.signals, "signals", allow_empty=True)
        validate_same_dimension(self.levels, self.signals, ("levels", "signals"))

    @classmethod
    def full(
        cls,
        dimension: int,
        level: float = 1.0,
        dtype: torch.dtype = torch.float32,
        device: Union[str, torch.device] = "cpu",
    ) -> TransmitterState:
        """Fully available transmitter with no presynaptic signal."""
        levels = torch.full((dimension,), level, dtype=dtype, device=device)
        return cls(levels, torch.zeros(dimension, dtype=dtype, device=device))

    @classmethod
    def empty(cls) -> TransmitterState:
        return cls.full(0)

    @property
    def dimension(self) -> int:
        return int(self.levels.shape[0])

    def get_level(self, index: int) -> float:
        return float(self.levels[index].item())

    def mean_level(self) -> float:
        if self.dimension == 0:
            return 0.0
        return float(self.levels.mean().item())

    def with_signals(self, signals: torch.Tensor) -> TransmitterState:
        return TransmitterState(
            self.levels,
            signals.to(dtype=self.levels.dtype, device=self.levels.device),
            self.depletion_history,
        )

    def add(self, other: TransmitterState) -> TransmitterState:
        return TransmitterState(
            self.levels + other.levels,
            self.signals + other.signals,
            self.depletion_history,
        )

    def scale(self, factor: float) -> TransmitterState:
        return TransmitterState(
            self.levels * factor, self.signals * factor, self.depletion_history
        )

    def clamp(self, lower: float = 0.0, upper: float = 1.0) -> TransmitterState:
        return TransmitterState(
            self.levels.clamp(lower, upper), self.signals, self.depletion_history
        )

    def record(self, limit: int = DEFAULT_HISTORY_LIMIT) -> TransmitterState:
        """Append the current mean level to the history (bounded to ``limit``)."""
        history = (self.depletion_history or ()) + (self.mean_level(),)
        return TransmitterState(self.levels, self.signals, history[-limit:])


def transmitter_derivative(
    levels: torch.Tensor,
    signals: torch.Tensor,
    config: TransmitterConfig,
) -> torch.Tensor:
    """Evaluate dZ/dt = eps*(1 - Z) - Z*(lambda*S + mu*S^2) element-wise."""
    recovery = config.epsilon * (1.0 - levels)
    depletion = levels * config.depletion_rate(signals)
    derivative = recovery - depletion

    limit = torch.finfo(derivative.dtype).max
    return torch.nan_to_num(derivative, nan=0.0, posinf=limit, neginf=-limit)


class TransmitterDynamics:
    """Slow habituative gating of one field of channels.

    Args:
        config: Transmitter parameters (defaults to TransmitterConfig())
        method: Integration scheme, "euler" or "rk4"
        track_history: Record the mean level after every step
        history_limit: Maximum length of the recorded trace
    """

    time_scale = TimeScale.SLOW

    def __init__(
        self,
        config: Optional[TransmitterConfig] = None,
        method: str = "euler",
        track_history: bool = False,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.config = config or TransmitterConfig()
        self.track_history = track_history
        self.history_limit = history_limit
        self.integrator = BoundedIntegrator(method, bounds=lambda s: s.clamp(0.0, 1.0))

    def initial_state(self, dimension: int) -> TransmitterState:
        """Levels at ``initial_level``, in the config's dtype and device."""
        return TransmitterState.full(
            dimension,
            self.config.initial_level,
            dtype=self.config.get_torch_dtype(),
            device=self.config.get_torch_device(),
        )

    def derivative(self, state: TransmitterState) -> TransmitterState:
        dz = transmitter_derivative(state.levels, state.signals, self.config)
        return TransmitterState(dz, torch.zeros_like(state.signals))

    def step(self, state: TransmitterState, dt: float) -> TransmitterState:
        new_state = self.integrator.step(state, self.derivative, dt)
        if self.track_history:
            new_state = new_state.record(self.history_limit)
        return new_state

    def evolve(self, state: TransmitterState, dt: float, n_steps: int) -> TransmitterState:
        if not self.track_history:
            return self.integrator.evolve(state, self.derivative, dt, n_steps)
        if n_steps < 0:
            raise InvalidArgumentError(f"n_steps={n_steps} must be non-negative")
        for _ in range(n_steps):
            state = self.step(state, dt)
        return state

    def equilibrium(self, signal: Union[float, torch.Tensor]) -> Union[float, torch.Tensor]:
        return self.config.equilibrium(signal)

    def derivative_magnitude(self, state: TransmitterState) -> float:
        if state.dimension == 0:
            return 0.0
        return float(self.derivative(state).levels.abs().max().item())

    def has_converged(self, state: TransmitterState, threshold: float) -> bool:
        return self.derivative_magnitude(state) < threshold

    def depleted_fraction(self, state: TransmitterState) -> float:
        """Fraction of channels below the depletion threshold."""
        if state.dimension == 0:
            return 0.0
        depleted = state.levels < self.config.depletion_threshold
        return float(depleted.float().mean().item())


__all__ = [
    "TransmitterConfig",
    "TransmitterState",
    "TransmitterDynamics",
    "transmitter_derivative",
]
