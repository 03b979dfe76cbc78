"""
Generic bounded integration of continuous-time dynamics.

Any state object that supports ``add(other)`` and ``scale(factor)`` can be
advanced here, given a function returning its time derivative (as a state
of the same type). Shunting and transmitter dynamics both use this module.

Two explicit schemes are provided:

- Euler: X(t+dt) = X + dt * f(X). First order, one derivative evaluation.
- RK4: classical fourth-order Runge-Kutta, four evaluations per step.

Both schemes share the same fixed points as the continuous equations, so
closed-form equilibria remain valid oracles. An optional ``bounds``
function projects states back into their admissible region: after every
step, and for RK4 also at every intermediate stage. The continuous
equations are self-bounding, the projection only removes discretisation
overshoot. Stiff drives (dt * (A + S) >> 1) would otherwise push the RK4
stages far outside the bounds, where the derivative overflows.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

from lamina.errors import InvalidArgumentError, validate_time_step

S = TypeVar("S", bound="IntegrableState")


class IntegrableState(Protocol):
    """State supporting the vector-space operations integrators need."""

    def add(self: S, other: S) -> S:
        ...

    def scale(self: S, factor: float) -> S:
        ...


DerivativeFn = Callable[[S], S]
BoundsFn = Callable[[S], S]


def _project(state: S, bounds: Optional[BoundsFn]) -> S:
    return bounds(state) if bounds is not None else state


def euler_step(
    state: S, derivative_fn: DerivativeFn, dt: float, bounds: Optional[BoundsFn] = None
) -> S:
    """Advance ``state`` by one explicit Euler step."""
    return _project(state.add(derivative_fn(state).scale(dt)), bounds)


def rk4_step(
    state: S, derivative_fn: DerivativeFn, dt: float, bounds: Optional[BoundsFn] = None
) -> S:
    """Advance ``state`` by one classical Runge-Kutta (RK4) step.

    Every stage state is projected by ``bounds``. The increments are scaled
    before they are summed, so four near-maximal slopes cannot overflow.
    """
    k1 = derivative_fn(state)
    k2 = derivative_fn(_project(state.add(k1.scale(dt / 2.0)), bounds))
    k3 = derivative_fn(_project(state.add(k2.scale(dt / 2.0)), bounds))
    k4 = derivative_fn(_project(state.add(k3.scale(dt)), bounds))
    increment = (
        k1.scale(dt / 6.0)
        .add(k2.scale(dt / 3.0))
        .add(k3.scale(dt / 3.0))
        .add(k4.scale(dt / 6.0))
    )
    return _project(state.add(increment), bounds)


_METHODS = {
    "euler": euler_step,
    "rk4": rk4_step,
}


class BoundedIntegrator:
    """Explicit integrator with an optional projection onto valid bounds.

    Args:
        method: "euler" (default) or "rk4"
        bounds: Function mapping a state to its clamped version, applied
            after every step

    Example:
        >>> integrator = BoundedIntegrator("euler", bounds=lambda s: s.clamp(0.0, 1.0))
        >>> state = integrator.evolve(state, dynamics.derivative, dt=0.01, n_steps=100)
    """

    def __init__(self, method: str = "euler", bounds: Optional[BoundsFn] = None):
        if method not in _METHODS:
            raise InvalidArgumentError(
                f"Unknown integration method '{method}'. Choose from: {sorted(_METHODS)}"
            )
        self.method = method
        self.bounds = bounds
        self._step_fn = _METHODS[method]

    def step(self, state: S, derivative_fn: DerivativeFn, dt: float) -> S:
        """Advance one step of size ``dt`` and apply the bounds."""
        dt = validate_time_step(dt)
        return self._step_fn(state, derivative_fn, dt, self.bounds)

    def evolve(self, state: S, derivative_fn: DerivativeFn, dt: float, n_steps: int) -> S:
        """Advance ``n_steps`` steps of size ``dt``."""
        if n_steps < 0:
            raise InvalidArgumentError(f"n_steps={n_steps} must be non-negative")
        for _ in range(n_steps):
            state = self.step(state, derivative_fn, dt)
        return state

    def __repr__(self) -> str:
        return f"BoundedIntegrator(method={self.method!r}, bounded={self.bounds is not None})"


__all__ = [
    "IntegrableState",
    "euler_step",
    "rk4_step",
    "BoundedIntegrator",
]
