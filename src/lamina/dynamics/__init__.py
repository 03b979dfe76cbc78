"""
Continuous-time dynamics: shunting activations, transmitter gates, integrators.
"""

from __future__ import annotations

from lamina.dynamics.integrator import BoundedIntegrator, IntegrableState, euler_step, rk4_step
from lamina.dynamics.shunting import (
    ShuntingConfig,
    ShuntingDynamics,
    ShuntingState,
    shunting_derivative,
)
from lamina.dynamics.timescale import TimeScale
from lamina.dynamics.transmitter import (
    TransmitterConfig,
    TransmitterDynamics,
    TransmitterState,
    transmitter_derivative,
)

__all__ = [
    "BoundedIntegrator",
    "IntegrableState",
    "euler_step",
    "rk4_step",
    "ShuntingConfig",
    "ShuntingDynamics",
    "ShuntingState",
    "shunting_derivative",
    "TimeScale",
    "TransmitterConfig",
    "TransmitterDynamics",
    "TransmitterState",
    "transmitter_derivative",
]
