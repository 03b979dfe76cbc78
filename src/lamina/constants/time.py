# pyright: strict
"""
Time conversion constants for the circuit dynamics.

Time scales are described in milliseconds (as in the neuroscience
literature) while the integrators step in seconds.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

# ============================================================================
# TIME UNIT CONVERSIONS
# ============================================================================

MS_PER_SECOND = 1000.0
"""Milliseconds per second (1000.0 ms/s)."""

SECONDS_PER_MS = 1.0 / 1000.0
"""Seconds per millisecond (0.001 s/ms)."""

# ============================================================================
# NUMERICAL TOLERANCES
# ============================================================================

TIMESTAMP_TOLERANCE = 1e-6
"""Two chunk items closer than this in time are treated as the same event."""

DEFAULT_EQUILIBRIUM_THRESHOLD = 1e-4
"""Max |derivative| below which dynamics count as settled."""

__all__ = [
    "MS_PER_SECOND",
    "SECONDS_PER_MS",
    "TIMESTAMP_TOLERANCE",
    "DEFAULT_EQUILIBRIUM_THRESHOLD",
]
