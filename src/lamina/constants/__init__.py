"""Shared constants for Lamina."""

from __future__ import annotations

from .time import (
    DEFAULT_EQUILIBRIUM_THRESHOLD,
    MS_PER_SECOND,
    SECONDS_PER_MS,
    TIMESTAMP_TOLERANCE,
)

__all__ = [
    "MS_PER_SECOND",
    "SECONDS_PER_MS",
    "TIMESTAMP_TOLERANCE",
    "DEFAULT_EQUILIBRIUM_THRESHOLD",
]
