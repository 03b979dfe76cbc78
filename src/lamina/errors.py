"""
Custom exception classes and validation utilities for Lamina.

This module provides:
1. Hierarchical exception classes for different error categories
2. Validation utilities for patterns fed into the circuit dynamics
3. Consistent error message formatting across components

Exception Hierarchy:
====================
LaminaError (base)
├── InvalidArgumentError - Bad inputs raised at the offending call
│   ├── DimensionMismatchError - Paired vectors of different size
│   └── ConfigurationError - Invalid configuration parameters
│       └── ConfigValidationError - Declarative rule failures
└── ComponentError - Errors inside a pathway, layer or processor

Degenerate numerics (zero match denominator, zero total weight) are NOT
errors: the components return a defined sentinel (0.0 or a zero vector).

Usage Examples:
===============
    # Validate an input pattern
    signal = validate_pattern(signal, name="signal")

    # Paired vectors must agree
    validate_same_dimension(input_pattern, expectation, ("input", "expectation"))

    # Weights and thresholds in [0, 1]
    validate_unit_interval(weight, "context_weight")

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

import math
from typing import Tuple

import torch


# =============================================================================
# Exception Hierarchy
# =============================================================================


class LaminaError(Exception):
    """Base exception for all Lamina-specific errors.

    All custom exceptions in Lamina inherit from this class, enabling
    code to catch Lamina errors specifically:

        try:
            pathway.propagate(signal)
        except LaminaError as e:
            logger.error(f"Lamina error: {e}")
    """


class InvalidArgumentError(LaminaError, ValueError):
    """Invalid argument passed to a Lamina operation.

    Raised immediately at the call that introduced the bad value: ``None``
    patterns, non-finite values, wrong tensor rank, out-of-range settings.
    Inherits from ``ValueError`` so generic callers can still catch it.
    """


class DimensionMismatchError(InvalidArgumentError):
    """Paired vectors have different dimensions.

    Example:
        raise DimensionMismatchError("input has 4 elements, expectation has 6")
    """


class ConfigurationError(InvalidArgumentError):
    """Invalid configuration parameters.

    Raised when configuration values are out of valid range or incompatible
    with each other.

    Example:
        raise ConfigurationError("upper_bound (0.5) must exceed lower_bound (1.0)")
    """


class ComponentError(LaminaError):
    """Error in a circuit component (pathway, layer or processor).

    Args:
        component_name: Name of the component (e.g., "TemporalDynamicsPathway")
        message: Description of the error
    """

    def __init__(self, component_name: str, message: str):
        super().__init__(f"[{component_name}] {message}")
        self.component_name = component_name


# =============================================================================
# Validation Utilities
# =============================================================================


def validate_pattern(
    pattern: torch.Tensor,
    name: str = "pattern",
    allow_empty: bool = False,
) -> torch.Tensor:
    """Validate that a pattern is a finite 1D tensor.

    Checks:
    1. Not None
    2. Exactly one dimension (single-instance, no batch dimension)
    3. Contains no NaN or Inf values
    4. Non-empty unless ``allow_empty``

    Args:
        pattern: Tensor to validate
        name: Name for error messages
        allow_empty: Accept zero-length patterns

    Returns:
        The same tensor, for chaining

    Raises:
        InvalidArgumentError: If any check fails
    """
    if pattern is None:
        raise InvalidArgumentError(f"{name} must not be None")

    if not isinstance(pattern, torch.Tensor):
        raise InvalidArgumentError(
            f"{name} must be a torch.Tensor, got {type(pattern).__name__}"
        )

    if pattern.dim() != 1:
        raise InvalidArgumentError(
            f"{name} must be 1D, got shape {tuple(pattern.shape)}"
        )

    if pattern.numel() == 0 and not allow_empty:
        raise InvalidArgumentError(f"{name} must not be empty")

    if not torch.isfinite(pattern).all():
        raise InvalidArgumentError(f"{name} contains NaN or Inf values")

    return pattern


def validate_same_dimension(
    first: torch.Tensor,
    second: torch.Tensor,
    names: Tuple[str, str] = ("first", "second"),
) -> None:
    """Validate that two paired 1D patterns have the same dimension.

    Raises:
        DimensionMismatchError: If sizes differ
    """
    if first.shape[0] != second.shape[0]:
        raise DimensionMismatchError(
            f"Dimension mismatch: {names[0]} has {first.shape[0]} elements, "
            f"{names[1]} has {second.shape[0]}"
        )


def validate_unit_interval(value: float, name: str) -> float:
    """Validate that a scalar lies in the closed interval [0, 1].

    Raises:
        InvalidArgumentError: If value is NaN, Inf or outside [0, 1]
    """
    if value is None or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be numeric, got {type(value).__name__}")
    if not math.isfinite(value) or not (0.0 <= value <= 1.0):
        raise InvalidArgumentError(f"{name}={value} must be in [0, 1]")
    return float(value)


def validate_time_step(dt: float, name: str = "dt") -> float:
    """Validate that a time step is positive and finite.

    Raises:
        InvalidArgumentError: If dt <= 0 or not finite
    """
    if dt is None or not isinstance(dt, (int, float)):
        raise InvalidArgumentError(f"{name} must be numeric, got {type(dt).__name__}")
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidArgumentError(f"{name}={dt} must be positive and finite")
    return float(dt)


__all__ = [
    "LaminaError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ConfigurationError",
    "ComponentError",
    "validate_pattern",
    "validate_same_dimension",
    "validate_unit_interval",
    "validate_time_step",
]
