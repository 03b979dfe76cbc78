"""
Core Utilities for Lamina.

This module provides common pattern helpers used across the codebase
to reduce code duplication and ensure consistency.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np
import torch

from lamina.errors import validate_pattern

PatternLike = Union[torch.Tensor, np.ndarray, Sequence[float]]
"""Anything that can be turned into a 1D pattern tensor."""


def as_pattern(
    values: PatternLike,
    name: str = "pattern",
    dtype: Optional[torch.dtype] = None,
    device: Optional[Union[str, torch.device]] = None,
) -> torch.Tensor:
    """Convert ``values`` into a validated 1D floating point tensor.

    Tensors are passed through (cast only when ``dtype``/``device`` differ);
    NumPy arrays and sequences of floats are copied into a new tensor.

    Args:
        values: Pattern data
        name: Name used in error messages
        dtype: Target dtype (default: keep tensor dtype, float32 otherwise)
        device: Target device (default: keep tensor device, cpu otherwise)

    Returns:
        1D tensor

    Raises:
        InvalidArgumentError: If values is None, not 1D, empty or non-finite

    Example:
        >>> as_pattern([0.5, 0.25])
        tensor([0.5000, 0.2500])
    """
    if values is None:
        return validate_pattern(values, name=name)

    if isinstance(values, torch.Tensor):
        tensor = values
        if not tensor.is_floating_point():
            tensor = tensor.to(torch.float32)
    else:
        tensor = torch.as_tensor(np.asarray(values, dtype=np.float64))
        tensor = tensor.to(torch.float32)

    if dtype is not None or device is not None:
        tensor = tensor.to(device=device or tensor.device, dtype=dtype or tensor.dtype)

    return validate_pattern(tensor, name=name)


def clamp_pattern(
    pattern: torch.Tensor,
    lower: float = 0.0,
    upper: float = 1.0,
    inplace: bool = False,
) -> torch.Tensor:
    """Clamp a pattern to ``[lower, upper]``.

    Example:
        >>> clamp_pattern(torch.tensor([-0.2, 0.4, 1.3]))
        tensor([0.0000, 0.4000, 1.0000])
    """
    if inplace:
        return pattern.clamp_(lower, upper)
    return pattern.clamp(lower, upper)


def cosine_similarity_safe(
    a: torch.Tensor,
    b: torch.Tensor,
    eps: float = 1e-8,
) -> float:
    """Compute cosine similarity of two 1D patterns with safe epsilon handling.

    Two zero vectors have similarity 0.0 (never NaN).

    Args:
        a: First pattern
        b: Second pattern
        eps: Small constant for numerical stability (default: 1e-8)

    Returns:
        Cosine similarity as a Python float in [-1, 1]
    """
    norm_a = a.norm().item()
    norm_b = b.norm().item()
    if norm_a < eps or norm_b < eps:
        return 0.0
    similarity = torch.dot(a, b).item() / (norm_a * norm_b)
    return max(-1.0, min(1.0, similarity))


def pattern_magnitude(pattern: torch.Tensor) -> float:
    """L2 norm of a pattern as a Python float."""
    return float(pattern.norm().item())


__all__ = [
    "PatternLike",
    "as_pattern",
    "clamp_pattern",
    "cosine_similarity_safe",
    "pattern_magnitude",
]
