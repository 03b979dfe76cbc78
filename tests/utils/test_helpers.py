"""Shared test utilities for Lamina tests.

This module provides common helper functions for building patterns and
checking invariants, eliminating duplication across test files.

Usage:
======
    from tests.utils.test_helpers import (
        uniform_pattern,
        noisy_copy,
        one_hot_pattern,
        assert_pattern_valid,
    )

    # Ten units all at 0.8
    pattern = uniform_pattern(10, 0.8)

    # Similar pattern with small uniform noise
    similar = noisy_copy(pattern, noise=0.05)

    # Check a result is finite and bounded
    assert_pattern_valid(output, lower=0.0, upper=1.0)

Author: Lamina Project
Date: October 2026
"""

import torch

from lamina.temporal import ChunkItem


def uniform_pattern(size: int, value: float) -> torch.Tensor:
    """Pattern with every element equal to ``value``."""
    return torch.full((size,), float(value))


def one_hot_pattern(size: int, index: int, value: float = 1.0) -> torch.Tensor:
    """Pattern with a single active element (orthogonal to other indices)."""
    pattern = torch.zeros(size)
    pattern[index % size] = value
    return pattern


def noisy_copy(pattern: torch.Tensor, noise: float = 0.05) -> torch.Tensor:
    """Copy of ``pattern`` with uniform noise in [-noise, noise], clamped to [0, 1]."""
    perturbation = (torch.rand_like(pattern) * 2.0 - 1.0) * noise
    return (pattern + perturbation).clamp(0.0, 1.0)


def make_chunk_items(count: int, size: int = 4, start_time: float = 0.0, spacing: float = 0.01):
    """Coherent chunk items with decreasing activation.

    Item k has pattern uniform(0.8 - 0.01 k), activation 0.8 - 0.01 k,
    timestamp start_time + k * spacing and position k.
    """
    items = []
    for k in range(count):
        level = 0.8 - 0.01 * k
        items.append(
            ChunkItem(uniform_pattern(size, level), level, start_time + k * spacing, k)
        )
    return items


def assert_pattern_valid(
    pattern: torch.Tensor,
    lower: float = None,
    upper: float = None,
    name: str = "pattern",
) -> None:
    """Assert a pattern is 1D, finite and (optionally) within bounds."""
    assert pattern.dim() == 1, f"{name} should be 1D, got shape {tuple(pattern.shape)}"
    assert not torch.isnan(pattern).any(), f"{name} contains NaN"
    assert not torch.isinf(pattern).any(), f"{name} contains Inf"
    if lower is not None:
        assert pattern.min().item() >= lower - 1e-6, f"{name} below {lower}: {pattern.min().item()}"
    if upper is not None:
        assert pattern.max().item() <= upper + 1e-6, f"{name} above {upper}: {pattern.max().item()}"
