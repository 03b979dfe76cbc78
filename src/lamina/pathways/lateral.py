"""
Lateral connection-weight providers for on-centre off-surround fields.

The shunting equation receives its inhibitory sum from the enclosing
field's connectivity: I_i = sum_j W_ij * X_j with W_ii = 0. These helpers
build such matrices.
"""

from __future__ import annotations

import torch

from lamina.errors import InvalidArgumentError


def surround_inhibition_weights(
    size: int,
    dtype: torch.dtype = torch.float32,
    device: str = "cpu",
) -> torch.Tensor:
    """Uniform off-surround: every other unit inhibits with weight 1/(n-1).

    Each row sums to 1 (0 for a single unit), so the inhibitory sum is the
    mean activity of the rest of the field.

    Example:
        >>> surround_inhibition_weights(3)
        tensor([[0.0000, 0.5000, 0.5000],
                [0.5000, 0.0000, 0.5000],
                [0.5000, 0.5000, 0.0000]])
    """
    if size < 1:
        raise InvalidArgumentError(f"size={size} must be positive")
    if size == 1:
        return torch.zeros(1, 1, dtype=dtype, device=device)
    weights = torch.full((size, size), 1.0 / (size - 1), dtype=dtype, device=device)
    weights.fill_diagonal_(0.0)
    return weights


def gaussian_surround_weights(
    size: int,
    sigma: float = 1.0,
    dtype: torch.dtype = torch.float32,
    device: str = "cpu",
) -> torch.Tensor:
    """Distance-dependent off-surround with Gaussian fall-off.

    W_ij = exp(-(i - j)^2 / (2 sigma^2)) for i != j, rows normalised to sum
    to 1. Nearby units inhibit each other more strongly than distant ones.
    """
    if size < 1:
        raise InvalidArgumentError(f"size={size} must be positive")
    if sigma <= 0:
        raise InvalidArgumentError(f"sigma={sigma} must be positive")

    positions = torch.arange(size, dtype=dtype, device=device)
    distance = positions.unsqueeze(0) - positions.unsqueeze(1)
    weights = torch.exp(-(distance ** 2) / (2.0 * sigma ** 2))
    weights.fill_diagonal_(0.0)

    row_sums = weights.sum(dim=1, keepdim=True)
    return torch.where(row_sums > 0, weights / row_sums.clamp(min=1e-12), weights)


__all__ = [
    "surround_inhibition_weights",
    "gaussian_surround_weights",
]
