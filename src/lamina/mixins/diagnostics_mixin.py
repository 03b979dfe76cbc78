"""
Diagnostics Mixin for Lamina Components.

This module provides a reusable mixin that implements common diagnostic
patterns for pathways, layers and processors.

The mixin provides:
1. Activity statistics (mean, max, min, active fraction)
2. Trace statistics (norm, mean) for gating variables
3. Prefix handling so several blocks can share one dict

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from typing import Dict, Optional

import torch


class DiagnosticsMixin:
    """Mixin providing common diagnostic computation patterns.

    Add this mixin to any class that implements get_diagnostics() to
    reuse standard metric calculations.

    All methods are static or use only the provided arguments, so they
    work regardless of the class structure.
    """

    @staticmethod
    def activity_diagnostics(
        activity: Optional[torch.Tensor],
        prefix: str = "",
        active_threshold: float = 1e-3,
    ) -> Dict[str, float]:
        """Compute standard activity statistics.

        Args:
            activity: Activation vector (None or empty reports zeros)
            prefix: Prefix for metric names (e.g., "shunting" → "shunting_mean")
            active_threshold: Value above which a unit counts as active

        Returns:
            Dict with activity statistics
        """
        prefix = f"{prefix}_" if prefix else ""

        if activity is None or activity.numel() == 0:
            return {
                f"{prefix}mean": 0.0,
                f"{prefix}max": 0.0,
                f"{prefix}min": 0.0,
                f"{prefix}active_fraction": 0.0,
            }

        a = activity.detach()
        return {
            f"{prefix}mean": a.mean().item(),
            f"{prefix}max": a.max().item(),
            f"{prefix}min": a.min().item(),
            f"{prefix}active_fraction": (a > active_threshold).float().mean().item(),
        }

    @staticmethod
    def trace_diagnostics(
        trace: Optional[torch.Tensor],
        prefix: str = "",
    ) -> Dict[str, float]:
        """Compute norm and mean of a trace-like vector."""
        prefix = f"{prefix}_" if prefix else ""

        if trace is None or trace.numel() == 0:
            return {f"{prefix}norm": 0.0, f"{prefix}mean": 0.0}

        t = trace.detach()
        return {
            f"{prefix}norm": t.norm().item(),
            f"{prefix}mean": t.mean().item(),
        }


__all__ = ["DiagnosticsMixin"]
