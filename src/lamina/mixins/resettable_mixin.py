"""
Resettable State Mixin for Lamina Components.

Provides a standard interface for resetting component state, reducing
inconsistencies in reset behavior across pathways, layers and coordinators.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from typing import List, Optional


class ResettableMixin:
    """Mixin for components with resettable state.

    Usage:
        class MyComponent(ResettableMixin, nn.Module):
            def __init__(self):
                super().__init__()
                self.activity = None

            def reset_state(self) -> None:
                '''Reset dynamic state, keep learned parameters.'''
                self.activity = None
    """

    def reset_state(self) -> None:
        """Reset internal state for a new sequence.

        Resets dynamic state (activations, transmitter levels, counters)
        while preserving learned parameters and configuration.

        Note:
            Subclasses should override this method to reset their
            specific state variables.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement reset_state()"
        )

    def reset_standard_state(self, state_attrs: Optional[List[str]] = None) -> None:
        """Helper to reset lazily bound state attributes to None.

        Args:
            state_attrs: Attribute names to reset. If None, uses the
                lazily bound dynamics states: ["_shunting", "_transmitter"]

        Note:
            Only resets attributes that exist on self.
            Silently skips missing attributes for flexibility.
        """
        if state_attrs is None:
            state_attrs = ["_shunting", "_transmitter"]

        for attr in state_attrs:
            if hasattr(self, attr):
                setattr(self, attr, None)


__all__ = ["ResettableMixin"]
