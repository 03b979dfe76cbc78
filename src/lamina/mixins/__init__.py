"""Reusable mixins for Lamina components."""

from __future__ import annotations

from .diagnostics_mixin import DiagnosticsMixin
from .resettable_mixin import ResettableMixin

__all__ = [
    "DiagnosticsMixin",
    "ResettableMixin",
]
