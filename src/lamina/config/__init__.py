"""
Configuration infrastructure shared by all Lamina components.

Component-specific configs (ShuntingConfig, TransmitterConfig, ChunkingConfig,
...) live next to the component that uses them and build on these classes.
"""

from __future__ import annotations

from .base import BaseConfig
from .validation import ConfigValidationError, ValidatedConfig, ValidatorRegistry

__all__ = [
    "BaseConfig",
    "ConfigValidationError",
    "ValidatedConfig",
    "ValidatorRegistry",
]
