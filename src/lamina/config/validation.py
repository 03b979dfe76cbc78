"""
Declarative validation of component configs.

A config lists, per field, the names of the rules its value must satisfy;
``validate_config`` runs them all when the config is built and reports
every violation in a single ConfigValidationError.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Tuple

from lamina.errors import ConfigurationError

Rule = Callable[[Any, str], None]


class ConfigValidationError(ConfigurationError):
    """Raised when a config violates one or more of its rules."""


class ValidatorRegistry:
    """Named field rules, looked up by the configs' ``_validation_rules``.

    Example:
        >>> check = ValidatorRegistry.get_validator("probability")
        >>> check(0.8, "vigilance")  # passes
        >>> check(1.2, "vigilance")  # raises ConfigValidationError
    """

    _validators: Dict[str, Rule] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[Rule], Rule]:
        """Decorator registering ``rule`` under ``name``."""

        def decorator(rule: Rule) -> Rule:
            cls._validators[name] = rule
            return rule

        return decorator

    @classmethod
    def get_validator(cls, name: str) -> Rule:
        try:
            return cls._validators[name]
        except KeyError:
            raise ValueError(
                f"Unknown validation rule: {name} (known: {sorted(cls._validators)})"
            ) from None


def _numeric(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(f"{name} must be numeric, got {type(value).__name__}")
    return value


@ValidatorRegistry.register("positive")
def _positive(value: Any, name: str) -> None:
    if _numeric(value, name) <= 0:
        raise ConfigValidationError(f"{name}={value} must be positive")


@ValidatorRegistry.register("non_negative")
def _non_negative(value: Any, name: str) -> None:
    if _numeric(value, name) < 0:
        raise ConfigValidationError(f"{name}={value} must be non-negative")


@ValidatorRegistry.register("finite")
def _finite(value: Any, name: str) -> None:
    if not math.isfinite(_numeric(value, name)):
        raise ConfigValidationError(f"{name}={value} must be finite")


@ValidatorRegistry.register("positive_integer")
def _positive_integer(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise ConfigValidationError(f"{name}={value} must be a positive integer")


@ValidatorRegistry.register("probability")
def _probability(value: Any, name: str) -> None:
    if not 0.0 <= _numeric(value, name) <= 1.0:
        raise ConfigValidationError(f"{name}={value} must lie in [0, 1]")


@ValidatorRegistry.register("unit_rate")
def _unit_rate(value: Any, name: str) -> None:
    if not 0.0 < _numeric(value, name) <= 1.0:
        raise ConfigValidationError(f"{name}={value} must lie in (0, 1]")


class ValidatedConfig:
    """Mixin running ``_validation_rules`` and ``_validate_relations``.

    Subclasses are dataclasses that call ``self.validate_config()`` from
    ``__post_init__``. Field rules run first; cross-field relations are
    only checked once every field is individually valid.
    """

    _validation_rules: Dict[str, Tuple[str, ...]] = {}

    def _validate_relations(self) -> List[str]:
        return []

    def validate_config(self) -> None:
        errors: List[str] = []
        for field_name, rules in self._validation_rules.items():
            if not hasattr(self, field_name):
                errors.append(f"rule given for unknown field {field_name}")
                continue
            value = getattr(self, field_name)
            for rule in rules:
                try:
                    ValidatorRegistry.get_validator(rule)(value, field_name)
                except ConfigValidationError as e:
                    errors.append(str(e))
                    break

        if not errors:
            errors.extend(self._validate_relations())

        if errors:
            raise ConfigValidationError(
                f"Invalid {type(self).__name__}:\n" + "\n".join(f"  - {e}" for e in errors)
            )


__all__ = [
    "ConfigValidationError",
    "ValidatorRegistry",
    "ValidatedConfig",
]
