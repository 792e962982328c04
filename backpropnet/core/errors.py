"""Exception taxonomy for BackpropNet."""

from __future__ import annotations


class BackpropNetError(Exception):
    """Base class for every error raised by the engine."""


class ConfigError(BackpropNetError, ValueError):
    """Invalid architecture or hyperparameters, raised at construction."""


class ShapeError(BackpropNetError, ValueError):
    """Matrix or vector dimensions do not line up."""


class NumericInstabilityWarning(RuntimeWarning):
    """Extreme pre-activations were clamped instead of overflowing."""


__all__ = [
    "BackpropNetError",
    "ConfigError",
    "ShapeError",
    "NumericInstabilityWarning",
]
