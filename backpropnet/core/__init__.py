"""Core numerical primitives for BackpropNet."""

from . import activations, errors, init, ops, types

__all__ = ["activations", "errors", "init", "ops", "types"]
