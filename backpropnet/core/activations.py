"""Activation functions and their derivatives.

Every activation comes in two forms: a scalar function over ``float`` and an
``*_array`` wrapper that maps the scalar function over a vector or matrix with
:func:`backpropnet.core.ops.elementwise`. The module has no dependency on the
training engine so other networks can reuse it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict

import numpy as np

from .errors import ConfigError
from .ops import elementwise
from .types import Array

SIGMOID_CLAMP = 500.0
TANH_CLAMP = 20.0
DEFAULT_LEAKY_ALPHA = 0.01


def sigmoid(z: float) -> float:
    """Return ``1 / (1 + e^-z)``, saturating to 0/1 beyond +-500."""

    if z <= -SIGMOID_CLAMP:
        return 0.0
    if z >= SIGMOID_CLAMP:
        return 1.0
    return 1.0 / (1.0 + math.exp(-z))


def sigmoid_derivative(z: float) -> float:
    s = sigmoid(z)
    return s * (1.0 - s)


def tanh(z: float) -> float:
    """Return ``tanh(z)``, pinned to +-1 beyond +-20."""

    if z > TANH_CLAMP:
        return 1.0
    if z < -TANH_CLAMP:
        return -1.0
    return math.tanh(z)


def tanh_derivative(z: float) -> float:
    t = tanh(z)
    return 1.0 - t * t


def relu(z: float) -> float:
    return z if z > 0.0 else 0.0


def relu_derivative(z: float) -> float:
    # Subgradient 0 at the kink.
    return 1.0 if z > 0.0 else 0.0


def leaky_relu(z: float, alpha: float = DEFAULT_LEAKY_ALPHA) -> float:
    return z if z > 0.0 else alpha * z


def leaky_relu_derivative(z: float, alpha: float = DEFAULT_LEAKY_ALPHA) -> float:
    return 1.0 if z > 0.0 else alpha


def sigmoid_array(z) -> Array:
    return elementwise(sigmoid, z)


def sigmoid_derivative_array(z) -> Array:
    return elementwise(sigmoid_derivative, z)


def tanh_array(z) -> Array:
    return elementwise(tanh, z)


def tanh_derivative_array(z) -> Array:
    return elementwise(tanh_derivative, z)


def relu_array(z) -> Array:
    return elementwise(relu, z)


def relu_derivative_array(z) -> Array:
    return elementwise(relu_derivative, z)


def leaky_relu_array(z, alpha: float = DEFAULT_LEAKY_ALPHA) -> Array:
    return elementwise(leaky_relu, z, alpha=alpha)


def leaky_relu_derivative_array(z, alpha: float = DEFAULT_LEAKY_ALPHA) -> Array:
    return elementwise(leaky_relu_derivative, z, alpha=alpha)


@dataclass(frozen=True)
class Activation:
    """A named activation with vectorized forward and derivative functions.

    ``clamp`` is the magnitude at which the function saturates, or ``None``
    for activations that never clamp. ``clamp_inclusive`` says whether
    ``|z| == clamp`` is already clamped (sigmoid) or still computed (tanh).
    """

    name: str
    fn: Callable[[Array], Array]
    derivative: Callable[[Array], Array]
    clamp: float | None = None
    clamp_inclusive: bool = True

    def saturated(self, z) -> bool:
        """Return True if any entry of ``z`` falls in the clamped range."""

        if self.clamp is None:
            return False
        magnitude = np.abs(np.asarray(z, dtype=np.float64))
        if self.clamp_inclusive:
            return bool(np.any(magnitude >= self.clamp))
        return bool(np.any(magnitude > self.clamp))


_BUILDERS: Dict[str, Callable[[float], Activation]] = {
    "sigmoid": lambda alpha: Activation(
        "sigmoid", sigmoid_array, sigmoid_derivative_array, SIGMOID_CLAMP
    ),
    "tanh": lambda alpha: Activation(
        "tanh", tanh_array, tanh_derivative_array, TANH_CLAMP, clamp_inclusive=False
    ),
    "relu": lambda alpha: Activation("relu", relu_array, relu_derivative_array),
    "leaky_relu": lambda alpha: Activation(
        "leaky_relu",
        partial(leaky_relu_array, alpha=alpha),
        partial(leaky_relu_derivative_array, alpha=alpha),
    ),
}


def names() -> list[str]:
    return sorted(_BUILDERS)


def get_activation(name: str, alpha: float = DEFAULT_LEAKY_ALPHA) -> Activation:
    """Return the :class:`Activation` registered under ``name``."""

    try:
        builder = _BUILDERS[name]
    except KeyError as exc:
        available = ", ".join(names())
        raise ConfigError(f"Unknown activation {name!r}. Available: {available}") from exc
    return builder(alpha)


__all__ = [
    "SIGMOID_CLAMP",
    "TANH_CLAMP",
    "DEFAULT_LEAKY_ALPHA",
    "Activation",
    "get_activation",
    "names",
    "sigmoid",
    "sigmoid_derivative",
    "tanh",
    "tanh_derivative",
    "relu",
    "relu_derivative",
    "leaky_relu",
    "leaky_relu_derivative",
    "sigmoid_array",
    "sigmoid_derivative_array",
    "tanh_array",
    "tanh_derivative_array",
    "relu_array",
    "relu_derivative_array",
    "leaky_relu_array",
    "leaky_relu_derivative_array",
]
