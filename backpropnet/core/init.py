"""Weight initialisation strategies."""

from __future__ import annotations

import numpy as np

from .errors import ConfigError
from .types import Array

INIT_METHODS = ("random", "xavier", "he")

_RELU_FAMILY = {"relu", "leaky_relu"}


def make_rng(rng: np.random.Generator | int | None = None) -> np.random.Generator:
    """Return ``rng`` unchanged, or a fresh generator seeded with it."""

    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def box_muller(rng: np.random.Generator, shape: tuple[int, ...]) -> Array:
    """Draw standard normal samples from pairs of uniform draws."""

    # u1 in (0, 1] keeps the log finite.
    u1 = 1.0 - rng.random(shape)
    u2 = rng.random(shape)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def resolve_init_method(activation: str, requested: str = "auto") -> str:
    """Map ``"auto"`` to He for the ReLU family and Xavier otherwise."""

    if requested != "auto":
        return requested
    return "he" if activation in _RELU_FAMILY else "xavier"


def initialize_weights(
    rows: int,
    cols: int,
    method: str = "xavier",
    rng: np.random.Generator | int | None = None,
) -> Array:
    """Return a ``(rows, cols)`` weight matrix drawn with ``method``.

    ``random`` samples Uniform(-0.5, 0.5); ``xavier`` samples
    Normal(0, sqrt(2 / (rows + cols))) and suits sigmoid/tanh; ``he`` samples
    Normal(0, sqrt(2 / cols)) and suits the ReLU family.
    """

    if int(rows) <= 0 or int(cols) <= 0:
        raise ConfigError(f"Weight matrix sizes must be positive, got ({rows}, {cols})")
    generator = make_rng(rng)
    shape = (int(rows), int(cols))
    if method == "random":
        return generator.uniform(-0.5, 0.5, size=shape)
    if method == "xavier":
        std = np.sqrt(2.0 / (rows + cols))
    elif method == "he":
        std = np.sqrt(2.0 / cols)
    else:
        raise ConfigError(f"Unknown init method {method!r}. Available: {', '.join(INIT_METHODS)}")
    return box_muller(generator, shape) * std


def zeros_bias(size: int) -> Array:
    if int(size) <= 0:
        raise ConfigError(f"Bias size must be positive, got {size}")
    return np.zeros(int(size), dtype=np.float64)


__all__ = [
    "INIT_METHODS",
    "make_rng",
    "box_muller",
    "resolve_init_method",
    "initialize_weights",
    "zeros_bias",
]
