"""Loss registry used by the training engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from ..core.activations import sigmoid_derivative_array
from ..core.errors import ConfigError, ShapeError
from ..core.types import Array

BCE_EPSILON = 1e-15

LossFn = Callable[[Array, Array], float]
DerivativeFn = Callable[[Array, Array], Array]
DeltaFn = Callable[[Array, Array, Array], Array]


def _pair(y_true, y_pred) -> tuple[Array, Array]:
    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    if y_true.shape != y_pred.shape:
        raise ShapeError(
            f"y_true and y_pred must have the same shape: {y_true.shape} vs {y_pred.shape}"
        )
    if y_true.size == 0:
        raise ShapeError("Loss requires at least one element")
    return y_true, y_pred


def mean_squared_error(y_true, y_pred) -> float:
    """Return ``(1/m) * sum((y_true - y_pred)^2)`` over all ``m`` elements."""

    y_true, y_pred = _pair(y_true, y_pred)
    return float(np.mean(np.square(y_true - y_pred)))


def mean_squared_error_derivative(y_true, y_pred) -> Array:
    """Return ``(2/m) * (y_pred - y_true)`` element-wise."""

    y_true, y_pred = _pair(y_true, y_pred)
    return (2.0 / y_true.size) * (y_pred - y_true)


def binary_cross_entropy(y_true, y_pred) -> float:
    """Return the mean binary cross-entropy with predictions clipped to ``[eps, 1-eps]``."""

    y_true, y_pred = _pair(y_true, y_pred)
    p = np.clip(y_pred, BCE_EPSILON, 1.0 - BCE_EPSILON)
    return float(-np.mean(y_true * np.log(p) + (1.0 - y_true) * np.log(1.0 - p)))


def binary_cross_entropy_derivative(y_true, y_pred) -> Array:
    """Return ``(p - y) / (p (1 - p))`` element-wise, with ``p`` clipped.

    Composed with a sigmoid output this collapses to ``p - y``; the engine uses
    that simplified form instead of dividing by ``p (1 - p)``.
    """

    y_true, y_pred = _pair(y_true, y_pred)
    p = np.clip(y_pred, BCE_EPSILON, 1.0 - BCE_EPSILON)
    return (p - y_true) / (p * (1.0 - p))


def _mse_delta(y_true: Array, y_pred: Array, z2: Array) -> Array:
    # Per-sample derivative; the engine averages over the batch afterwards.
    dloss = np.stack([mean_squared_error_derivative(t, p) for t, p in zip(y_true, y_pred)])
    return dloss * sigmoid_derivative_array(z2)


def _bce_delta(y_true: Array, y_pred: Array, z2: Array) -> Array:
    return (y_pred - y_true) / y_true.shape[1]


@dataclass(frozen=True)
class Loss:
    """A loss with its derivative and the error signal at the sigmoid output.

    ``output_delta`` maps a batch of targets, predictions and output
    pre-activations to ``dL_i/dz2`` for each sample ``i``.
    """

    name: str
    fn: LossFn
    derivative: DerivativeFn
    output_delta: DeltaFn

    def __call__(self, y_true, y_pred) -> float:
        return self.fn(y_true, y_pred)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(
        self,
        name: str,
        fn: LossFn,
        derivative: DerivativeFn,
        output_delta: DeltaFn,
    ) -> None:
        self._registry[name] = Loss(name, fn, derivative, output_delta)

    def alias(self, alias: str, target: str) -> None:
        self._registry[alias] = self.get(target)

    def get(self, name: str) -> Loss:
        try:
            return self._registry[name]
        except KeyError as exc:
            available = ", ".join(self.names())
            raise ConfigError(f"Unknown loss {name!r}. Available losses: {available}") from exc

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def __contains__(self, name: object) -> bool:
        return name in self._registry


REGISTRY = LossRegistry()
REGISTRY.register("mse", mean_squared_error, mean_squared_error_derivative, _mse_delta)
REGISTRY.register(
    "binary_crossentropy",
    binary_cross_entropy,
    binary_cross_entropy_derivative,
    _bce_delta,
)
REGISTRY.alias("bce", "binary_crossentropy")

__all__ = [
    "BCE_EPSILON",
    "Loss",
    "LossRegistry",
    "REGISTRY",
    "mean_squared_error",
    "mean_squared_error_derivative",
    "binary_cross_entropy",
    "binary_cross_entropy_derivative",
]
