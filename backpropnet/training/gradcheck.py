"""Finite-difference verification of the engine's analytic gradients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict

import numpy as np

from ..core.types import PARAMETER_NAMES
from .engine import Engine

DEFAULT_EPSILON = 1e-7
CORRECT_THRESHOLD = 1e-5
EXCELLENT_THRESHOLD = 1e-7
SUSPECT_THRESHOLD = 1e-3


def numerical_gradient(f: Callable[[float], float], w: float, epsilon: float = DEFAULT_EPSILON) -> float:
    """Return the central difference ``(f(w + eps) - f(w - eps)) / (2 eps)``."""

    return (f(w + epsilon) - f(w - epsilon)) / (2.0 * epsilon)


def relative_difference(analytic: float, numeric: float) -> float:
    """Return ``|a - n| / max(|a|, |n|, 1e-8)``."""

    denom = max(abs(analytic), abs(numeric), 1e-8)
    return abs(analytic - numeric) / denom


@dataclass(frozen=True)
class GradientCheckResult:
    max_difference: float
    avg_difference: float
    checked: int
    per_parameter: Dict[str, float] = field(default_factory=dict)

    @property
    def is_correct(self) -> bool:
        return self.max_difference < CORRECT_THRESHOLD

    @property
    def is_excellent(self) -> bool:
        return self.max_difference < EXCELLENT_THRESHOLD

    @property
    def is_suspect(self) -> bool:
        return self.max_difference > SUSPECT_THRESHOLD

    def to_dict(self) -> Dict[str, object]:
        return {
            "max_difference": self.max_difference,
            "avg_difference": self.avg_difference,
            "checked": self.checked,
            "is_correct": self.is_correct,
            "is_excellent": self.is_excellent,
            "is_suspect": self.is_suspect,
            "per_parameter": dict(self.per_parameter),
        }


def check_gradients(engine: Engine, X, y, epsilon: float = DEFAULT_EPSILON) -> GradientCheckResult:
    """Compare analytic and central-difference gradients for every parameter entry.

    Perturbations are applied to a private copy of the parameters, so the
    engine is left exactly as it was.
    """

    analytic = engine.gradients(X, y)
    params = engine.get_parameters()
    differences = []
    per_parameter: Dict[str, float] = {}

    for name in PARAMETER_NAMES:
        values = getattr(params, name)
        grad = analytic.for_parameter(name)
        worst = 0.0
        for index in np.ndindex(values.shape):
            original = values[index]

            def loss_at(w: float) -> float:
                values[index] = w
                return engine.loss_with(params, X, y)

            numeric = numerical_gradient(loss_at, original, epsilon)
            values[index] = original
            diff = relative_difference(float(grad[index]), numeric)
            differences.append(diff)
            worst = max(worst, diff)
        per_parameter[name] = worst

    return GradientCheckResult(
        max_difference=float(max(differences)),
        avg_difference=float(np.mean(differences)),
        checked=len(differences),
        per_parameter=per_parameter,
    )


__all__ = [
    "DEFAULT_EPSILON",
    "GradientCheckResult",
    "numerical_gradient",
    "relative_difference",
    "check_gradients",
]
