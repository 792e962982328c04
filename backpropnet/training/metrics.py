"""Label and metric helpers shared by the engine and its callers."""

from __future__ import annotations

import numpy as np

from ..core.errors import ShapeError
from ..core.init import make_rng
from ..core.ops import as_matrix
from ..core.types import Array


def one_hot_encode(labels, num_classes: int) -> Array:
    """Return a ``(len(labels), num_classes)`` matrix with a single 1 per row."""

    idx = np.asarray(labels).reshape(-1).astype(int)
    if num_classes <= 0:
        raise ShapeError(f"num_classes must be positive, got {num_classes}")
    if idx.size and (idx.min() < 0 or idx.max() >= num_classes):
        raise ShapeError(f"Labels must lie in [0, {num_classes}), got {idx.tolist()}")
    out = np.zeros((idx.shape[0], num_classes), dtype=np.float64)
    out[np.arange(idx.shape[0]), idx] = 1.0
    return out


def labels_from_outputs(outputs) -> Array:
    """Threshold a single column at 0.5, otherwise take the arg-max of each row."""

    outputs = as_matrix(outputs, "outputs")
    if outputs.shape[1] == 1:
        return (outputs[:, 0] >= 0.5).astype(np.int64)
    return np.argmax(outputs, axis=1).astype(np.int64)


def labels_from_targets(y) -> Array:
    return labels_from_outputs(y)


def compute_accuracy(y_true, y_pred) -> float:
    """Return the fraction of positions where ``y_true`` equals ``y_pred``."""

    y_true = np.asarray(y_true).reshape(-1)
    y_pred = np.asarray(y_pred).reshape(-1)
    if y_true.shape != y_pred.shape:
        raise ShapeError(f"Arrays must have same length: {y_true.shape[0]} vs {y_pred.shape[0]}")
    if y_true.size == 0:
        raise ShapeError("Accuracy requires at least one label")
    return float(np.mean(y_true == y_pred))


def shuffle(X, y, rng: np.random.Generator | int | None = None) -> tuple[Array, Array]:
    """Return copies of ``X`` and ``y`` permuted with the same random order."""

    X = as_matrix(X, "X")
    y = as_matrix(y, "y")
    if X.shape[0] != y.shape[0]:
        raise ShapeError(f"X and y must have the same number of rows: {X.shape[0]} vs {y.shape[0]}")
    order = make_rng(rng).permutation(X.shape[0])
    return X[order].copy(), y[order].copy()


__all__ = [
    "one_hot_encode",
    "labels_from_outputs",
    "labels_from_targets",
    "compute_accuracy",
    "shuffle",
]
