"""Dimension-checked numeric primitives."""

from __future__ import annotations

from typing import Callable

import numpy as np

from .errors import ShapeError
from .types import Array


def as_vector(values, name: str = "vector") -> Array:
    """Return ``values`` as a 1-D ``float64`` array."""

    try:
        arr = np.asarray(values, dtype=np.float64)
    except ValueError as exc:
        raise ShapeError(f"{name} must be a flat sequence of numbers") from exc
    if arr.ndim != 1:
        raise ShapeError(f"{name} must be 1-D, got shape {arr.shape}")
    return arr


def as_matrix(values, name: str = "matrix") -> Array:
    """Return ``values`` as a non-empty rectangular ``float64`` matrix.

    Ragged nested sequences are rejected with :class:`ShapeError` rather than
    becoming object arrays.
    """

    try:
        arr = np.asarray(values, dtype=np.float64)
    except ValueError as exc:
        raise ShapeError(f"{name} must be rectangular") from exc
    if arr.ndim != 2:
        raise ShapeError(f"{name} must be 2-D, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ShapeError(f"{name} must not be empty, got shape {arr.shape}")
    return arr


def dot(a, b) -> float:
    """Return the inner product of two equally sized vectors."""

    a = as_vector(a, "a")
    b = as_vector(b, "b")
    if a.shape[0] != b.shape[0]:
        raise ShapeError(f"Vector dimensions must match: {a.shape[0]} vs {b.shape[0]}")
    return float(a @ b)


def matmul(A, B) -> Array:
    """Return ``A @ B`` for an ``(m, n)`` and an ``(n, p)`` matrix."""

    A = as_matrix(A, "A")
    B = as_matrix(B, "B")
    if A.shape[1] != B.shape[0]:
        raise ShapeError(
            "Matrix dimensions incompatible for multiplication: "
            f"({A.shape[0]}x{A.shape[1]}) x ({B.shape[0]}x{B.shape[1]})"
        )
    return A @ B


def matvec(A, x) -> Array:
    """Return ``A @ x`` for an ``(m, n)`` matrix and a length ``n`` vector."""

    A = as_matrix(A, "A")
    x = as_vector(x, "x")
    if A.shape[1] != x.shape[0]:
        raise ShapeError(
            f"Matrix-vector dimensions incompatible: ({A.shape[0]}x{A.shape[1]}) x ({x.shape[0]})"
        )
    return A @ x


def add_bias(X) -> Array:
    """Prepend a column of ones to every row of ``X``."""

    X = as_matrix(X, "X")
    ones = np.ones((X.shape[0], 1), dtype=np.float64)
    return np.hstack([ones, X])


def elementwise(fn: Callable[..., float], values, **kwargs) -> Array:
    """Apply the scalar function ``fn`` to every entry of ``values``.

    The result has the shape of ``values``; extra keyword arguments are passed
    through to ``fn`` unchanged.
    """

    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return arr.copy()
    mapped = np.vectorize(lambda v: fn(float(v), **kwargs), otypes=[np.float64])
    return mapped(arr)


__all__ = ["as_vector", "as_matrix", "dot", "matmul", "matvec", "add_bias", "elementwise"]
