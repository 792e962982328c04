"""Truth-table datasets used by the presets and the demo CLI."""

from __future__ import annotations

from typing import Callable, Dict, Mapping

import numpy as np

from ..core.errors import ConfigError
from ..core.types import Array
from .metrics import one_hot_encode

_INPUTS = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])

_GATES: Dict[str, Callable[[int, int], int]] = {
    "xor": lambda a, b: a ^ b,
    "and": lambda a, b: a & b,
    "or": lambda a, b: a | b,
}


def logic_gate(name: str, *, one_hot: bool = False) -> tuple[Array, Array]:
    """Return the four-row truth table of ``name`` as ``(X, y)``.

    With ``one_hot`` the targets have two columns (class 0, class 1); otherwise
    a single 0/1 column.
    """

    try:
        gate = _GATES[name]
    except KeyError as exc:
        raise ConfigError(f"Unknown dataset {name!r}. Available: {', '.join(sorted(_GATES))}") from exc
    labels = np.array([gate(int(a), int(b)) for a, b in _INPUTS], dtype=np.int64)
    X = _INPUTS.copy()
    if one_hot:
        return X, one_hot_encode(labels, 2)
    return X, labels.astype(np.float64).reshape(-1, 1)


def load_dataset(data_cfg: Mapping[str, object]) -> tuple[Array, Array]:
    name = str(data_cfg.get("name", "xor"))
    return logic_gate(name, one_hot=bool(data_cfg.get("one_hot", False)))


__all__ = ["logic_gate", "load_dataset"]
