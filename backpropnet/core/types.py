"""Core typing contracts for BackpropNet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

import numpy as np

Array = np.ndarray

PARAMETER_NAMES = ("W1", "b1", "W2", "b2")


@dataclass(eq=False)
class NetworkParameters:
    """Weights and biases of the single-hidden-layer network."""

    W1: Array
    b1: Array
    W2: Array
    b2: Array

    def copy(self) -> "NetworkParameters":
        return NetworkParameters(
            W1=self.W1.copy(), b1=self.b1.copy(), W2=self.W2.copy(), b2=self.b2.copy()
        )

    def state_dict(self) -> Dict[str, Array]:
        return {name: getattr(self, name).copy() for name in PARAMETER_NAMES}

    def __iter__(self) -> Iterator[tuple[str, Array]]:
        for name in PARAMETER_NAMES:
            yield name, getattr(self, name)


@dataclass(frozen=True, eq=False)
class ForwardCache:
    """Intermediate tensors captured by one forward pass."""

    z1: Array
    h: Array
    z2: Array
    output: Array

    @property
    def batch_size(self) -> int:
        return int(self.output.shape[0])


@dataclass(frozen=True, eq=False)
class Gradients:
    """Batch-averaged loss gradients for every parameter."""

    dW1: Array
    db1: Array
    dW2: Array
    db2: Array

    def for_parameter(self, name: str) -> Array:
        """Return the gradient matching parameter ``name`` (``"W1"``, ``"b2"``...)."""

        return getattr(self, f"d{name}")


@dataclass(frozen=True)
class HistoryRecord:
    """Loss and accuracy observed during one epoch."""

    epoch: int
    loss: float
    accuracy: float


@dataclass
class TrainingHistory:
    """Append-only record of a :meth:`Engine.fit` run."""

    records: List[HistoryRecord] = field(default_factory=list)

    def append(self, epoch: int, loss: float, accuracy: float) -> None:
        self.records.append(HistoryRecord(int(epoch), float(loss), float(accuracy)))

    @property
    def epochs(self) -> List[int]:
        return [r.epoch for r in self.records]

    @property
    def losses(self) -> List[float]:
        return [r.loss for r in self.records]

    @property
    def accuracies(self) -> List[float]:
        return [r.accuracy for r in self.records]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(self.records)


__all__ = [
    "Array",
    "PARAMETER_NAMES",
    "NetworkParameters",
    "ForwardCache",
    "Gradients",
    "HistoryRecord",
    "TrainingHistory",
]
