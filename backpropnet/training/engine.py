"""Single-hidden-layer network trained with backpropagation."""

from __future__ import annotations

import warnings
from typing import Mapping, Sequence

import numpy as np

from ..core.activations import Activation, get_activation, sigmoid_array
from ..core.errors import ConfigError, NumericInstabilityWarning, ShapeError
from ..core.init import initialize_weights, make_rng, resolve_init_method, zeros_bias
from ..core.ops import as_matrix, as_vector, matmul
from ..core.types import (
    PARAMETER_NAMES,
    Array,
    ForwardCache,
    Gradients,
    NetworkParameters,
    TrainingHistory,
)
from .config import TrainingConfig
from .losses import REGISTRY as LOSS_REGISTRY
from .metrics import compute_accuracy, labels_from_outputs, labels_from_targets


_OUTPUT = get_activation("sigmoid")


def _warn_if_clamped(z: Array, activation: Activation, layer: str) -> None:
    if activation.saturated(z):
        warnings.warn(
            f"{layer} {activation.name} pre-activations reached +-{activation.clamp:g}; "
            "values were clamped",
            NumericInstabilityWarning,
            stacklevel=4,
        )


class Engine:
    """Input -> hidden -> sigmoid output network with in-place gradient descent.

    The engine owns its :class:`NetworkParameters`. Only :meth:`backward` (and
    :meth:`set_parameters`) mutate them; every accessor hands out copies.
    Each call validates shapes up front, so a call that raises leaves the
    parameters untouched.
    """

    def __init__(self, config: TrainingConfig | Mapping[str, object]) -> None:
        if isinstance(config, Mapping):
            config = TrainingConfig.from_dict(config)
        elif not isinstance(config, TrainingConfig):
            raise ConfigError(f"Expected a TrainingConfig, got {type(config).__name__}")
        self._config = config
        self._activation = get_activation(config.activation, alpha=config.leaky_alpha)
        self._loss = LOSS_REGISTRY.get(config.loss_function)
        self._init_method = resolve_init_method(config.activation, config.weight_init)
        self._params = self._initial_parameters()

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> "Engine":
        return cls(TrainingConfig.from_dict(raw))

    def _initial_parameters(self) -> NetworkParameters:
        cfg = self._config
        rng = make_rng(cfg.seed)
        W1 = initialize_weights(cfg.hidden_size, cfg.input_size, self._init_method, rng)
        W2 = initialize_weights(cfg.output_size, cfg.hidden_size, self._init_method, rng)
        return NetworkParameters(
            W1=W1, b1=zeros_bias(cfg.hidden_size), W2=W2, b2=zeros_bias(cfg.output_size)
        )

    # ------------------------------------------------------------------
    # Properties

    @property
    def config(self) -> TrainingConfig:
        return self._config

    @property
    def init_method(self) -> str:
        return self._init_method

    def parameter_count(self) -> int:
        return int(sum(value.size for _, value in self._params))

    def __repr__(self) -> str:
        cfg = self._config
        return (
            f"Engine({cfg.input_size}-{cfg.hidden_size}-{cfg.output_size}, "
            f"activation={cfg.activation!r}, loss={cfg.loss_function!r}, "
            f"learning_rate={cfg.learning_rate})"
        )

    # ------------------------------------------------------------------
    # Forward / backward

    def forward(self, X) -> ForwardCache:
        """Run the forward pass over a batch and return every intermediate tensor."""

        X = self._check_inputs(X)
        return self._forward(X, self._params)

    def gradients(self, X, y, cache: ForwardCache | None = None) -> Gradients:
        """Return the batch-averaged gradients of the loss without updating anything."""

        X = self._check_inputs(X)
        y = self._check_targets(y, X.shape[0])
        if cache is None:
            cache = self._forward(X, self._params)
        else:
            self._check_cache(cache, X.shape[0])
        return self._gradients(X, y, cache, self._params)

    def backward(self, X, y, cache: ForwardCache) -> None:
        """Backpropagate the error of ``cache`` and take one gradient-descent step."""

        grads = self.gradients(X, y, cache)
        self._apply(grads)

    def _forward(self, X: Array, params: NetworkParameters) -> ForwardCache:
        z1 = matmul(X, params.W1.T) + params.b1
        _warn_if_clamped(z1, self._activation, "hidden")
        h = self._activation.fn(z1)
        z2 = matmul(h, params.W2.T) + params.b2
        _warn_if_clamped(z2, _OUTPUT, "output")
        output = sigmoid_array(z2)
        return ForwardCache(z1=z1, h=h, z2=z2, output=output)

    def _gradients(
        self, X: Array, y: Array, cache: ForwardCache, params: NetworkParameters
    ) -> Gradients:
        m = X.shape[0]
        # Output layer: delta2[i] = dL_i/dz2[i].
        delta2 = self._loss.output_delta(y, cache.output, cache.z2)
        dW2 = matmul(delta2.T, cache.h) / m
        db2 = delta2.sum(axis=0) / m
        # Hidden layer, propagated through the pre-update W2.
        dL_dh = matmul(delta2, params.W2)
        delta1 = dL_dh * self._activation.derivative(cache.z1)
        dW1 = matmul(delta1.T, X) / m
        db1 = delta1.sum(axis=0) / m
        return Gradients(dW1=dW1, db1=db1, dW2=dW2, db2=db2)

    def _apply(self, grads: Gradients) -> None:
        lr = self._config.learning_rate
        for name in PARAMETER_NAMES:
            param = getattr(self._params, name)
            param -= lr * grads.for_parameter(name)

    # ------------------------------------------------------------------
    # Training loop

    def compute_loss(self, y_true, y_pred) -> float:
        return self._loss(y_true, y_pred)

    def loss_with(self, params: NetworkParameters, X, y) -> float:
        """Return the loss of ``params`` on ``(X, y)`` without touching the engine's parameters."""

        X = self._check_inputs(X)
        y = self._check_targets(y, X.shape[0])
        self._check_parameters(params)
        return self._loss(y, self._forward(X, params).output)

    def fit(
        self,
        X,
        y,
        epochs: int = 100,
        verbose: bool = False,
        callbacks: Sequence[object] | None = None,
    ) -> TrainingHistory:
        """Train on the full batch for ``epochs`` iterations.

        Each epoch runs forward, loss, backward and then records the loss and
        accuracy of the parameters the epoch started with. There is no
        shuffling and no early stopping.
        """

        X = self._check_inputs(X)
        y = self._check_targets(y, X.shape[0])
        if isinstance(epochs, bool) or not isinstance(epochs, (int, np.integer)) or epochs < 0:
            raise ConfigError(f"epochs must be a non-negative integer, got {epochs!r}")
        epochs = int(epochs)
        callbacks = list(callbacks or [])
        target_labels = labels_from_targets(y)
        history = TrainingHistory()

        for epoch in range(epochs):
            cache = self._forward(X, self._params)
            loss = self._loss(y, cache.output)
            accuracy = compute_accuracy(target_labels, labels_from_outputs(cache.output))
            self._apply(self._gradients(X, y, cache, self._params))
            history.append(epoch, loss, accuracy)

            if verbose and (epoch % 10 == 0 or epoch == epochs - 1):
                print(
                    f"Epoch {epoch}/{epochs} - loss: {loss:.4f} - "
                    f"accuracy: {accuracy * 100:.2f}%"
                )
            self._emit_epoch(callbacks, epoch, {"loss": loss, "accuracy": accuracy})
        return history

    @staticmethod
    def _emit_epoch(callbacks: Sequence[object], epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)

    def predict(self, X) -> Array:
        """Return class labels: threshold 0.5 for one output unit, arg-max otherwise."""

        return labels_from_outputs(self.forward(X).output)

    def predict_proba(self, X) -> Array:
        return self.forward(X).output

    def evaluate(self, X, y) -> dict[str, float]:
        X = self._check_inputs(X)
        y = self._check_targets(y, X.shape[0])
        output = self._forward(X, self._params).output
        return {
            "loss": self._loss(y, output),
            "accuracy": compute_accuracy(labels_from_targets(y), labels_from_outputs(output)),
        }

    # ------------------------------------------------------------------
    # Parameters

    def get_parameters(self) -> NetworkParameters:
        return self._params.copy()

    def set_parameters(self, params: NetworkParameters | Mapping[str, object]) -> None:
        """Replace the parameters with a validated copy of ``params``."""

        state = dict(params) if isinstance(params, NetworkParameters) else params
        missing = [name for name in PARAMETER_NAMES if name not in state]
        if missing:
            raise ShapeError(f"Missing parameters: {', '.join(missing)}")
        coerced = NetworkParameters(
            W1=np.array(as_matrix(state["W1"], "W1")),
            b1=np.array(as_vector(state["b1"], "b1")),
            W2=np.array(as_matrix(state["W2"], "W2")),
            b2=np.array(as_vector(state["b2"], "b2")),
        )
        self._check_parameters(coerced)
        self._params = coerced

    # ------------------------------------------------------------------
    # Validation

    def _expected_shapes(self) -> dict[str, tuple[int, ...]]:
        cfg = self._config
        return {
            "W1": (cfg.hidden_size, cfg.input_size),
            "b1": (cfg.hidden_size,),
            "W2": (cfg.output_size, cfg.hidden_size),
            "b2": (cfg.output_size,),
        }

    def _check_parameters(self, params: NetworkParameters) -> None:
        for name, shape in self._expected_shapes().items():
            actual = np.shape(getattr(params, name))
            if actual != shape:
                raise ShapeError(f"{name} must have shape {shape}, got {actual}")

    def _check_inputs(self, X) -> Array:
        X = as_matrix(X, "X")
        if X.shape[1] != self._config.input_size:
            raise ShapeError(
                f"X must have {self._config.input_size} columns, got {X.shape[1]}"
            )
        return X

    def _check_targets(self, y, batch: int) -> Array:
        y = as_matrix(y, "y")
        if y.shape[0] != batch:
            raise ShapeError(f"X and y batch sizes differ: {batch} vs {y.shape[0]}")
        if y.shape[1] != self._config.output_size:
            raise ShapeError(
                f"y must have {self._config.output_size} columns, got {y.shape[1]}"
            )
        return y

    def _check_cache(self, cache: ForwardCache, batch: int) -> None:
        cfg = self._config
        expected = {
            "z1": (batch, cfg.hidden_size),
            "h": (batch, cfg.hidden_size),
            "z2": (batch, cfg.output_size),
            "output": (batch, cfg.output_size),
        }
        for name, shape in expected.items():
            actual = np.shape(getattr(cache, name))
            if actual != shape:
                raise ShapeError(f"cache.{name} must have shape {shape}, got {actual}")


__all__ = ["Engine"]
