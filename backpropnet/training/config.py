"""Training configuration, presets and config-file loading."""

from __future__ import annotations

import json
import math
from copy import deepcopy
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Mapping

from ..core import activations
from ..core.errors import ConfigError
from ..core.init import INIT_METHODS
from .losses import REGISTRY as LOSS_REGISTRY

_CAMEL_KEYS = {
    "inputSize": "input_size",
    "hiddenSize": "hidden_size",
    "outputSize": "output_size",
    "learningRate": "learning_rate",
    "lossFunction": "loss_function",
    "weightInit": "weight_init",
    "leakyAlpha": "leaky_alpha",
}


def _positive_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class TrainingConfig:
    """Immutable architecture and hyperparameters of an :class:`Engine`."""

    input_size: int
    hidden_size: int
    output_size: int
    activation: str = "sigmoid"
    learning_rate: float = 0.01
    loss_function: str = "mse"
    weight_init: str = "auto"
    leaky_alpha: float = activations.DEFAULT_LEAKY_ALPHA
    seed: int | None = 0

    def __post_init__(self) -> None:
        _positive_int("input_size", self.input_size)
        _positive_int("hidden_size", self.hidden_size)
        _positive_int("output_size", self.output_size)
        if isinstance(self.learning_rate, bool) or not isinstance(self.learning_rate, (int, float)):
            raise ConfigError(f"learning_rate must be a number, got {self.learning_rate!r}")
        if not math.isfinite(self.learning_rate) or self.learning_rate <= 0:
            raise ConfigError(f"learning_rate must be positive, got {self.learning_rate!r}")
        if self.activation not in activations.names():
            raise ConfigError(
                f"Unknown activation {self.activation!r}. "
                f"Available: {', '.join(activations.names())}"
            )
        if self.loss_function not in LOSS_REGISTRY:
            raise ConfigError(
                f"Unknown loss {self.loss_function!r}. "
                f"Available losses: {', '.join(LOSS_REGISTRY.names())}"
            )
        if self.weight_init != "auto" and self.weight_init not in INIT_METHODS:
            raise ConfigError(
                f"weight_init must be 'auto' or one of {', '.join(INIT_METHODS)}, "
                f"got {self.weight_init!r}"
            )
        if (
            not isinstance(self.leaky_alpha, (int, float))
            or not math.isfinite(self.leaky_alpha)
            or self.leaky_alpha < 0
        ):
            raise ConfigError(f"leaky_alpha must be a non-negative number, got {self.leaky_alpha!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigError(f"seed must be an integer or None, got {self.seed!r}")

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> "TrainingConfig":
        """Build a config from snake_case or camelCase keys."""

        allowed = {f.name for f in fields(cls)}
        kwargs: Dict[str, object] = {}
        for key, value in raw.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in allowed:
                raise ConfigError(f"Unknown config key: {key}")
            kwargs[name] = value
        try:
            return cls(**kwargs)  # type: ignore[arg-type]
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


_PRESETS: Dict[str, Mapping[str, object]] = {
    # lr 0.5 for 1000 epochs separates XOR from a minority of initialisations
    # (most seeds need several thousand epochs under MSE); seed 4 is one that does.
    "xor": {
        "model": {
            "input_size": 2,
            "hidden_size": 4,
            "output_size": 2,
            "activation": "sigmoid",
            "learning_rate": 0.5,
            "loss_function": "mse",
            "seed": 4,
        },
        "data": {"name": "xor", "one_hot": True},
        "train": {"epochs": 1000, "run_dir": "runs/xor", "enable_plots": False},
    },
    "xor-bce": {
        "model": {
            "input_size": 2,
            "hidden_size": 4,
            "output_size": 2,
            "activation": "sigmoid",
            "learning_rate": 0.5,
            "loss_function": "binary_crossentropy",
            "seed": 4,
        },
        "data": {"name": "xor", "one_hot": True},
        "train": {"epochs": 1000, "run_dir": "runs/xor-bce", "enable_plots": False},
    },
    "and-gate": {
        "model": {
            "input_size": 2,
            "hidden_size": 3,
            "output_size": 1,
            "activation": "tanh",
            "learning_rate": 0.5,
            "loss_function": "binary_crossentropy",
            "seed": 0,
        },
        "data": {"name": "and", "one_hot": False},
        "train": {"epochs": 300, "run_dir": "runs/and-gate", "enable_plots": False},
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        raise ConfigError(f"Unknown preset: {name}") from exc


def load_config(path: str | Path) -> Dict[str, object]:
    """Read a JSON or YAML run configuration from ``path``."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ConfigError(f"Unsupported config file type: {path.suffix}")
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config {path.name} must decode to a mapping")
    return dict(data)


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    """Deep-merge ``override`` into a copy of ``base``."""

    merged: Dict[str, object] = deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["TrainingConfig", "presets", "load_preset", "load_config", "merge_config"]
