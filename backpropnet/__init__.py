"""BackpropNet: a one-hidden-layer network trained with backpropagation."""

from .core.errors import BackpropNetError, ConfigError, NumericInstabilityWarning, ShapeError
from .core.types import ForwardCache, Gradients, NetworkParameters, TrainingHistory
from .training.config import TrainingConfig
from .training.engine import Engine
from .training.gradcheck import GradientCheckResult, check_gradients

__all__ = [
    "Engine",
    "TrainingConfig",
    "NetworkParameters",
    "ForwardCache",
    "Gradients",
    "TrainingHistory",
    "GradientCheckResult",
    "check_gradients",
    "BackpropNetError",
    "ConfigError",
    "ShapeError",
    "NumericInstabilityWarning",
]
