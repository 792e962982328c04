"""Training engine, losses, configuration and gradient checking."""

from .config import TrainingConfig, load_config, load_preset, merge_config, presets
from .engine import Engine
from .gradcheck import GradientCheckResult, check_gradients
from .losses import REGISTRY as LOSS_REGISTRY

__all__ = [
    "Engine",
    "TrainingConfig",
    "GradientCheckResult",
    "LOSS_REGISTRY",
    "check_gradients",
    "load_config",
    "load_preset",
    "merge_config",
    "presets",
]
