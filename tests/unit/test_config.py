import json

import pytest

from backpropnet.core.errors import ConfigError
from backpropnet.training import config as config_mod
from backpropnet.training.config import TrainingConfig


def test_defaults():
    cfg = TrainingConfig(input_size=2, hidden_size=3, output_size=1)
    assert cfg.activation == "sigmoid"
    assert cfg.learning_rate == 0.01
    assert cfg.loss_function == "mse"
    assert cfg.weight_init == "auto"


def test_from_dict_accepts_camel_case():
    cfg = TrainingConfig.from_dict(
        {"inputSize": 2, "hiddenSize": 4, "outputSize": 1, "learningRate": 0.1, "lossFunction": "bce"}
    )
    assert cfg.hidden_size == 4
    assert cfg.learning_rate == 0.1
    assert cfg.to_dict()["loss_function"] == "bce"


@pytest.mark.parametrize(
    "overrides",
    [
        {"hidden_size": 0},
        {"input_size": -1},
        {"output_size": 1.5},
        {"learning_rate": 0.0},
        {"learning_rate": float("nan")},
        {"activation": "softmax"},
        {"loss_function": "hinge"},
        {"weight_init": "orthogonal"},
        {"leaky_alpha": -0.1},
        {"seed": "zero"},
    ],
)
def test_invalid_values_raise(overrides):
    raw = {"input_size": 2, "hidden_size": 3, "output_size": 1}
    raw.update(overrides)
    with pytest.raises(ConfigError):
        TrainingConfig.from_dict(raw)


def test_unknown_and_missing_keys():
    with pytest.raises(ConfigError, match="Unknown config key"):
        TrainingConfig.from_dict({"input_size": 2, "hidden_size": 3, "output_size": 1, "momentum": 0.9})
    with pytest.raises(ConfigError):
        TrainingConfig.from_dict({"input_size": 2})


def test_presets_are_copies():
    first = config_mod.load_preset("xor")
    first["model"]["hidden_size"] = 99
    assert config_mod.load_preset("xor")["model"]["hidden_size"] == 4
    assert {"xor", "xor-bce", "and-gate"} <= set(config_mod.presets())
    with pytest.raises(ConfigError):
        config_mod.load_preset("missing")


def test_load_config_json_and_yaml(tmp_path):
    json_path = tmp_path / "run.json"
    json_path.write_text(json.dumps({"train": {"epochs": 5}}))
    assert config_mod.load_config(json_path) == {"train": {"epochs": 5}}

    yaml_path = tmp_path / "run.yaml"
    yaml_path.write_text("model:\n  hidden_size: 8\n")
    assert config_mod.load_config(yaml_path) == {"model": {"hidden_size": 8}}

    with pytest.raises(ConfigError):
        config_mod.load_config(tmp_path / "run.toml")


def test_merge_config_is_deep_and_non_destructive():
    base = {"model": {"hidden_size": 4, "seed": 0}, "train": {"epochs": 10}}
    merged = config_mod.merge_config(base, {"model": {"seed": 3}})
    assert merged == {"model": {"hidden_size": 4, "seed": 3}, "train": {"epochs": 10}}
    assert base["model"]["seed"] == 0
