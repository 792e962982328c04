import numpy as np
import pytest

from backpropnet.core import init
from backpropnet.core.errors import ConfigError


def test_he_variance_matches_fan_in():
    W = init.initialize_weights(100, 100, "he", rng=0)
    assert W.shape == (100, 100)
    expected = 2.0 / 100
    assert 0.5 * expected < np.var(W) < 2.0 * expected


def test_xavier_variance_matches_fan_sum():
    W = init.initialize_weights(100, 100, "xavier", rng=1)
    expected = 2.0 / 200
    assert 0.5 * expected < np.var(W) < 2.0 * expected
    assert abs(np.mean(W)) < 0.01


def test_random_init_is_bounded():
    W = init.initialize_weights(20, 30, "random", rng=2)
    assert W.min() >= -0.5 and W.max() < 0.5


def test_same_seed_same_weights():
    a = init.initialize_weights(4, 3, "xavier", rng=7)
    b = init.initialize_weights(4, 3, "xavier", rng=7)
    np.testing.assert_array_equal(a, b)


def test_box_muller_is_finite():
    draws = init.box_muller(np.random.default_rng(3), (500,))
    assert np.all(np.isfinite(draws))


@pytest.mark.parametrize(
    "activation, expected",
    [("sigmoid", "xavier"), ("tanh", "xavier"), ("relu", "he"), ("leaky_relu", "he")],
)
def test_auto_pairs_method_with_activation(activation, expected):
    assert init.resolve_init_method(activation) == expected
    assert init.resolve_init_method(activation, "random") == "random"


def test_invalid_sizes_and_methods():
    with pytest.raises(ConfigError):
        init.initialize_weights(0, 3)
    with pytest.raises(ConfigError):
        init.initialize_weights(3, 3, "orthogonal")
    with pytest.raises(ConfigError):
        init.zeros_bias(0)


def test_zeros_bias():
    np.testing.assert_array_equal(init.zeros_bias(3), np.zeros(3))
