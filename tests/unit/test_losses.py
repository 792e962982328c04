import numpy as np
import pytest

from backpropnet.core.errors import ConfigError, ShapeError
from backpropnet.training import losses
from backpropnet.training.losses import REGISTRY


def test_mean_squared_error_and_derivative():
    y_true = np.array([[1.0, 0.0]])
    y_pred = np.array([[0.5, 0.5]])
    assert losses.mean_squared_error(y_true, y_pred) == pytest.approx(0.25)
    np.testing.assert_allclose(
        losses.mean_squared_error_derivative(y_true, y_pred), [[-0.5, 0.5]]
    )


def test_mse_shape_mismatch():
    with pytest.raises(ShapeError):
        losses.mean_squared_error(np.zeros((2, 1)), np.zeros((1, 2)))


def test_binary_cross_entropy_value():
    assert losses.binary_cross_entropy([[1.0]], [[0.5]]) == pytest.approx(np.log(2.0))
    assert losses.binary_cross_entropy([[0.0, 1.0]], [[0.0, 1.0]]) < 1e-12


def test_binary_cross_entropy_is_finite_at_the_edges():
    value = losses.binary_cross_entropy([[1.0, 0.0]], [[0.0, 1.0]])
    assert np.isfinite(value)
    assert value == pytest.approx(-np.log(losses.BCE_EPSILON), rel=1e-3)
    grad = losses.binary_cross_entropy_derivative([[1.0]], [[0.0]])
    assert np.all(np.isfinite(grad))


def test_binary_cross_entropy_derivative():
    np.testing.assert_allclose(
        losses.binary_cross_entropy_derivative([[1.0, 0.0]], [[0.5, 0.25]]),
        [[-2.0, 0.25 / (0.25 * 0.75)]],
    )


def test_registry_names_and_alias():
    assert "mse" in REGISTRY
    assert REGISTRY.get("bce") is REGISTRY.get("binary_crossentropy")
    with pytest.raises(ConfigError):
        REGISTRY.get("hinge")


def test_bce_output_delta_is_simplified_sigmoid_form():
    loss = REGISTRY.get("binary_crossentropy")
    y = np.array([[1.0, 0.0]])
    p = np.array([[0.8, 0.3]])
    np.testing.assert_allclose(loss.output_delta(y, p, np.zeros_like(p)), [[-0.1, 0.15]])


def test_mse_output_delta_applies_sigmoid_derivative():
    loss = REGISTRY.get("mse")
    y = np.array([[1.0], [0.0]])
    p = np.array([[0.5], [0.5]])
    z2 = np.zeros((2, 1))
    # (2/1)(p - y) * sigma'(0) per row
    np.testing.assert_allclose(loss.output_delta(y, p, z2), [[-0.25], [0.25]])


def test_mse_of_identical_inputs_is_zero():
    y = np.array([[0.2, 0.9], [1.0, 0.0]])
    assert losses.mean_squared_error(y, y) == 0.0
    np.testing.assert_array_equal(losses.mean_squared_error_derivative(y, y), 0.0)


def test_mse_is_non_negative_and_grows_with_the_error():
    y_true = np.array([[0.5]])
    gaps = np.linspace(0.0, 2.0, 41)
    values = [losses.mean_squared_error(y_true, y_true + gap) for gap in gaps]
    assert all(v >= 0.0 for v in values)
    assert all(b > a for a, b in zip(values, values[1:]))
    below = [losses.mean_squared_error(y_true, y_true - gap) for gap in gaps]
    np.testing.assert_allclose(below, values)
