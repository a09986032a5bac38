import numpy as np
import pytest

from bitcrush.colour_convert import (
    _lab_f,
    lab_distance,
    lab_distance_weighted,
    perceived_brightness,
    rgb_to_lab,
    rgb_to_lab_pixel,
    rgb_to_linear,
)
from bitcrush.constants import LAB_EPSILON, SRGB_LINEAR_CUTOFF


def test_black_and_white_endpoints():
    lab = rgb_to_lab(np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8))
    np.testing.assert_allclose(lab[0], [0.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(lab[1], [100.0, 0.0, 0.0], atol=1e-2)


def test_mid_grey_lightness():
    L, a, b = rgb_to_lab_pixel(128, 128, 128)
    assert L == pytest.approx(53.585, abs=0.01)
    assert abs(a) < 1e-2 and abs(b) < 1e-2


def test_scalar_matches_vectorised():
    rng = np.random.default_rng(7)
    samples = rng.integers(0, 256, size=(64, 3))
    batch = rgb_to_lab(samples)
    for rgb, row in zip(samples.tolist(), batch):
        np.testing.assert_allclose(rgb_to_lab_pixel(*rgb), row, atol=1e-9)


def test_rgb_to_lab_preserves_leading_shape():
    grid = np.zeros((3, 5, 3), dtype=np.uint8)
    assert rgb_to_lab(grid).shape == (3, 5, 3)
    assert rgb_to_lab(grid).dtype == np.float64


def test_deterministic():
    rgb = np.array([12, 200, 99], dtype=np.uint8)
    np.testing.assert_array_equal(rgb_to_lab(rgb), rgb_to_lab(rgb))


def test_linearisation_continuous_at_cutoff():
    eps = 1e-9
    lo, hi = rgb_to_linear(np.array([SRGB_LINEAR_CUTOFF - eps, SRGB_LINEAR_CUTOFF + eps]))
    assert abs(hi - lo) < 1e-6


def test_lab_nonlinearity_continuous_at_epsilon():
    eps = 1e-9
    lo, hi = _lab_f(np.array([LAB_EPSILON - eps, LAB_EPSILON + eps]))
    assert abs(hi - lo) < 1e-4


def test_neighbouring_channel_values_stay_close():
    # 10 and 11 sit either side of the linear segment
    a = np.array(rgb_to_lab_pixel(10, 10, 10))
    b = np.array(rgb_to_lab_pixel(11, 11, 11))
    assert np.linalg.norm(a - b) < 1.0


def test_distances():
    assert lab_distance((50.0, 10.0, -5.0), (50.0, 10.0, -5.0)) == 0.0
    assert lab_distance((3.0, 4.0, 0.0), (0.0, 0.0, 0.0)) == pytest.approx(5.0)
    assert lab_distance_weighted((1.0, 0.0, 0.0), (0.0, 0.0, 0.0)) == pytest.approx(2**0.5)
    assert lab_distance_weighted((0.0, 1.0, 0.0), (0.0, 0.0, 0.0)) == pytest.approx(2.0)
    assert lab_distance_weighted((0.0, 0.0, 1.0), (0.0, 0.0, 0.0)) == pytest.approx(1.0)


def test_perceived_brightness():
    assert float(perceived_brightness(np.array([255, 255, 255]))) == pytest.approx(1.0)
    assert float(perceived_brightness(np.array([0, 0, 0]))) == 0.0
    assert float(perceived_brightness(np.array([255, 0, 0]))) == pytest.approx(0.299)
    grid = np.full((2, 2, 3), 51, dtype=np.uint8)
    np.testing.assert_allclose(perceived_brightness(grid), np.full((2, 2), 0.2))
