import numpy as np
import pytest
from PIL import Image

from bitcrush.errors import InvalidGridSize
from bitcrush.sampler import (
    _tap_offsets,
    center_crop,
    resample,
    validate_grid_size,
)

from conftest import make_grid, uniform_grid


@pytest.mark.parametrize("size", [0, 7, 33, 1024, True])
def test_unsupported_grid_size(size):
    with pytest.raises(InvalidGridSize):
        resample(uniform_grid(4, (1, 2, 3)), size)


def test_supported_grid_sizes():
    for size in (8, 16, 32, 64, 80, 96, 128, 192, 256, 288, 384, 512):
        assert validate_grid_size(size) == size


def test_stretch_same_size_is_identity():
    grid = make_grid(8, seed=1, alpha=True)
    out = resample(grid, 8)
    np.testing.assert_array_equal(out, grid)
    assert out is not grid


def test_stretch_uniform_non_square_image():
    src = np.zeros((50, 100, 4), dtype=np.uint8)
    src[..., 0] = 200
    src[..., 3] = 255
    out = resample(src, 16)
    assert out.shape == (16, 16, 4) and out.dtype == np.uint8
    np.testing.assert_array_equal(out, uniform_grid(16, (200, 0, 0)))


def test_accepts_pil_images_in_any_mode():
    im = Image.new("RGB", (20, 30), (10, 20, 30))
    out = resample(im, 8)
    np.testing.assert_array_equal(out, uniform_grid(8, (10, 20, 30)))


def test_input_is_not_modified():
    grid = make_grid(16, seed=2)
    before = grid.copy()
    resample(grid, 8, policy="supersample")
    np.testing.assert_array_equal(grid, before)


def test_supersample_tap_offsets():
    assert _tap_offsets(4, 3) == (0, 2, 3)


def test_supersample_uniform_colour_is_preserved():
    src = uniform_grid(37, (90, 180, 45))
    out = resample(src, 8, policy="supersample")
    np.testing.assert_array_equal(out, uniform_grid(8, (90, 180, 45)))


def test_supersample_averages_blocks():
    # left half black, right half white: cells away from the seam stay pure
    src = np.zeros((64, 64, 4), dtype=np.uint8)
    src[:, 32:, :3] = 255
    src[..., 3] = 255
    out = resample(src, 8, policy="supersample")
    assert (out[:, 0, :3] == 0).all()
    assert (out[:, -1, :3] == 255).all()
    assert (out[..., 3] == 255).all()


def test_center_crop():
    src = np.zeros((10, 30, 4), dtype=np.uint8)
    src[:, :10, 0] = 255
    src[:, 10:20, 1] = 255
    src[:, 20:, 2] = 255
    src[..., 3] = 255
    assert center_crop(Image.fromarray(src)).size == (10, 10)

    cropped = resample(src, 8, crop="center")
    np.testing.assert_array_equal(cropped, uniform_grid(8, (0, 255, 0)))

    stretched = resample(src, 8, crop="stretch")
    assert (stretched[:, 0, :3] == (255, 0, 0)).all()
    assert (stretched[:, -1, :3] == (0, 0, 255)).all()


def test_unknown_policy_and_crop():
    grid = uniform_grid(8, (0, 0, 0))
    with pytest.raises(ValueError):
        resample(grid, 8, policy="lanczos")
    with pytest.raises(ValueError):
        resample(grid, 8, crop="fit")


def test_rejects_wrong_array_shape():
    with pytest.raises(TypeError):
        resample(np.zeros((8, 8, 3), dtype=np.uint8), 8)
