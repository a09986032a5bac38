import numpy as np
import pytest

from bitcrush.compositor import composite, composite_layout
from bitcrush.constants import DISPLAY_SIZE

from conftest import make_grid


def test_layout_exact_fit():
    layout = composite_layout(8, 640)
    assert (layout.canvas, layout.scale, layout.scaled, layout.offset) == (640, 80, 640, 0)


def test_layout_with_margin():
    layout = composite_layout(100, 640)
    assert (layout.scale, layout.scaled, layout.offset) == (6, 600, 20)


def test_layout_no_upscale():
    layout = composite_layout(32, 640, no_upscale=True)
    assert (layout.canvas, layout.scale, layout.offset) == (32, 1, 0)


def test_layout_rejects_non_positive_sizes():
    with pytest.raises(ValueError):
        composite_layout(0, 640)
    with pytest.raises(ValueError):
        composite_layout(8, 0)


def test_composite_repeats_cells_and_centres():
    grid = make_grid(96, seed=2, alpha=True)
    canvas = composite(grid, DISPLAY_SIZE)
    # 640 // 96 = 6 -> 576 px, 32 px margin each side
    assert canvas.shape == (640, 640, 4) and canvas.dtype == np.uint8
    assert (canvas[:32] == 0).all() and (canvas[:, :32] == 0).all()
    assert (canvas[608:] == 0).all() and (canvas[:, 608:] == 0).all()
    np.testing.assert_array_equal(canvas[32:38, 32:38], np.broadcast_to(grid[0, 0], (6, 6, 4)))
    np.testing.assert_array_equal(canvas[32:608:6, 32:608:6], grid)


def test_composite_exact_fit_has_no_margin():
    grid = make_grid(8, seed=3)
    canvas = composite(grid, 640)
    np.testing.assert_array_equal(canvas[::80, ::80], grid)
    np.testing.assert_array_equal(canvas[79, 79], grid[0, 0])
    np.testing.assert_array_equal(canvas[80, 80], grid[1, 1])


def test_composite_no_upscale_returns_copy():
    grid = make_grid(16, seed=4)
    out = composite(grid, 640, no_upscale=True)
    np.testing.assert_array_equal(out, grid)
    assert not np.shares_memory(out, grid)


def test_grid_larger_than_canvas_is_clipped():
    grid = make_grid(8, seed=5)
    canvas = composite(grid, 4)
    np.testing.assert_array_equal(canvas, grid[2:6, 2:6])
