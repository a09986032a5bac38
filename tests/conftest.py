from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from bitcrush.palette_data import find_palette  # noqa: E402
from bitcrush.palette_resolver import PaletteResolver  # noqa: E402


@pytest.fixture
def bw():
    return PaletteResolver(["#000000", "#ffffff"], name="Black & White")


@pytest.fixture
def flying_tiger():
    return PaletteResolver.coerce(find_palette("Flying Tiger"))


def make_grid(size: int, seed: int = 0, alpha: bool = False) -> np.ndarray:
    rng = np.random.default_rng(seed)
    grid = rng.integers(0, 256, size=(size, size, 4), dtype=np.uint8)
    if not alpha:
        grid[..., 3] = 255
    return grid


def uniform_grid(size: int, rgb, a: int = 255) -> np.ndarray:
    grid = np.zeros((size, size, 4), dtype=np.uint8)
    grid[..., :3] = rgb
    grid[..., 3] = a
    return grid
