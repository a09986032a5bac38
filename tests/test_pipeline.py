import numpy as np
import pytest
from PIL import Image

from bitcrush.algorithms import Algorithm
from bitcrush.errors import InvalidGridSize, UnknownAlgorithm
from bitcrush.palette_data import find_palette
from bitcrush.palette_lock import is_palette_only, palette_set
from bitcrush.palette_resolver import PaletteResolver
from bitcrush.params import DEFAULT_PARAMS, PixelizationParams
from bitcrush.pipeline import output_filename, pixelize

from conftest import make_grid


def test_default_params():
    assert DEFAULT_PARAMS.grid_size == 32
    assert DEFAULT_PARAMS.palette.name == "Flying Tiger"
    assert DEFAULT_PARAMS.algorithm is Algorithm.STANDARD
    assert DEFAULT_PARAMS.no_upscale is False
    assert DEFAULT_PARAMS.crop == "stretch"


def test_params_validation():
    with pytest.raises(InvalidGridSize):
        PixelizationParams(grid_size=10)
    with pytest.raises(UnknownAlgorithm):
        PixelizationParams(algorithm="Blur")
    with pytest.raises(ValueError):
        PixelizationParams(crop="fit")
    assert PixelizationParams(algorithm="bayer").algorithm is Algorithm.BAYER
    assert DEFAULT_PARAMS.with_algorithm("Edge Dithering").algorithm is Algorithm.EDGE


def test_output_filename():
    assert (
        output_filename(Algorithm.FLOYD_STEINBERG, 32, "Black & White")
        == "pixelized-floyd-steinberg-32x32-black-&-white.png"
    )
    assert (
        output_filename("Dual Color Dithering", 8, "Gameboy", base=True)
        == "pixelized-base-dual-color-dithering-8x8-gameboy.png"
    )


@pytest.mark.parametrize("algo", [Algorithm.STANDARD, Algorithm.ENHANCED, Algorithm.FLOYD_STEINBERG])
def test_pixelize_end_to_end(algo):
    rng = np.random.default_rng(0)
    image = rng.integers(0, 256, size=(30, 50, 4), dtype=np.uint8)
    image[..., 3] = 255
    params = PixelizationParams(
        grid_size=16, palette=find_palette("Black & White"), algorithm=algo
    )

    result = pixelize(image, params)

    assert result.grid.shape == (16, 16, 4)
    assert result.base is result.grid
    assert result.preview.shape == (640, 640, 4)
    assert result.layout.scale == 40 and result.layout.offset == 0
    assert is_palette_only(result.grid, palette_set(PaletteResolver.coerce(params.palette)))
    np.testing.assert_array_equal(result.preview[::40, ::40], result.grid)
    assert result.filename() == f"pixelized-{algo.slug}-16x16-black-&-white.png"


def test_pixelize_no_upscale_and_pil_input():
    image = Image.new("RGBA", (40, 40), (250, 10, 10, 255))
    params = PixelizationParams(grid_size=8, no_upscale=True)
    result = pixelize(image, params)
    assert result.preview.shape == (8, 8, 4)
    assert (result.grid[..., :3] == (255, 0, 0)).all()


def test_pixelize_debug_logs(capsys):
    params = PixelizationParams(grid_size=8, algorithm="Bayer")
    pixelize(make_grid(20, seed=1), params, display_size=100, debug=True)
    out = capsys.readouterr().out
    assert "[debug] Grid: 8x8" in out
    assert "Algorithm: Bayer" in out
    assert "[warn]" not in out
