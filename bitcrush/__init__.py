# bitcrush/__init__.py
"""
bitcrush package.

Purpose:
  Turn any image into palette-constrained pixel art: resample to a W x W grid,
  snap every cell to a palette colour (optionally dithered), and composite the
  result onto a display canvas. See pixelize.py for the CLI.

Public API:
  pixelize        : end-to-end run, returns a PixelizationResult.
  quantize        : map a grid to a palette with one of the ten algorithms.
  resample        : source image -> W x W RGBA grid.
  composite       : grid -> centred, integer-scaled display canvas.
  Algorithm       : algorithm catalog.
  PaletteResolver : nearest / two-nearest palette lookups in Lab.
  PixelizationParams, DEFAULT_PARAMS : per-request parameters.
  colour_convert  : sRGB -> Lab, distances, brightness.
  palette_data    : built-in palettes and lookup.
  palette_files   : .gpl / .hex palette loaders.
  utils           : logging and formatting helpers.

Quick start:
  from bitcrush import pixelize, PixelizationParams, find_palette
  from bitcrush.image_io import load_image_rgba
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import palette_data
from . import palette_files
from . import utils

from .algorithms import Algorithm, algorithm_names, quantize  # noqa: E402
from .compositor import composite, composite_layout  # noqa: E402
from .errors import (  # noqa: E402
    BitcrushError,
    EmptyPalette,
    ImageDecodeFailure,
    InvalidColorFormat,
    InvalidGridSize,
    UnknownAlgorithm,
)
from .palette_data import BUILTIN_PALETTES, ColorPalette, find_palette  # noqa: E402
from .palette_resolver import PaletteResolver  # noqa: E402
from .params import DEFAULT_PARAMS, PixelizationParams  # noqa: E402
from .pipeline import PixelizationResult, output_filename, pixelize  # noqa: E402
from .sampler import resample  # noqa: E402

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "palette_data",
    "palette_files",
    "utils",
    "Algorithm",
    "algorithm_names",
    "quantize",
    "composite",
    "composite_layout",
    "BitcrushError",
    "EmptyPalette",
    "ImageDecodeFailure",
    "InvalidColorFormat",
    "InvalidGridSize",
    "UnknownAlgorithm",
    "BUILTIN_PALETTES",
    "ColorPalette",
    "find_palette",
    "PaletteResolver",
    "DEFAULT_PARAMS",
    "PixelizationParams",
    "PixelizationResult",
    "output_filename",
    "pixelize",
    "resample",
]
