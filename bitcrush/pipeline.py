# bitcrush/pipeline.py
from __future__ import annotations

"""
End-to-end pixelization: source image -> grid -> quantized grid -> canvas.

  pixelize(image, params, display_size) -> PixelizationResult
  output_filename(algorithm, grid_size, palette_name, base=False) -> str
"""

import re
import time
from dataclasses import dataclass
from typing import Union

import numpy as np
from PIL import Image

from .algorithms import Algorithm, quantize
from .compositor import CanvasLayout, composite, composite_layout
from .constants import DISPLAY_SIZE
from .core_types import U8Grid
from .palette_lock import is_palette_only, palette_set
from .palette_resolver import PaletteResolver
from .params import DEFAULT_PARAMS, PixelizationParams
from .sampler import resample
from .utils import (
    debug_log,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    warn,
)

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, eq=False)
class PixelizationResult:
    """
    grid    : quantized W x W RGBA grid (the base resolution render)
    preview : grid composited onto the display canvas
    layout  : canvas geometry used for preview
    """

    grid: U8Grid
    preview: U8Grid
    layout: CanvasLayout
    params: PixelizationParams

    @property
    def base(self) -> U8Grid:
        return self.grid

    def filename(self, base: bool = False) -> str:
        return output_filename(
            self.params.algorithm,
            self.params.grid_size,
            self.params.palette.name,
            base=base,
        )


def _slug(text: str) -> str:
    return _WS_RE.sub("-", text.strip().lower())


def output_filename(
    algorithm: Union[Algorithm, str],
    grid_size: int,
    palette_name: str,
    base: bool = False,
) -> str:
    """pixelized[-base]-<algorithm>-<W>x<W>-<palette>.png, lower-case, spaces -> '-'."""
    algo = _slug(str(algorithm))
    prefix = "pixelized-base" if base else "pixelized"
    return f"{prefix}-{algo}-{grid_size}x{grid_size}-{_slug(palette_name)}.png"


def pixelize(
    image: Union[np.ndarray, Image.Image],
    params: PixelizationParams = DEFAULT_PARAMS,
    display_size: int = DISPLAY_SIZE,
    *,
    debug: bool = False,
) -> PixelizationResult:
    """
    Run the full pipeline for one image. Palette and grid size are fixed for
    the whole call. Raises InvalidGridSize, EmptyPalette, InvalidColorFormat,
    UnknownAlgorithm.
    """
    t_start = time.perf_counter()
    algo = Algorithm.from_key(params.algorithm)
    resolver = PaletteResolver.coerce(params.palette)

    grid = resample(
        image, params.grid_size, policy=algo.resample_policy, crop=params.crop
    )
    t_sampled = time.perf_counter()

    out = quantize(grid, resolver, algo)
    t_quantized = time.perf_counter()

    layout = composite_layout(params.grid_size, display_size, params.no_upscale)
    preview = composite(out, display_size, params.no_upscale)
    t_done = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Grid", f"{params.grid_size}x{params.grid_size}"),
                    ("Algorithm", algo.value),
                    ("Policy", algo.resample_policy),
                    ("Palette", f"{resolver.name or '-'} ({len(resolver)})"),
                    ("Canvas", f"{layout.canvas} x{layout.scale} @{layout.offset}"),
                ]
            )
        )
        if not is_palette_only(out, palette_set(resolver)):
            warn("quantized grid contains off-palette colours")
        debug_log(
            f"Total {format_total_duration_compact(t_done - t_start)}  "
            f"(sample={format_seconds_compact(t_sampled - t_start)}, "
            f"quantize={format_seconds_compact(t_quantized - t_sampled)}, "
            f"composite={format_seconds_compact(t_done - t_quantized)})"
        )

    return PixelizationResult(grid=out, preview=preview, layout=layout, params=params)


__all__ = ["PixelizationResult", "output_filename", "pixelize"]
