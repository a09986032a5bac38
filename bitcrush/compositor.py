# bitcrush/compositor.py
from __future__ import annotations

"""
Output compositor: place a quantized W x W grid on a square display canvas.

The grid is enlarged by whole-pixel repetition (the largest integer scale that
fits, at least 1) and centred on a transparent canvas. With no_upscale the
grid itself is returned.
"""

from dataclasses import dataclass

import numpy as np

from .constants import DISPLAY_SIZE
from .core_types import U8Grid, assert_square_grid


@dataclass(frozen=True)
class CanvasLayout:
    canvas: int  # side of the output canvas
    scale: int  # integer enlargement factor
    scaled: int  # side of the enlarged grid
    offset: int  # top-left of the enlarged grid on the canvas, both axes


def composite_layout(
    grid_size: int, display_size: int = DISPLAY_SIZE, no_upscale: bool = False
) -> CanvasLayout:
    """Canvas geometry for a grid of side grid_size."""
    if grid_size <= 0:
        raise ValueError(f"grid size must be positive, got {grid_size}")
    if no_upscale:
        return CanvasLayout(canvas=grid_size, scale=1, scaled=grid_size, offset=0)
    if display_size <= 0:
        raise ValueError(f"display size must be positive, got {display_size}")
    scale = max(1, display_size // grid_size)
    scaled = grid_size * scale
    # floor, so a 1 px slack goes to the right/bottom edge
    offset = (display_size - scaled) // 2
    return CanvasLayout(canvas=display_size, scale=scale, scaled=scaled, offset=offset)


def composite(
    grid: U8Grid, display_size: int = DISPLAY_SIZE, no_upscale: bool = False
) -> U8Grid:
    """
    Enlarge grid with nearest-neighbour repetition and centre it on a
    transparent display_size x display_size RGBA canvas.
    """
    w = assert_square_grid(grid)
    layout = composite_layout(w, display_size, no_upscale)
    if no_upscale:
        return grid.copy()

    big = np.repeat(np.repeat(grid, layout.scale, axis=0), layout.scale, axis=1)
    canvas = np.zeros((layout.canvas, layout.canvas, 4), dtype=np.uint8)

    # a grid larger than the canvas is clipped rather than shrunk
    lo = max(0, layout.offset)
    src = lo - layout.offset
    span = min(layout.canvas - lo, layout.scaled - src)
    canvas[lo : lo + span, lo : lo + span] = big[src : src + span, src : src + span]
    return canvas


__all__ = ["CanvasLayout", "composite_layout", "composite"]
