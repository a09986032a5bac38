# bitcrush/palette_lock.py
from __future__ import annotations

"""
Palette lock helpers.

Functions:
  palette_set(palette) -> set of RGB tuples
  off_palette_colours(grid, pal_set) -> sorted list of RGB tuples
  is_palette_only(grid, pal_set) -> bool
  lock_to_palette(grid, resolver) -> U8Grid

Use cases:
  - palette_set + is_palette_only: check that a quantized grid only uses
    palette colours (alpha is ignored, every cell counts)
  - lock_to_palette: snap off-palette uniques to their nearest entries,
    leaving cells that already match untouched
"""

from typing import Iterable, List, Set

import numpy as np

from .colour_convert import rgb_to_lab
from .core_types import RGBTuple, U8Grid, assert_u8_grid_rgba
from .palette_resolver import PaletteResolver


def palette_set(palette: Iterable[RGBTuple] | PaletteResolver) -> Set[RGBTuple]:
    """Return a set of all RGB tuples present in the palette."""
    if isinstance(palette, PaletteResolver):
        return set(palette.colors)
    return {(int(c[0]), int(c[1]), int(c[2])) for c in palette}


def _unique_rgb(grid: U8Grid) -> np.ndarray:
    flat = grid[..., :3].reshape(-1, 3)
    if flat.shape[0] == 0:
        return flat
    return np.unique(flat, axis=0)


def off_palette_colours(grid: U8Grid, pal_set: Set[RGBTuple]) -> List[RGBTuple]:
    """Distinct RGB values of the grid that are not in pal_set, sorted."""
    assert_u8_grid_rgba(grid)
    out: List[RGBTuple] = []
    for r, g, b in _unique_rgb(grid).tolist():
        t: RGBTuple = (int(r), int(g), int(b))
        if t not in pal_set:
            out.append(t)
    return out


def is_palette_only(grid: U8Grid, pal_set: Set[RGBTuple]) -> bool:
    """True if every cell's RGB is already in the palette."""
    return not off_palette_colours(grid, pal_set)


def lock_to_palette(grid: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """
    Snap colours to nearest palette entries, but only for unique colours
    that are off-palette. Alpha is preserved.

    Args:
      grid: uint8 [H,W,4]
      resolver: palette to snap to
    Returns:
      uint8 [H,W,4] copy with off-palette RGB replaced by nearest palette RGB
    """
    out = assert_u8_grid_rgba(grid).copy()
    offenders = off_palette_colours(out, palette_set(resolver))
    if not offenders:
        return out

    off_np = np.array(offenders, dtype=np.uint8)
    nearest, _ = resolver.nearest_indices(rgb_to_lab(off_np))
    rgb = out[..., :3]
    for i, key in enumerate(offenders):
        hit = np.all(rgb == np.array(key, dtype=np.uint8), axis=-1)
        rgb[hit] = resolver.rgb[int(nearest[i])]
    return out


__all__ = [
    "palette_set",
    "off_palette_colours",
    "is_palette_only",
    "lock_to_palette",
]
