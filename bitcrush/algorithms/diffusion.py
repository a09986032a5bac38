# bitcrush/algorithms/diffusion.py
from __future__ import annotations

"""
Error-diffusion scans. Row-major, left to right, top to bottom, no
serpentine. Each cell is read after every earlier cell has pushed its error
into it, so these run one pixel at a time over the working buffer.

  floyd_steinberg : nearest colour, full error, 7/16 3/16 5/16 1/16
  dual_color      : brightness picks nearest or runner-up, 0.6 of the error
  edge            : full diffusion on edge cells only, plain nearest elsewhere
  selective       : cells farther than 25 Lab units diffuse half their error
"""

from ..constants import (
    DUAL_BRIGHTNESS_SPLIT,
    DUAL_ERROR_SCALE,
    EDGE_DIFF_THRESHOLD,
    SELECTIVE_ERROR_SCALE,
    SELECTIVE_THRESHOLD,
)
from ..core_types import U8Grid
from ..palette_resolver import PaletteResolver
from .base import (
    NearestCache,
    Pixels,
    colour_error,
    diffuse_error,
    load_pixels,
    pixel_brightness,
    store_pixels,
)


def floyd_steinberg(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Classic Floyd-Steinberg over the Lab nearest colour."""
    px = load_pixels(work)
    cache = NearestCache(resolver)
    for y, row in enumerate(px):
        for x, cell in enumerate(row):
            idx, _ = cache.nearest(cell)
            new = resolver.items[idx].rgb
            err = colour_error(cell, new)
            cell[:] = new
            diffuse_error(px, x, y, err)
    return store_pixels(work, px)


def dual_color(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """
    Only the two closest palette colours are candidates: bright cells take the
    nearest, dark cells the runner-up. 60% of the error is diffused.
    """
    px = load_pixels(work)
    cache = NearestCache(resolver)
    for y, row in enumerate(px):
        for x, cell in enumerate(row):
            i1, i2 = cache.two_nearest(cell)
            bright = pixel_brightness(cell[0], cell[1], cell[2])
            pick = i1 if bright > DUAL_BRIGHTNESS_SPLIT else i2
            new = resolver.items[pick].rgb
            err = colour_error(cell, new, DUAL_ERROR_SCALE)
            cell[:] = new
            diffuse_error(px, x, y, err)
    return store_pixels(work, px)


def detect_edge(px: Pixels, x: int, y: int) -> bool:
    """
    True if any 4-neighbour differs by more than EDGE_DIFF_THRESHOLD in
    |dR| + |dG| + |dB|. Border cells are never edges. Reads the buffer as it
    is at scan time, so the upper and left neighbours are already snapped.
    """
    h = len(px)
    w = len(px[0])
    if x == 0 or y == 0 or x == w - 1 or y == h - 1:
        return False
    r, g, b = px[y][x]
    for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
        nr, ng, nb = px[ny][nx]
        if abs(r - nr) + abs(g - ng) + abs(b - nb) > EDGE_DIFF_THRESHOLD:
            return True
    return False


def edge(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Floyd-Steinberg on edge cells, plain nearest colour on the rest."""
    px = load_pixels(work)
    cache = NearestCache(resolver)
    for y, row in enumerate(px):
        for x, cell in enumerate(row):
            is_edge = detect_edge(px, x, y)
            idx, _ = cache.nearest(cell)
            new = resolver.items[idx].rgb
            if is_edge:
                err = colour_error(cell, new)
                cell[:] = new
                diffuse_error(px, x, y, err)
            else:
                cell[:] = new
    return store_pixels(work, px)


def selective(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Diffuse half the error, but only from cells far from every palette colour."""
    px = load_pixels(work)
    cache = NearestCache(resolver)
    for y, row in enumerate(px):
        for x, cell in enumerate(row):
            idx, dist = cache.nearest(cell)
            new = resolver.items[idx].rgb
            if dist > SELECTIVE_THRESHOLD:
                err = colour_error(cell, new, SELECTIVE_ERROR_SCALE)
                cell[:] = new
                diffuse_error(px, x, y, err)
            else:
                cell[:] = new
    return store_pixels(work, px)


__all__ = ["floyd_steinberg", "dual_color", "detect_edge", "edge", "selective"]
