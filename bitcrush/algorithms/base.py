# bitcrush/algorithms/base.py
from __future__ import annotations

"""
Shared pieces for the per-pixel scans.

The sequential algorithms read and write a nested list of [r, g, b] ints taken
from the working grid, then store it back. Writes round half to even after
clamping to 0..255, so the list always holds what a uint8 buffer would.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..constants import KERNEL_FS, LUMA_WEIGHTS
from ..core_types import U8Grid
from ..palette_resolver import PaletteResolver

Pixels = List[List[List[int]]]


def load_pixels(work: U8Grid) -> Pixels:
    """RGB channels of the working grid as nested [y][x][c] ints."""
    return work[..., :3].tolist()


def store_pixels(work: U8Grid, px: Pixels) -> U8Grid:
    """Write nested RGB ints back into the working grid; alpha is untouched."""
    work[..., :3] = np.asarray(px, dtype=np.uint8).reshape(work.shape[0], work.shape[1], 3)
    return work


def _to_byte(value: float) -> int:
    if value <= 0.0:
        return 0
    if value >= 255.0:
        return 255
    return round(value)


def diffuse_error(
    px: Pixels,
    x: int,
    y: int,
    err: Sequence[float],
    kernel: Sequence[Tuple[int, int, float]] = KERNEL_FS,
) -> None:
    """Push err * weight onto the in-bounds kernel neighbours of (x, y)."""
    h = len(px)
    w = len(px[0]) if h else 0
    er, eg, eb = err
    for dx, dy, wt in kernel:
        nx, ny = x + dx, y + dy
        if 0 <= nx < w and 0 <= ny < h:
            cell = px[ny][nx]
            cell[0] = _to_byte(cell[0] + er * wt)
            cell[1] = _to_byte(cell[1] + eg * wt)
            cell[2] = _to_byte(cell[2] + eb * wt)


def colour_error(
    old: Sequence[int], new: Sequence[int], scale: float = 1.0
) -> Tuple[float, float, float]:
    """Per-channel (old - new) * scale."""
    if scale == 1.0:
        return (
            float(old[0] - new[0]),
            float(old[1] - new[1]),
            float(old[2] - new[2]),
        )
    return (
        (old[0] - new[0]) * scale,
        (old[1] - new[1]) * scale,
        (old[2] - new[2]) * scale,
    )


def pixel_brightness(r: float, g: float, b: float) -> float:
    """Scalar form of perceived_brightness."""
    wr, wg, wb = LUMA_WEIGHTS
    return (r * wr + g * wg + b * wb) / 255.0


class NearestCache:
    """
    Per-run memo of resolver lookups keyed by RGB. Each scan owns one, so the
    resolver itself stays read-only.
    """

    def __init__(self, resolver: PaletteResolver) -> None:
        self.resolver = resolver
        self._nearest: Dict[Tuple[int, int, int], Tuple[int, float]] = {}
        self._pair: Dict[Tuple[int, int, int], Tuple[int, int]] = {}

    def nearest(self, rgb: Sequence[int]) -> Tuple[int, float]:
        key = (rgb[0], rgb[1], rgb[2])
        hit = self._nearest.get(key)
        if hit is None:
            hit = self.resolver.nearest_with_distance(key)
            self._nearest[key] = hit
        return hit

    def two_nearest(self, rgb: Sequence[int]) -> Tuple[int, int]:
        key = (rgb[0], rgb[1], rgb[2])
        hit = self._pair.get(key)
        if hit is None:
            hit = self.resolver.two_nearest_indices(key)
            self._pair[key] = hit
        return hit


__all__ = [
    "Pixels",
    "load_pixels",
    "store_pixels",
    "diffuse_error",
    "colour_error",
    "pixel_brightness",
    "NearestCache",
]
