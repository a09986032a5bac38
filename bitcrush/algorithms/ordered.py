# bitcrush/algorithms/ordered.py
from __future__ import annotations

"""
Position-driven dithering: the choice at a cell depends only on that cell's
colour and its (x, y), never on its neighbours, so each pass is vectorised.

  bayer                : 4x4 Bayer threshold decides nearest vs runner-up
  ordered_selective    : far-from-palette cells use an 8x8 ordered threshold
  randomized_selective : far-from-palette cells use hashed blue-ish noise
"""

from typing import Tuple

import numpy as np

from ..colour_convert import perceived_brightness, rgb_to_lab
from ..constants import (
    BAYER_MATRIX_4X4,
    BAYER_SECOND_SLACK,
    BLUE_NOISE_AMPLITUDE,
    BLUE_NOISE_OCTAVES,
    BLUE_NOISE_SEED,
    ORDERED_MATRIX_8X8,
    ORDERED_SELECTIVE_THRESHOLD,
    RANDOMIZED_BRIGHTNESS_SPLIT,
    RANDOMIZED_SELECTIVE_THRESHOLD,
)
from ..core_types import U8Grid
from ..palette_resolver import PaletteResolver

_U32 = 4294967296.0
_MASK31 = 0x7FFFFFFF


def threshold_map(matrix, height: int, width: int) -> np.ndarray:
    """Tile a square threshold matrix over (height, width), normalised to 0..1."""
    m = np.asarray(matrix, dtype=np.float64)
    n = m.shape[0]
    ys, xs = np.mgrid[0:height, 0:width]
    return m[ys % n, xs % n] / float(n * n)


def _hash_unit(n) -> np.ndarray:
    """
    Integer hash mapped to [0, 1], bit-compatible with the double/int32
    arithmetic of `((n << 13) ^ n) - (n * (n * n * 15731 + 789221) + 1376312589)`
    followed by `& 0x7fffffff`.
    """
    n = np.asarray(n, dtype=np.int64)
    u = ((n << 13) ^ n) & 0xFFFFFFFF
    t = np.where(u >= 2**31, u - 2**32, u).astype(np.float64)

    nf = n.astype(np.float64)
    inner = nf * (nf * nf * 15731.0 + 789221.0) + 1376312589.0
    r = t - inner
    # r is integral; fmod is exact, so this is r modulo 2^32
    low = np.fmod(r, _U32)
    low = np.where(low < 0, low + _U32, low)
    bits = low.astype(np.int64) & _MASK31
    return bits / float(_MASK31)


def blue_noise(height: int, width: int, seed: int = BLUE_NOISE_SEED) -> np.ndarray:
    """Three weighted hash octaves per cell, mod 1. float64 [H,W] in [0, 1)."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.int64)
    total = np.zeros((height, width), dtype=np.float64)
    for mx, my, ms, weight in BLUE_NOISE_OCTAVES:
        total = total + _hash_unit(xs * mx + ys * my + seed * ms) * weight
    return np.fmod(total, 1.0)


def _prepare(
    work: U8Grid, resolver: PaletteResolver
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    rgb = work[..., :3]
    lab = rgb_to_lab(rgb)
    first, second = resolver.two_nearest_indices_batch(lab)
    return lab, first, second, perceived_brightness(rgb)


def bayer(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """
    Use the runner-up where the Bayer threshold is below the brightness gap to
    the nearest colour and the runner-up's gap is within 1.5 times that.
    """
    h, w = work.shape[:2]
    _, first, second, bright = _prepare(work, resolver)
    pal_bright = perceived_brightness(resolver.rgb)

    gap = np.abs(bright - pal_bright[first])
    gap_second = np.abs(bright - pal_bright[second])
    thresholds = threshold_map(BAYER_MATRIX_4X4, h, w)
    use_second = (thresholds < gap) & (gap_second < gap * BAYER_SECOND_SLACK)

    work[..., :3] = resolver.rgb[np.where(use_second, second, first)]
    return work


def ordered_selective(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Cells farther than 25 Lab units: nearest if brightness > m/64, else runner-up."""
    h, w = work.shape[:2]
    lab, first, second, bright = _prepare(work, resolver)
    nearest, dist = resolver.nearest_indices(lab)

    thresholds = threshold_map(ORDERED_MATRIX_8X8, h, w)
    picked = np.where(bright > thresholds, first, second)
    idx = np.where(dist > ORDERED_SELECTIVE_THRESHOLD, picked, nearest)
    work[..., :3] = resolver.rgb[idx]
    return work


def randomized_selective(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Cells farther than 30 Lab units: noise-jittered brightness picks nearest or runner-up."""
    h, w = work.shape[:2]
    lab, first, second, bright = _prepare(work, resolver)
    nearest, dist = resolver.nearest_indices(lab)

    jittered = bright + (blue_noise(h, w) - 0.5) * BLUE_NOISE_AMPLITUDE
    picked = np.where(jittered > RANDOMIZED_BRIGHTNESS_SPLIT, first, second)
    idx = np.where(dist > RANDOMIZED_SELECTIVE_THRESHOLD, picked, nearest)
    work[..., :3] = resolver.rgb[idx]
    return work


__all__ = [
    "threshold_map",
    "blue_noise",
    "bayer",
    "ordered_selective",
    "randomized_selective",
]
