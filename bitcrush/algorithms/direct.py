# bitcrush/algorithms/direct.py
from __future__ import annotations

"""
Direct (non-dithering) mappings: every cell is snapped on its own, so the
whole grid is handled in one vectorised pass.

  standard : plain Lab nearest colour
  enhanced : weighted Lab nearest colour, run on a supersampled grid
  artistic : contrast boost, then Lab nearest with a positional noise term
"""

import numpy as np

from ..colour_convert import rgb_to_lab
from ..constants import (
    ARTISTIC_CONTRAST,
    ARTISTIC_NOISE_GAIN,
    ARTISTIC_NOISE_X,
    ARTISTIC_NOISE_Y,
)
from ..core_types import U8Grid
from ..palette_resolver import PaletteResolver


def _apply(work: U8Grid, resolver: PaletteResolver, idx: np.ndarray) -> U8Grid:
    work[..., :3] = resolver.rgb[idx]
    return work


def standard(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Nearest palette colour by Euclidean Lab distance."""
    idx, _ = resolver.nearest_indices(rgb_to_lab(work[..., :3]))
    return _apply(work, resolver, idx)


def enhanced(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """Nearest palette colour by sqrt(2dL^2 + 4da^2 + db^2)."""
    idx, _ = resolver.nearest_indices(rgb_to_lab(work[..., :3]), metric="weighted")
    return _apply(work, resolver, idx)


def contrast_boost(rgb: np.ndarray) -> np.ndarray:
    """(v - 128) * gain + 128, clamped to 0..255. Stays float."""
    boosted = (np.asarray(rgb, dtype=np.float64) - 128.0) * ARTISTIC_CONTRAST + 128.0
    return np.clip(boosted, 0.0, 255.0)


def spatial_noise(height: int, width: int) -> np.ndarray:
    """(sin(0.7x) + cos(0.5y)) * 2 for every cell. float64 [H,W]."""
    ys, xs = np.mgrid[0:height, 0:width]
    return (
        np.sin(xs * ARTISTIC_NOISE_X) + np.cos(ys * ARTISTIC_NOISE_Y)
    ) * ARTISTIC_NOISE_GAIN


def artistic(work: U8Grid, resolver: PaletteResolver) -> U8Grid:
    """
    Contrast-boosted Lab nearest colour. The noise term is added to every
    candidate distance of a cell, which shifts them all equally.
    """
    h, w = work.shape[:2]
    lab = rgb_to_lab(contrast_boost(work[..., :3]))
    idx, _ = resolver.nearest_indices(lab, bias=spatial_noise(h, w))
    return _apply(work, resolver, idx)


__all__ = ["standard", "enhanced", "artistic", "contrast_boost", "spatial_noise"]
