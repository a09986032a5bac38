# bitcrush/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (sRGB, D65).

Exports:
  rgb_to_linear(srgb)
  rgb_to_lab(rgb)
  rgb_to_lab_pixel(r, g, b)
  lab_distance(lab1, lab2)
  lab_distance_weighted(lab1, lab2)
  perceived_brightness(rgb)

Inputs are sRGB channels in 0..255. Callers clamp beforehand; values outside
the range are not checked and may yield NaN.
"""

import math
from typing import Sequence

import numpy as np

from .constants import (
    ENHANCED_WEIGHTS,
    LAB_EPSILON,
    LAB_KAPPA_SLOPE,
    LUMA_WEIGHTS,
    SRGB_LINEAR_CUTOFF,
    WHITE_D65,
)
from .core_types import Lab

# Linear RGB -> XYZ (D65)
_M_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)


# sRGB to linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array[...] in 0..1 (float)
    Returns:
      float64 array, same shape
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        return np.where(
            srgb_f > SRGB_LINEAR_CUTOFF,
            ((srgb_f + 0.055) / 1.055) ** 2.4,
            srgb_f / 12.92,
        )


def _lab_f(t: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore"):
        return np.where(t > LAB_EPSILON, np.cbrt(t), LAB_KAPPA_SLOPE * t + 16.0 / 116.0)


# sRGB to Lab (D65)


def rgb_to_lab(rgb: np.ndarray) -> Lab:
    """
    sRGB [0..255] to CIE Lab (D65).
    Accepts any numeric dtype. Preserves shape (...,3). Returns float64.
    """
    rgb_f = np.asarray(rgb, dtype=np.float64) / 255.0
    linear = rgb_to_linear(rgb_f)

    xyz = linear @ _M_XYZ.T
    xyz = xyz / np.asarray(WHITE_D65, dtype=np.float64)

    fx = _lab_f(xyz[..., 0])
    fy = _lab_f(xyz[..., 1])
    fz = _lab_f(xyz[..., 2])

    out = np.empty(rgb_f.shape, dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def _linear_scalar(v: float) -> float:
    v = v / 255.0
    if v > SRGB_LINEAR_CUTOFF:
        return ((v + 0.055) / 1.055) ** 2.4
    return v / 12.92


def _lab_f_scalar(t: float) -> float:
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return LAB_KAPPA_SLOPE * t + 16.0 / 116.0


def rgb_to_lab_pixel(r: float, g: float, b: float) -> tuple[float, float, float]:
    """
    Scalar sRGB -> Lab for the per-pixel scans in the diffusion algorithms.
    Same constants as rgb_to_lab.
    """
    rl = _linear_scalar(r)
    gl = _linear_scalar(g)
    bl = _linear_scalar(b)

    x = (0.4124564 * rl + 0.3575761 * gl + 0.1804375 * bl) / WHITE_D65[0]
    y = (0.2126729 * rl + 0.7151522 * gl + 0.0721750 * bl) / WHITE_D65[1]
    z = (0.0193339 * rl + 0.1191920 * gl + 0.9503041 * bl) / WHITE_D65[2]

    fx, fy, fz = _lab_f_scalar(x), _lab_f_scalar(y), _lab_f_scalar(z)
    return (116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz))


# Distances


def lab_distance(lab1: Sequence[float], lab2: Sequence[float]) -> float:
    """Euclidean (CIE76) distance between two Lab colours."""
    dl = float(lab1[0]) - float(lab2[0])
    da = float(lab1[1]) - float(lab2[1])
    db = float(lab1[2]) - float(lab2[2])
    return math.sqrt(dl * dl + da * da + db * db)


def lab_distance_weighted(lab1: Sequence[float], lab2: Sequence[float]) -> float:
    """Lightness/chroma weighted Lab distance: sqrt(2dL^2 + 4da^2 + db^2)."""
    wl, wa, wb = ENHANCED_WEIGHTS
    dl = float(lab1[0]) - float(lab2[0])
    da = float(lab1[1]) - float(lab2[1])
    db = float(lab1[2]) - float(lab2[2])
    return math.sqrt(wl * dl * dl + wa * da * da + wb * db * db)


def perceived_brightness(rgb: np.ndarray) -> np.ndarray:
    """
    Rec. 601 luma normalised to 0..1.
    Works on a single (3,) colour or any (...,3) array.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    return (arr[..., 0] * wr + arr[..., 1] * wg + arr[..., 2] * wb) / 255.0


__all__ = [
    "rgb_to_linear",
    "rgb_to_lab",
    "rgb_to_lab_pixel",
    "lab_distance",
    "lab_distance_weighted",
    "perceived_brightness",
]
