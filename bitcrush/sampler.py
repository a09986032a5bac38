# bitcrush/sampler.py
from __future__ import annotations

"""
Grid sampler: reduce a source image to the W x W RGBA grid the algorithms run on.

Policies:
  stretch     : nearest-neighbour resize of the whole image to W x W
  supersample : bilinear resize to 4W x 4W, then average a 3 x 3 set of
                samples inside every 4 x 4 block (Enhanced)

Crop modes:
  stretch : the whole image is squeezed into the square (aspect may distort)
  center  : centred square crop of side min(w, h) first
"""

import math
from typing import Tuple, Union

import numpy as np
from PIL import Image

from .constants import GRID_SIZES, SUPERSAMPLE_FACTOR, SUPERSAMPLE_TAPS
from .core_types import U8Grid, assert_u8_grid_rgba
from .errors import InvalidGridSize

RESAMPLE_POLICIES: Tuple[str, ...] = ("stretch", "supersample")
CROP_MODES: Tuple[str, ...] = ("stretch", "center")

ImageSource = Union[np.ndarray, Image.Image]


def validate_grid_size(grid_size: int) -> int:
    """Return grid_size if it is a supported W, else raise InvalidGridSize."""
    if isinstance(grid_size, bool) or grid_size not in GRID_SIZES:
        raise InvalidGridSize(grid_size, GRID_SIZES)
    return int(grid_size)


def _as_rgba_image(image: ImageSource) -> Image.Image:
    if isinstance(image, Image.Image):
        return image if image.mode == "RGBA" else image.convert("RGBA")
    arr = assert_u8_grid_rgba(np.ascontiguousarray(image))
    return Image.fromarray(arr)


def center_crop(im: Image.Image) -> Image.Image:
    """Centred square crop of side min(width, height)."""
    w, h = im.size
    side = min(w, h)
    left = (w - side) // 2
    top = (h - side) // 2
    return im.crop((left, top, left + side, top + side))


def stretch_to_grid(im: Image.Image, grid_size: int) -> U8Grid:
    """Nearest-neighbour resize to grid_size x grid_size, no smoothing."""
    small = im.resize((grid_size, grid_size), resample=Image.Resampling.NEAREST)
    return np.array(small, dtype=np.uint8)


def _tap_offsets(factor: int, taps: int) -> Tuple[int, ...]:
    # in-block sample positions, e.g. (0, 2, 3) for 4 px blocks and 3 taps
    return tuple(int(math.floor((d + 0.5) * factor / taps)) for d in range(taps))


def supersample_to_grid(im: Image.Image, grid_size: int) -> U8Grid:
    """
    Render at SUPERSAMPLE_FACTOR x grid_size with bilinear smoothing, then
    average SUPERSAMPLE_TAPS^2 samples per block, rounding half up.
    Alpha is averaged like the colour channels.
    """
    f = SUPERSAMPLE_FACTOR
    big_side = grid_size * f
    big = im.resize((big_side, big_side), resample=Image.Resampling.BILINEAR)
    arr = np.asarray(big, dtype=np.uint8)

    offsets = [o for o in _tap_offsets(f, SUPERSAMPLE_TAPS) if o < f]
    total = np.zeros((grid_size, grid_size, 4), dtype=np.int32)
    for oy in offsets:
        for ox in offsets:
            total += arr[oy::f, ox::f].astype(np.int32)
    count = float(len(offsets) * len(offsets))
    avg = np.floor(total / count + 0.5)
    return np.clip(avg, 0, 255).astype(np.uint8)


def resample(
    image: ImageSource,
    grid_size: int,
    policy: str = "stretch",
    crop: str = "stretch",
) -> U8Grid:
    """
    Resample a source image (PIL image or uint8 (H,W,4) array) to a W x W
    RGBA grid. The result is a fresh array owned by the caller.
    """
    size = validate_grid_size(grid_size)
    if policy not in RESAMPLE_POLICIES:
        raise ValueError(f"unknown resample policy {policy!r}")
    if crop not in CROP_MODES:
        raise ValueError(f"unknown crop mode {crop!r}")

    im = _as_rgba_image(image)
    if im.width == 0 or im.height == 0:
        raise ValueError("source image is empty")
    if crop == "center":
        im = center_crop(im)

    if policy == "supersample":
        return supersample_to_grid(im, size)
    return stretch_to_grid(im, size)


__all__ = [
    "RESAMPLE_POLICIES",
    "CROP_MODES",
    "validate_grid_size",
    "center_crop",
    "stretch_to_grid",
    "supersample_to_grid",
    "resample",
]
