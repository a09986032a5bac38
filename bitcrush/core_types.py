# bitcrush/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import re
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidColorFormat

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
ColourLike = Union[HexStr, Sequence[int]]

U8Grid = NDArray[np.uint8]  # (H, W, 4) RGBA
Lab = NDArray[np.float64]  # (..., 3) CIE Lab

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

# Value objects


@dataclass(frozen=True)
class PaletteItem:
    """Palette entry as RGB and its hex form."""

    rgb: RGBTuple
    hex: HexStr


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """
    Parse 'rrggbb' or '#rrggbb' (case-insensitive) into an RGB tuple.
    Anything else raises InvalidColorFormat.
    """
    if not isinstance(hex_str, str):
        raise InvalidColorFormat(hex_str)
    m = _HEX_RE.fullmatch(hex_str)
    if m is None:
        raise InvalidColorFormat(hex_str)
    return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))


def coerce_to_rgb_tuple(value: ColourLike) -> RGBTuple:
    """
    Coerce a hex string, 3-length sequence or array row to an (int, int, int)
    RGB tuple with channels in 0..255.
    """
    if isinstance(value, str):
        return hex_to_rgb(value)
    try:
        if len(value) != 3:
            raise InvalidColorFormat(value)
        r, g, b = (int(value[0]), int(value[1]), int(value[2]))
    except (TypeError, ValueError):
        raise InvalidColorFormat(value) from None
    if not all(0 <= c <= 255 for c in (r, g, b)):
        raise InvalidColorFormat(value)
    return (r, g, b)


def assert_u8_grid_rgba(grid: np.ndarray) -> U8Grid:
    """Validate a uint8 (H,W,4) RGBA buffer and return it typed as U8Grid."""
    if (
        not isinstance(grid, np.ndarray)
        or grid.dtype != np.uint8
        or grid.ndim != 3
        or grid.shape[-1] != 4
    ):
        raise TypeError("expected uint8 (H,W,4) RGBA grid")
    return grid  # type: ignore[return-value]


def assert_square_grid(grid: np.ndarray) -> int:
    """Validate a square RGBA grid and return its side length."""
    assert_u8_grid_rgba(grid)
    if grid.shape[0] != grid.shape[1]:
        raise TypeError(f"expected a square grid, got {grid.shape[1]}x{grid.shape[0]}")
    return int(grid.shape[0])


# Callable signatures

GridProcessor = Callable[[U8Grid, "PaletteResolver"], U8Grid]  # type: ignore[name-defined]

__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "ColourLike",
    "U8Grid",
    "Lab",
    # value objects
    "PaletteItem",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_to_rgb_tuple",
    "assert_u8_grid_rgba",
    "assert_square_grid",
    # callable signatures
    "GridProcessor",
]
