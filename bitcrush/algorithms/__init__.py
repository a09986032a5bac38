# bitcrush/algorithms/__init__.py
from __future__ import annotations

"""
Algorithm catalog and the quantize() entry point.

Every Algorithm member maps to one grid processor `(work, resolver) -> work`
and to the resampling policy its input grid is built with. The dispatch table
is checked against the enum at import time.
"""

from enum import Enum
from typing import Dict, List, Sequence, Union

import numpy as np

from ..core_types import ColourLike, GridProcessor, U8Grid, assert_square_grid
from ..errors import UnknownAlgorithm
from ..palette_data import ColorPalette
from ..palette_resolver import PaletteResolver
from . import diffusion, direct, ordered


class Algorithm(str, Enum):
    STANDARD = "Standard"
    ENHANCED = "Enhanced"
    ARTISTIC = "Artistic"
    BAYER = "Bayer"
    FLOYD_STEINBERG = "Floyd-Steinberg"
    DUAL_COLOR = "Dual Color Dithering"
    EDGE = "Edge Dithering"
    SELECTIVE = "Selective Dithering"
    ORDERED_SELECTIVE = "Ordered Selective"
    RANDOMIZED_SELECTIVE = "Randomized Selective"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_key(cls, key: Union["Algorithm", str]) -> "Algorithm":
        """
        Look up by display name ("Floyd-Steinberg"), case-insensitively, or by
        slug ("floyd-steinberg", "dual-color-dithering"). Raises UnknownAlgorithm.
        """
        if isinstance(key, cls):
            return key
        if isinstance(key, str):
            wanted = key.strip().lower()
            for member in cls:
                if wanted in (member.value.lower(), member.slug, member.name.lower()):
                    return member
        raise UnknownAlgorithm(key)

    @property
    def slug(self) -> str:
        return "-".join(self.value.lower().split())

    @property
    def resample_policy(self) -> str:
        return "supersample" if self is Algorithm.ENHANCED else "stretch"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: Dict[Algorithm, str] = {
    Algorithm.STANDARD: "Fast, direct pixel mapping with LAB color space quantization",
    Algorithm.ENHANCED: "Better color sampling with perceptual matching and 3x3 block averaging",
    Algorithm.ARTISTIC: "Spatial dithering with contrast enhancement for organic, stylized results",
    Algorithm.BAYER: "Classic ordered dithering with 4x4 Bayer matrix for retro crosshatch patterns",
    Algorithm.FLOYD_STEINBERG: "Error diffusion dithering for smooth gradients",
    Algorithm.DUAL_COLOR: "Selective dithering between only the 2 closest palette colors for subtle gradients",
    Algorithm.EDGE: "Selective dithering only near high-contrast edges for subtle texture",
    Algorithm.SELECTIVE: "Dither only pixels that are far from palette colors, preserving good matches",
    Algorithm.ORDERED_SELECTIVE: "Selective dithering with consistent 8x8 ordered matrix pattern for structured texture",
    Algorithm.RANDOMIZED_SELECTIVE: "Selective dithering with blue noise randomization for organic, natural texture",
}

_PROCESSORS: Dict[Algorithm, GridProcessor] = {
    Algorithm.STANDARD: direct.standard,
    Algorithm.ENHANCED: direct.enhanced,
    Algorithm.ARTISTIC: direct.artistic,
    Algorithm.BAYER: ordered.bayer,
    Algorithm.FLOYD_STEINBERG: diffusion.floyd_steinberg,
    Algorithm.DUAL_COLOR: diffusion.dual_color,
    Algorithm.EDGE: diffusion.edge,
    Algorithm.SELECTIVE: diffusion.selective,
    Algorithm.ORDERED_SELECTIVE: ordered.ordered_selective,
    Algorithm.RANDOMIZED_SELECTIVE: ordered.randomized_selective,
}

_missing = [a.value for a in Algorithm if a not in _PROCESSORS or a not in _DESCRIPTIONS]
if _missing:
    raise RuntimeError(f"algorithms without a processor: {', '.join(_missing)}")


def algorithm_names() -> List[str]:
    """Display names in catalog order."""
    return [a.value for a in Algorithm]


def quantize(
    grid: U8Grid,
    palette: Union[PaletteResolver, ColorPalette, Sequence[ColourLike]],
    algorithm: Union[Algorithm, str] = Algorithm.STANDARD,
) -> U8Grid:
    """
    Map every cell of a square uint8 RGBA grid to a palette colour with the
    chosen algorithm. The input is not modified; alpha is carried through.

    Raises UnknownAlgorithm, EmptyPalette, InvalidColorFormat, TypeError.
    """
    algo = Algorithm.from_key(algorithm)
    resolver = PaletteResolver.coerce(palette)
    assert_square_grid(grid)
    work = np.array(grid, dtype=np.uint8, copy=True)
    return _PROCESSORS[algo](work, resolver)


__all__ = ["Algorithm", "algorithm_names", "quantize"]
