# bitcrush/params.py
from __future__ import annotations

"""
Per-request pixelization parameters.

A PixelizationParams is built once per run and never changed; the palette and
grid size it names stay fixed for the whole run.
"""

from dataclasses import dataclass, replace
from typing import Union

from .algorithms import Algorithm
from .palette_data import DEFAULT_PALETTE_NAME, ColorPalette, find_palette
from .sampler import CROP_MODES, validate_grid_size


@dataclass(frozen=True)
class PixelizationParams:
    grid_size: int = 32
    palette: ColorPalette = find_palette(DEFAULT_PALETTE_NAME)
    algorithm: Algorithm = Algorithm.STANDARD
    no_upscale: bool = False
    crop: str = "stretch"

    def __post_init__(self) -> None:
        validate_grid_size(self.grid_size)
        object.__setattr__(self, "algorithm", Algorithm.from_key(self.algorithm))
        if self.crop not in CROP_MODES:
            raise ValueError(f"unknown crop mode {self.crop!r}")

    def with_algorithm(self, algorithm: Union[Algorithm, str]) -> "PixelizationParams":
        return replace(self, algorithm=Algorithm.from_key(algorithm))


DEFAULT_PARAMS = PixelizationParams()


__all__ = ["PixelizationParams", "DEFAULT_PARAMS"]
