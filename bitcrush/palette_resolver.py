# bitcrush/palette_resolver.py
from __future__ import annotations

"""
Palette resolver: a palette decoded once into RGB and Lab rows, with
nearest-colour queries against that fixed set.

Two query shapes:
  - single pixel (nearest_index, two_nearest_indices): used by the sequential
    error-diffusion scans, where each pixel depends on the previous ones.
  - batch (nearest_indices, two_nearest_indices_batch): used by the
    position-only algorithms, vectorised over the whole grid.

Both shapes follow linear-scan semantics: the minimum distance wins and ties
go to the earliest palette entry. The runner-up is the earliest entry with the
smallest distance strictly greater than the winner's; if no such entry exists
the winner is returned twice.

Read-only after construction, so one resolver can be shared across threads.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .colour_convert import rgb_to_lab, rgb_to_lab_pixel
from .constants import ENHANCED_WEIGHTS
from .core_types import (
    ColourLike,
    HexStr,
    Lab,
    PaletteItem,
    RGBTuple,
    coerce_to_rgb_tuple,
    rgb_to_hex,
)
from .errors import EmptyPalette
from .palette_data import ColorPalette

METRICS = ("lab", "weighted")

# Bound the (pixels x palette) distance matrix built per batch chunk.
_BATCH_CELLS = 2_000_000


class PaletteResolver:
    """Fixed palette with nearest and two-nearest colour queries in Lab space."""

    def __init__(self, colors: Iterable[ColourLike], name: str = "") -> None:
        rgbs = [coerce_to_rgb_tuple(c) for c in colors]
        if not rgbs:
            raise EmptyPalette(name)
        self.name = name
        self.rgb = np.array(rgbs, dtype=np.uint8)  # [P,3]
        self.lab: Lab = rgb_to_lab(self.rgb)  # [P,3]
        self.items: List[PaletteItem] = [
            PaletteItem(rgb=rgb, hex=rgb_to_hex(rgb)) for rgb in rgbs
        ]

    @classmethod
    def coerce(
        cls, palette: Union["PaletteResolver", ColorPalette, Sequence[ColourLike]]
    ) -> "PaletteResolver":
        """Build a resolver from a ColorPalette or colour list; resolvers pass through."""
        if isinstance(palette, PaletteResolver):
            return palette
        if isinstance(palette, ColorPalette):
            return cls(palette.colors, name=palette.name)
        return cls(palette)

    def __len__(self) -> int:
        return int(self.rgb.shape[0])

    def __repr__(self) -> str:
        return f"PaletteResolver(name={self.name!r}, size={len(self)})"

    @property
    def colors(self) -> List[RGBTuple]:
        return [item.rgb for item in self.items]

    @property
    def hexes(self) -> List[HexStr]:
        return [item.hex for item in self.items]

    # Distances

    def distances(self, lab: Sequence[float], metric: str = "lab") -> np.ndarray:
        """Distance from one Lab colour to every palette row. float64 [P]."""
        diff = self.lab - np.asarray(lab, dtype=np.float64)
        return _reduce_distance(diff, metric)

    # Single-pixel queries

    def nearest_with_distance(
        self, rgb: Sequence[float], metric: str = "lab"
    ) -> Tuple[int, float]:
        """(index, distance) of the nearest palette entry to an RGB colour."""
        lab = rgb_to_lab_pixel(float(rgb[0]), float(rgb[1]), float(rgb[2]))
        dist = self.distances(lab, metric)
        idx = int(np.argmin(dist))
        return idx, float(dist[idx])

    def nearest_index(self, rgb: Sequence[float], metric: str = "lab") -> int:
        return self.nearest_with_distance(rgb, metric)[0]

    def nearest_color(self, rgb: Sequence[float], metric: str = "lab") -> RGBTuple:
        return self.items[self.nearest_index(rgb, metric)].rgb

    def two_nearest_indices(self, rgb: Sequence[float]) -> Tuple[int, int]:
        """(nearest, runner-up) indices by plain Lab distance."""
        lab = rgb_to_lab_pixel(float(rgb[0]), float(rgb[1]), float(rgb[2]))
        dist = self.distances(lab)
        best = int(np.argmin(dist))
        farther = dist > dist[best]
        if not np.any(farther):
            return best, best
        masked = np.where(farther, dist, np.inf)
        return best, int(np.argmin(masked))

    def two_nearest_colors(self, rgb: Sequence[float]) -> Tuple[RGBTuple, RGBTuple]:
        i1, i2 = self.two_nearest_indices(rgb)
        return self.items[i1].rgb, self.items[i2].rgb

    # Batch queries

    def nearest_indices(
        self,
        lab_grid: Lab,
        metric: str = "lab",
        bias: Optional[np.ndarray] = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nearest palette index for every Lab row of lab_grid (...,3).

        bias, if given, has lab_grid's leading shape and is added to every
        candidate distance of that cell before the comparison.

        Returns (indices int64 [...], distances float64 [...]). The distances
        include the bias.
        """
        lead = lab_grid.shape[:-1]
        flat = lab_grid.reshape(-1, 3).astype(np.float64, copy=False)
        flat_bias = None if bias is None else np.asarray(bias, np.float64).reshape(-1)
        idx = np.empty(flat.shape[0], dtype=np.int64)
        best = np.empty(flat.shape[0], dtype=np.float64)
        for s, e in self._chunks(flat.shape[0]):
            diff = self.lab[None, :, :] - flat[s:e, None, :]
            dist = _reduce_distance(diff, metric)
            if flat_bias is not None:
                dist = dist + flat_bias[s:e, None]
            i = np.argmin(dist, axis=1)
            idx[s:e] = i
            best[s:e] = dist[np.arange(e - s), i]
        return idx.reshape(lead), best.reshape(lead)

    def two_nearest_indices_batch(self, lab_grid: Lab) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorised two_nearest_indices over a (...,3) Lab array."""
        lead = lab_grid.shape[:-1]
        flat = lab_grid.reshape(-1, 3).astype(np.float64, copy=False)
        first = np.empty(flat.shape[0], dtype=np.int64)
        second = np.empty(flat.shape[0], dtype=np.int64)
        for s, e in self._chunks(flat.shape[0]):
            diff = self.lab[None, :, :] - flat[s:e, None, :]
            dist = _reduce_distance(diff, "lab")
            i1 = np.argmin(dist, axis=1)
            d1 = dist[np.arange(e - s), i1]
            masked = np.where(dist > d1[:, None], dist, np.inf)
            i2 = np.argmin(masked, axis=1)
            has_second = np.isfinite(masked[np.arange(e - s), i2])
            first[s:e] = i1
            second[s:e] = np.where(has_second, i2, i1)
        return first.reshape(lead), second.reshape(lead)

    def _chunks(self, n: int) -> List[Tuple[int, int]]:
        step = max(1, _BATCH_CELLS // max(1, len(self)))
        return [(s, min(s + step, n)) for s in range(0, n, step)]


def _reduce_distance(diff: np.ndarray, metric: str) -> np.ndarray:
    """Collapse Lab differences (...,3) into distances (...)."""
    if metric == "lab":
        return np.sqrt(np.sum(diff * diff, axis=-1))
    if metric == "weighted":
        wl, wa, wb = ENHANCED_WEIGHTS
        sq = diff * diff
        return np.sqrt(wl * sq[..., 0] + wa * sq[..., 1] + wb * sq[..., 2])
    raise ValueError(f"unknown distance metric {metric!r} (expected one of {METRICS})")


__all__ = ["METRICS", "PaletteResolver"]
