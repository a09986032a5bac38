# bitcrush/palette_data.py
from __future__ import annotations

"""
Palette definitions and lookups.

Exports:
  ColorPalette(name, colors)        # colors: tuple of '#rrggbb'
  BUILTIN_PALETTES: list[ColorPalette]
  DEFAULT_PALETTE_NAME
  find_palette(name, extra=()) -> ColorPalette
  palette_names(extra=()) -> list[str]
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .core_types import HexStr


@dataclass(frozen=True)
class ColorPalette:
    """Named, ordered list of hex colours. Immutable."""

    name: str
    colors: Tuple[HexStr, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence, store a tuple.
        object.__setattr__(self, "colors", tuple(self.colors))

    def __len__(self) -> int:
        return len(self.colors)


def _palette(name: str, colors: Sequence[HexStr]) -> ColorPalette:
    return ColorPalette(name=name, colors=tuple(colors))


BUILTIN_PALETTES: List[ColorPalette] = [
    _palette(
        "Flying Tiger",
        [
            "#000000",
            "#ffffff",
            "#ff0000",
            "#00ff00",
            "#0000ff",
            "#ffff00",
            "#ffa500",
            "#800080",
            "#ff69b4",
            "#00ffff",
        ],
    ),
    _palette("Black & White", ["#000000", "#ffffff"]),
    _palette(
        "Cozy 8",
        [
            "#2e294e",
            "#541388",
            "#f1e9da",
            "#ffd400",
            "#d90368",
            "#0081a7",
            "#00afb9",
            "#fed9b7",
        ],
    ),
    _palette(
        "Retro Gaming",
        [
            "#0f0f23",
            "#262b44",
            "#3e4a5c",
            "#5a6988",
            "#738699",
            "#8ea3b0",
            "#a4c0c7",
            "#c0dddd",
        ],
    ),
    _palette(
        "Sunset Vibes",
        [
            "#2d1b69",
            "#11296b",
            "#0f4c75",
            "#3282b8",
            "#bbe1fa",
            "#ff6b6b",
            "#ffa726",
            "#ffcc02",
        ],
    ),
    _palette(
        "Forest Dreams",
        [
            "#1a3a2e",
            "#16423c",
            "#0f3460",
            "#533a71",
            "#6a994e",
            "#a7c957",
            "#f2e8cf",
            "#bc4749",
        ],
    ),
    _palette("Gameboy", ["#0f380f", "#306230", "#8bac0f", "#9bbc0f"]),
]

DEFAULT_PALETTE_NAME = "Flying Tiger"


def palette_names(extra: Iterable[ColorPalette] = ()) -> List[str]:
    """Names of the built-in palettes followed by any extra ones."""
    return [p.name for p in BUILTIN_PALETTES] + [p.name for p in extra]


def find_palette(name: str, extra: Iterable[ColorPalette] = ()) -> ColorPalette:
    """
    Look a palette up by name, case-insensitively.
    Extra palettes (e.g. loaded from a directory) shadow built-ins of the same name.
    Raises KeyError if nothing matches.
    """
    wanted = name.strip().lower()
    for pal in list(extra) + BUILTIN_PALETTES:
        if pal.name.lower() == wanted:
            return pal
    raise KeyError(name)


__all__ = [
    "ColorPalette",
    "BUILTIN_PALETTES",
    "DEFAULT_PALETTE_NAME",
    "palette_names",
    "find_palette",
]
