# bitcrush/palette_files.py
from __future__ import annotations

"""
Palette file readers.

Formats:
  .gpl : GIMP palette. First line 'GIMP Palette', '#' lines are comments,
         '# Palette Name: X' names the palette, rows are 'R G B [name]'.
  .hex : one 'rrggbb' or '#rrggbb' per line, anything else ignored.
"""

import math
import re
from pathlib import Path
from typing import List

from .core_types import rgb_to_hex
from .palette_data import ColorPalette
from .utils import warn

PALETTE_SUFFIXES = (".gpl", ".hex")

_GPL_NAME_RE = re.compile(r"^#\s*Palette\s+Name:\s*(.+)$", re.IGNORECASE)
_HEX_LINE_RE = re.compile(r"^[0-9a-f]{6}$", re.IGNORECASE)


def _channel(text: str) -> int:
    """Numeric GPL field -> 0..255 int. Raises ValueError for non-numbers."""
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(text)
    return max(0, min(255, math.floor(value + 0.5)))


def parse_gpl(content: str, fallback_name: str) -> ColorPalette:
    """Parse GIMP palette text. Raises ValueError if the header is missing."""
    lines = content.splitlines()
    if not lines or not lines[0].startswith("GIMP Palette"):
        raise ValueError("Not a GIMP palette file")

    name = fallback_name
    colors: List[str] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line.startswith("#"):
            m = _GPL_NAME_RE.match(line)
            if m:
                name = m.group(1).strip()
            continue
        parts = line.split()
        if len(parts) < 3:
            continue
        try:
            rgb = (_channel(parts[0]), _channel(parts[1]), _channel(parts[2]))
        except ValueError:
            # header keys such as "Name: ..." or "Columns: 8"
            continue
        colors.append(rgb_to_hex(rgb))
    return ColorPalette(name=name, colors=tuple(colors))


def parse_hex_list(content: str, fallback_name: str) -> ColorPalette:
    """Parse a .hex list; invalid lines are skipped."""
    colors: List[str] = []
    for raw in content.splitlines():
        line = raw.strip()
        if not line:
            continue
        hx = line[1:] if line.startswith("#") else line
        if _HEX_LINE_RE.match(hx):
            colors.append(f"#{hx.lower()}")
    return ColorPalette(name=fallback_name, colors=tuple(colors))


def load_palette_file(path: Path) -> ColorPalette:
    """Read one palette file, dispatching on suffix."""
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8", errors="replace")
    if suffix == ".gpl":
        return parse_gpl(text, path.stem)
    if suffix == ".hex":
        return parse_hex_list(text, path.stem)
    raise ValueError(f"unsupported palette file: {path.name}")


def load_palettes_from_dir(directory: Path) -> List[ColorPalette]:
    """
    Load every .gpl / .hex file in a directory (non-recursive), sorted by name.
    A missing directory gives an empty list; unreadable files are skipped with a warning.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    palettes: List[ColorPalette] = []
    entries = sorted(directory.iterdir(), key=lambda p: p.name.lower())
    for entry in entries:
        if not entry.is_file() or entry.suffix.lower() not in PALETTE_SUFFIXES:
            continue
        try:
            palettes.append(load_palette_file(entry))
        except (OSError, ValueError) as e:
            warn(f"skipped palette {entry.name}: {e}")
    return palettes


__all__ = [
    "PALETTE_SUFFIXES",
    "parse_gpl",
    "parse_hex_list",
    "load_palette_file",
    "load_palettes_from_dir",
]
