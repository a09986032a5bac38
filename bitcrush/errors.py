# bitcrush/errors.py
from __future__ import annotations

"""
Error taxonomy.

All errors derive from BitcrushError, itself a ValueError, so callers that only
care about "bad input" can catch ValueError.

  InvalidColorFormat  : malformed hex string or palette entry
  EmptyPalette        : palette with no colours
  UnknownAlgorithm    : algorithm key outside the catalog
  InvalidGridSize     : grid size outside GRID_SIZES
  ImageDecodeFailure  : source image could not be decoded
"""


class BitcrushError(ValueError):
    """Base class for every error raised by bitcrush."""


class InvalidColorFormat(BitcrushError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid hex color: {value!r}")
        self.value = value


class EmptyPalette(BitcrushError):
    def __init__(self, name: str = "") -> None:
        label = f" {name!r}" if name else ""
        super().__init__(f"palette{label} has no colours")
        self.name = name


class UnknownAlgorithm(BitcrushError):
    def __init__(self, key: object) -> None:
        super().__init__(f'Algorithm "{key}" not found')
        self.key = key


class InvalidGridSize(BitcrushError):
    def __init__(self, size: object, supported=()) -> None:
        allowed = ", ".join(str(s) for s in supported)
        msg = f"unsupported grid size {size!r}"
        if allowed:
            msg += f" (expected one of: {allowed})"
        super().__init__(msg)
        self.size = size


class ImageDecodeFailure(BitcrushError):
    def __init__(self, source: object, reason: str = "") -> None:
        msg = f"Failed to load image: {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.source = source


__all__ = [
    "BitcrushError",
    "InvalidColorFormat",
    "EmptyPalette",
    "UnknownAlgorithm",
    "InvalidGridSize",
    "ImageDecodeFailure",
]
