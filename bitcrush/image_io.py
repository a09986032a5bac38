# bitcrush/image_io.py
from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from .core_types import U8Grid, assert_u8_grid_rgba
from .errors import ImageDecodeFailure

"""
Image I/O helpers: decode anything Pillow reads into a uint8 RGBA array in
sRGB, and write RGBA arrays out as PNG.
"""

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff")


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGBA") if im.mode not in ("RGB", "RGBA") else im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            # unusable profile: fall through and take the pixels as sRGB
            pass

    return im.convert("RGBA")


def _decode(fp, source: object) -> U8Grid:
    try:
        with Image.open(fp) as im0:
            im0.load()
            im = _convert_to_srgb_rgba(im0)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeFailure(source, str(e)) from e
    arr = np.array(im, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ImageDecodeFailure(source, "empty image")
    return arr


def load_image_rgba(path: Union[str, Path]) -> U8Grid:
    """Read an image file as uint8 (H, W, 4) RGBA. Raises ImageDecodeFailure."""
    path = Path(path)
    return _decode(path, path)


def decode_image_bytes(data: bytes, source: str = "<bytes>") -> U8Grid:
    """Decode in-memory encoded image bytes as uint8 (H, W, 4) RGBA."""
    return _decode(io.BytesIO(data), source)


def decode_data_url(url: str) -> U8Grid:
    """Decode a 'data:image/...;base64,...' URL."""
    head, sep, payload = url.partition(",")
    if not sep or not head.startswith("data:") or not head.endswith(";base64"):
        raise ImageDecodeFailure("<data url>", "not a base64 data URL")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeFailure("<data url>", str(e)) from e
    return decode_image_bytes(data, "<data url>")


def save_image_rgba(path: Path, rgba: np.ndarray) -> Path:
    """Write a uint8 (H, W, 4) array as PNG. A non-.png suffix is replaced."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    arr = assert_u8_grid_rgba(np.ascontiguousarray(rgba))
    Image.fromarray(arr).save(path)
    return path


def encode_png(rgba: np.ndarray) -> bytes:
    """Encode a uint8 (H, W, 4) array as PNG bytes."""
    arr = assert_u8_grid_rgba(np.ascontiguousarray(rgba))
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()


__all__ = [
    "IMAGE_SUFFIXES",
    "load_image_rgba",
    "decode_image_bytes",
    "decode_data_url",
    "save_image_rgba",
    "encode_png",
]
