# faerber/image_io.py
from __future__ import annotations

"""
Image I/O helpers: decode to RGBA8 arrays and encode RGBA8 arrays as PNG.
"""

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import U8RGBA
from .errors import ImageReadError


def _to_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    return im.convert("RGBA")


def decode_image_rgba(data: bytes, source: str = "<memory>") -> U8RGBA:
    """Decode encoded image bytes into a uint8 (H,W,4) array."""
    try:
        with Image.open(io.BytesIO(data)) as im0:
            im = _to_rgba(im0)
            return np.array(im, dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageReadError(source, str(e)) from e


def load_image_rgba(path: Path) -> U8RGBA:
    """Load an image with Pillow and return a uint8 (H,W,4) RGBA array."""
    try:
        with Image.open(path) as im0:
            im = _to_rgba(im0)
            return np.array(im, dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageReadError(str(path), str(e)) from e


def encode_png_rgba(rgba: U8RGBA) -> bytes:
    """Encode a uint8 (H,W,4) array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(rgba)).save(buf, format="PNG")
    return buf.getvalue()


def save_image_rgba(path: Path, rgba: U8RGBA) -> Path:
    """Save a uint8 (H,W,4) array; the path suffix picks the format (JPEG drops alpha)."""
    im = Image.fromarray(np.ascontiguousarray(rgba))
    if path.suffix.lower() in (".jpg", ".jpeg"):
        im = im.convert("RGB")
    im.save(path)
    return path


__all__ = [
    "decode_image_rgba",
    "load_image_rgba",
    "encode_png_rgba",
    "save_image_rgba",
]
