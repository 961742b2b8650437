# faerber/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Tuple, TypeVar, Union

import numpy as np
from numpy.typing import NDArray

from .errors import RGBParseError

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]
HexStr = str

U8RGBA = NDArray[np.uint8]  # (H, W, 4)
U8Palette = NDArray[np.uint8]  # (P, 3)
Lab = NDArray[np.float32]  # (..., 3) CIE Lab

N = TypeVar("N", int, float)

# Value objects


@dataclass(frozen=True)
class RGB(Generic[N]):
    """
    A triplet of same-typed channels in (R, G, B) order.

    Integer channels are used for storage, floats for computation. Arithmetic
    is elementwise between two RGBs and broadcast for a scalar operand.
    """

    r: N
    g: N
    b: N

    def __iter__(self) -> Iterator[N]:
        yield self.r
        yield self.g
        yield self.b

    def convert_with(self, convert: Callable[[N], Any]) -> "RGB":
        """Map a function across all three channels."""
        return RGB(convert(self.r), convert(self.g), convert(self.b))

    @staticmethod
    def map_across(
        quantize: Callable[[Any], Tuple[Any, Any]],
    ) -> Callable[["RGB"], Tuple["RGB", "RGB"]]:
        """Lift a scalar (value -> (quotient, remainder)) function to RGB."""

        def lifted(rgb: "RGB") -> Tuple["RGB", "RGB"]:
            r_quot, r_rem = quantize(rgb.r)
            g_quot, g_rem = quantize(rgb.g)
            b_quot, b_rem = quantize(rgb.b)
            return RGB(r_quot, g_quot, b_quot), RGB(r_rem, g_rem, b_rem)

        return lifted

    # vector ops
    def __add__(self, other: "RGB") -> "RGB":
        return RGB(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: "RGB") -> "RGB":
        return RGB(self.r - other.r, self.g - other.g, self.b - other.b)

    # scalar ops
    def __mul__(self, s: Union[int, float]) -> "RGB":
        return self.convert_with(lambda c: c * s)

    def __truediv__(self, s: Union[int, float]) -> "RGB":
        return self.convert_with(lambda c: c / s)

    def __mod__(self, s: Union[int, float]) -> "RGB":
        return self.convert_with(lambda c: c % s)

    def __neg__(self) -> "RGB":
        return self.convert_with(lambda c: -c)

    # hex
    @staticmethod
    def from_hex(value: int) -> "RGB[int]":
        """24-bit integer to RGB; bits above 0xFFFFFF are discarded."""
        return RGB((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def to_hex(self) -> int:
        return (int(self.r) << 16) + (int(self.g) << 8) + int(self.b)

    @staticmethod
    def parse(text: str) -> "RGB[int]":
        return RGB.from_hex(parse_hex_rgb(text))

    def as_tuple(self) -> Tuple[N, N, N]:
        return (self.r, self.g, self.b)

    def __format__(self, spec: str) -> str:
        if spec == "x":
            return f"{self.to_hex():06x}"
        if spec == "X":
            return f"{self.to_hex():06X}"
        return format(str(self), spec)


class Img:
    """
    Image as a flat buffer of pixels plus a width.

    The buffer is (N,) for single-channel pixels or (N, C) for vector pixels;
    height is derived as N // width. The buffer is copied on construction so
    an Img never aliases caller memory.
    """

    __slots__ = ("buffer", "width")

    def __init__(self, buffer: Any, width: int) -> None:
        buf = np.array(buffer, copy=True)
        width = int(width)
        if width <= 0 or buf.ndim == 0 or buf.shape[0] % width != 0:
            raise ValueError(
                f"buffer of {buf.shape[0] if buf.ndim else 0} pixels "
                f"is not divisible by width {width}"
            )
        self.buffer = buf
        self.width = width

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Img":
        """Build from an (H, W) or (H, W, C) array."""
        height, width = arr.shape[0], arr.shape[1]
        return cls(arr.reshape((height * width,) + arr.shape[2:]), width)

    @property
    def height(self) -> int:
        return self.buffer.shape[0] // self.width

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)."""
        return (self.width, self.height)

    def __len__(self) -> int:
        return int(self.buffer.shape[0])

    def __getitem__(self, xy: Tuple[int, int]) -> Any:
        x, y = xy
        return self.buffer[y * self.width + x]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Img):
            return NotImplemented
        return self.width == other.width and np.array_equal(self.buffer, other.buffer)

    def __repr__(self) -> str:
        return f"Img(width={self.width}, height={self.height}, dtype={self.buffer.dtype})"

    def convert_with(self, convert: Callable[[np.ndarray], np.ndarray]) -> "Img":
        """Apply a whole-buffer conversion, e.g. a dtype cast or clamp."""
        return Img(convert(self.buffer), self.width)

    def to_array(self) -> np.ndarray:
        """Reshape to (H, W) or (H, W, C)."""
        return self.buffer.reshape((self.height, self.width) + self.buffer.shape[1:])


# Small helpers


def clamp_f64_to_u8(values: Any) -> Any:
    """Clamp to [0, 255] and round to the nearest integer. Scalars or arrays."""
    if np.isscalar(values):
        v = float(values)  # type: ignore[arg-type]
        if v > 255.0:
            return 255
        if v < 0.0:
            return 0
        return int(np.rint(v))
    arr = np.asarray(values, dtype=np.float64)
    return np.rint(np.clip(arr, 0.0, 255.0)).astype(np.uint8)


def parse_hex_rgb(text: str) -> int:
    """
    Parse a 24-bit colour written as exactly six hex digits, with an optional
    0x / 0X prefix. Raises RGBParseError otherwise.
    """
    s = text[2:] if text.startswith(("0x", "0X")) else text
    if len(s) != 6 or any(c not in "0123456789abcdefABCDEF" for c in s):
        raise RGBParseError(text)
    return int(s, 16)


def rgb_to_hex(rgb: Union[RGBTuple, RGBATuple]) -> HexStr:
    """RGB or RGBA tuple to lowercase '#rrggbb'; '#rrggbbaa' only when alpha < 255."""
    if len(rgb) == 4 and int(rgb[3]) != 255:
        return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}{rgb[3]:02x}"
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise RGBParseError(hex_str)
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    value = parse_hex_rgb(s[1:])
    return RGB.from_hex(value).as_tuple()


def value_to_rgb_tuple(value: int) -> RGBTuple:
    """24-bit integer to an (r, g, b) tuple."""
    return RGB.from_hex(value).as_tuple()


def as_rgba_u8(image: np.ndarray) -> U8RGBA:
    """
    Validate a uint8 (H,W,3) or (H,W,4) image and return it as (H,W,4).
    Missing alpha is filled with 255.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] not in (3, 4):
        raise TypeError("expected uint8 (H,W,3/4) image")
    if image.shape[-1] == 4:
        return image  # type: ignore[return-value]
    out = np.full(image.shape[:2] + (4,), 255, dtype=np.uint8)
    out[..., :3] = image
    return out


# Callable signatures

Quantize = Callable[[Any], Tuple[Any, Any]]

__all__ = [
    # aliases / types
    "RGBTuple",
    "RGBATuple",
    "HexStr",
    "U8RGBA",
    "U8Palette",
    "Lab",
    # value objects
    "RGB",
    "Img",
    # helpers
    "clamp_f64_to_u8",
    "parse_hex_rgb",
    "rgb_to_hex",
    "hex_to_rgb",
    "value_to_rgb_tuple",
    "as_rgba_u8",
    # callable signatures
    "Quantize",
]
