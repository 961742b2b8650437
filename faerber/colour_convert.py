# faerber/colour_convert.py
from __future__ import annotations

"""
Colour conversions (sRGB <-> CIE Lab, D65).

Exports:
  rgb_to_linear(srgb)
  linear_to_rgb(linear)
  rgb_to_lab(rgb)
  lab_to_rgb(lab)
  convert_palette_to_lab(values)
  Lab  (value object carrying L*, a*, b* and a separate alpha)
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .core_types import RGBATuple, RGBTuple, value_to_rgb_tuple
from .core_types import Lab as LabArray

# Reference white (D65)
XN, YN, ZN = 0.95047, 1.00000, 1.08883
_EPSILON, _KAPPA = 216.0 / 24389.0, 24389.0 / 27.0

# Linear RGB -> XYZ (D65) and its inverse
_RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)


# Row-wise 3x3 product: each output row depends only on its own input row.
def _apply_matrix(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    return np.stack(
        [m[i, 0] * v[..., 0] + m[i, 1] * v[..., 1] + m[i, 2] * v[..., 2] for i in range(3)],
        axis=-1,
    )


# sRGB to linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Returns float32 with shape preserved.
    """
    srgb_f = srgb.astype(np.float32, copy=False)
    with np.errstate(invalid="ignore"):
        linear = np.where(
            srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
        )
    return linear.astype(np.float32, copy=False)


def linear_to_rgb(linear: np.ndarray) -> np.ndarray:
    """Linear RGB (0..1) to sRGB (0..1). Inputs are clipped to [0, 1] first."""
    lin = np.clip(linear.astype(np.float64, copy=False), 0.0, 1.0)
    return np.where(
        lin <= 0.0031308, lin * 12.92, 1.055 * np.power(lin, 1.0 / 2.4) - 0.055
    )


# sRGB to Lab (D65)


def rgb_to_lab(rgb: np.ndarray) -> LabArray:
    """
    sRGB to CIE Lab (D65).
    Integer input is read as 0..255, float input as 0..1. Preserves shape
    (...,3). Returns float32.
    """
    rgb_arr = np.asarray(rgb)
    rgb_f = rgb_arr.astype(np.float32)
    if np.issubdtype(rgb_arr.dtype, np.integer):
        rgb_f = rgb_f / 255.0

    lin = np.stack(
        [
            rgb_to_linear(rgb_f[..., 0]),
            rgb_to_linear(rgb_f[..., 1]),
            rgb_to_linear(rgb_f[..., 2]),
        ],
        axis=-1,
    ).astype(np.float64)

    xyz = _apply_matrix(_RGB_TO_XYZ, lin)
    x = xyz[..., 0] / XN
    y = xyz[..., 1] / YN
    z = xyz[..., 2] / ZN

    def f(t: np.ndarray) -> np.ndarray:
        with np.errstate(invalid="ignore"):
            return np.where(t > _EPSILON, np.cbrt(t), (_KAPPA * t + 16.0) / 116.0)

    fx, fy, fz = f(x), f(y), f(z)

    out = np.empty(rgb_f.shape, dtype=np.float32)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


# Lab to sRGB (D65)


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """
    CIE Lab (D65) to sRGB uint8 [0..255], shape (...,3) preserved.
    Out-of-gamut values are clipped.
    """
    lab_f = np.asarray(lab, dtype=np.float64)
    fy = (lab_f[..., 0] + 16.0) / 116.0
    fx = fy + lab_f[..., 1] / 500.0
    fz = fy - lab_f[..., 2] / 200.0

    def f_inv(t: np.ndarray) -> np.ndarray:
        t3 = t * t * t
        return np.where(t3 > _EPSILON, t3, (116.0 * t - 16.0) / _KAPPA)

    xyz = np.stack([f_inv(fx) * XN, f_inv(fy) * YN, f_inv(fz) * ZN], axis=-1)
    lin = _apply_matrix(_XYZ_TO_RGB, xyz)
    srgb = linear_to_rgb(lin)
    return np.rint(np.clip(srgb * 255.0, 0.0, 255.0)).astype(np.uint8)


def convert_palette_to_lab(values: Sequence[int]) -> LabArray:
    """24-bit palette values to a float32 (P,3) Lab array."""
    rgbs = np.array([value_to_rgb_tuple(v) for v in values], dtype=np.uint8)
    return rgb_to_lab(rgbs.reshape(-1, 3)).reshape(-1, 3)


# Value object


@dataclass(frozen=True)
class Lab:
    """
    CIE Lab colour plus an independent alpha in [0, 1].

    Alpha is carried for compositing only and never enters a distance.
    """

    l: float  # noqa: E741
    a: float
    b: float
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "alpha", min(1.0, max(0.0, float(self.alpha))))

    @classmethod
    def from_rgb(cls, rgb: Sequence[int]) -> "Lab":
        return cls.from_rgba((rgb[0], rgb[1], rgb[2], 255))

    @classmethod
    def from_rgba(cls, rgba: Sequence[int]) -> "Lab":
        lab = rgb_to_lab(np.array(rgba[:3], dtype=np.uint8))
        return cls(float(lab[0]), float(lab[1]), float(lab[2]), rgba[3] / 255.0)

    def to_rgb(self) -> RGBTuple:
        rgb = lab_to_rgb(np.array(self.triple(), dtype=np.float64))
        return (int(rgb[0]), int(rgb[1]), int(rgb[2]))

    def to_rgba(self) -> RGBATuple:
        r, g, b = self.to_rgb()
        return (r, g, b, self.alpha_u8())

    def alpha_u8(self) -> int:
        return int(round(self.alpha * 255.0))

    def triple(self) -> Tuple[float, float, float]:
        return (self.l, self.a, self.b)


__all__ = [
    "rgb_to_linear",
    "linear_to_rgb",
    "rgb_to_lab",
    "lab_to_rgb",
    "convert_palette_to_lab",
    "Lab",
]
