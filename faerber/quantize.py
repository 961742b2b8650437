# faerber/quantize.py
from __future__ import annotations

"""
Quantizers feeding the error-diffusion ditherer.

Both return a callable mapping a value to (quantized, residual) where
residual = value - quantized.

Exports:
  quantize_n_bits(n)          scalar in [0,255] -> nearer of two levels 255/n apart
  quantize_palette(colours)   RGB vector -> nearest palette colour by Manhattan distance
  quantize_n_bits_rgb(n)      per-channel n-bit quantizer for RGB vectors
"""

from typing import Callable, Sequence, Tuple

import numpy as np

from .core_types import RGB
from .errors import BadBitDepthError, EmptyPaletteError

ScalarQuantize = Callable[[float], Tuple[float, float]]
VectorQuantize = Callable[[np.ndarray], Tuple[np.ndarray, np.ndarray]]


def quantize_n_bits(n: int) -> ScalarQuantize:
    """
    Uniform quantizer with levels spaced 255/n apart, for n in 1..7.

    The floor level is taken only when strictly nearer, so an exact midpoint
    rounds up (n=1: 0..127 -> 0, 128..255 -> 255, 127.5 -> 255).
    """
    if n < 1 or n > 7:
        raise BadBitDepthError(n)
    step_size = 255.0 / float(n)

    def quantize(x: float) -> Tuple[float, float]:
        floor = np.floor(x / step_size) * step_size
        floor_rem = x - floor
        ceil = np.ceil(x / step_size) * step_size
        ceil_rem = ceil - x
        if floor_rem < ceil_rem:
            return max(float(floor), 0.0), float(floor_rem)
        return min(255.0, float(ceil)), float(-ceil_rem)

    return quantize


def quantize_n_bits_rgb(n: int) -> VectorQuantize:
    """Apply quantize_n_bits(n) to each channel of an RGB vector."""
    per_channel = RGB.map_across(quantize_n_bits(n))

    def quantize(p: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        quot, rem = per_channel(RGB(float(p[0]), float(p[1]), float(p[2])))
        return (
            np.array(quot.as_tuple(), dtype=np.float64),
            np.array(rem.as_tuple(), dtype=np.float64),
        )

    return quantize


def quantize_palette(colours: Sequence[RGB[int]]) -> VectorQuantize:
    """
    Nearest palette colour in raw RGB by Manhattan (sum of absolute channel
    differences) distance; the first colour wins ties.
    """
    if len(colours) == 0:
        raise EmptyPaletteError()
    pal = np.array([c.as_tuple() for c in colours], dtype=np.float64).reshape(-1, 3)

    def quantize(p: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        abs_err = np.abs(pal - p).sum(axis=1)
        nearest = pal[int(np.argmin(abs_err))]
        return nearest.copy(), p - nearest

    return quantize


__all__ = ["quantize_n_bits", "quantize_n_bits_rgb", "quantize_palette"]
