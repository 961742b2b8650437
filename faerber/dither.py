# faerber/dither.py
from __future__ import annotations

"""
Generic single-pass error-diffusion dithering.

- One forward raster scan; each pixel's input is its own value plus the error
  already pushed onto it by earlier pixels, so the pass is strictly ordered
  and is never split across workers.
- Works on any Img whose buffer is (N,) scalars or (N,C) vectors: NumPy
  broadcasting supplies the add / scale / zero operations for both.
- Error that would land outside the image (left, right or bottom edge) is
  dropped. Nothing wraps to the next row.

Kernel tables follow Tanner Helland's write-up of the classic algorithms.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .core_types import Img, Quantize
from .errors import InvalidConversionMethodError
from .methods import DitherMethod

Offset = Tuple[int, int, float]  # (dx, dy, weight)


@dataclass(frozen=True)
class Kernel:
    """
    Error-diffusion matrix: residual * weight / divisor goes to (x+dx, y+dy).

    Every offset must point downstream in raster order (dy > 0, or dy == 0
    and dx > 0) so a forward pass never revisits a pixel.
    """

    name: str
    divisor: float
    offsets: Tuple[Offset, ...]

    def __post_init__(self) -> None:
        if self.divisor == 0:
            raise ValueError(f"kernel {self.name}: divisor must be non-zero")
        for dx, dy, _w in self.offsets:
            if not (dy > 0 or (dy == 0 and dx > 0)):
                raise ValueError(
                    f"kernel {self.name}: offset ({dx}, {dy}) is not downstream"
                )

    def __str__(self) -> str:
        return self.name


# Named kernels

#   . x 7
#   3 5 1     (1/16)
FLOYD_STEINBERG = Kernel(
    "floyd",
    16.0,
    ((1, 0, 7.0), (-1, 1, 3.0), (0, 1, 5.0), (1, 1, 1.0)),
)

#   . x 1 1
#   1 1 1 .
#   . 1 . .   (1/8)
ATKINSON = Kernel(
    "atkinson",
    8.0,
    (
        (1, 0, 1.0),
        (2, 0, 1.0),
        (-1, 1, 1.0),
        (0, 1, 1.0),
        (1, 1, 1.0),
        (0, 2, 1.0),
    ),
)

#   . . x 8 4
#   2 4 8 4 2   (1/32)
BURKES = Kernel(
    "burkes",
    32.0,
    (
        (1, 0, 8.0),
        (2, 0, 4.0),
        (-2, 1, 2.0),
        (-1, 1, 4.0),
        (0, 1, 8.0),
        (1, 1, 4.0),
        (2, 1, 2.0),
    ),
)

#   . . x 8 4
#   2 4 8 4 2
#   1 2 4 2 1   (1/42)
STUCKI = Kernel(
    "stucki",
    42.0,
    BURKES.offsets
    + (
        (-2, 2, 1.0),
        (-1, 2, 2.0),
        (0, 2, 4.0),
        (1, 2, 2.0),
        (2, 2, 1.0),
    ),
)

#   . . x 7 5
#   3 5 7 5 3
#   1 3 5 3 1   (1/48)
JARVIS_JUDICE_NINKE = Kernel(
    "jarvis",
    48.0,
    (
        (1, 0, 7.0),
        (2, 0, 5.0),
        (-2, 1, 3.0),
        (-1, 1, 5.0),
        (0, 1, 7.0),
        (1, 1, 5.0),
        (2, 1, 3.0),
        (-2, 2, 1.0),
        (-1, 2, 3.0),
        (0, 2, 5.0),
        (1, 2, 3.0),
        (2, 2, 1.0),
    ),
)

#   . . x 5 3
#   2 4 5 4 2
#   . 2 3 2 .   (1/32)
SIERRA_3 = Kernel(
    "sierra3",
    32.0,
    (
        (1, 0, 5.0),
        (2, 0, 3.0),
        (-2, 1, 2.0),
        (-1, 1, 4.0),
        (0, 1, 5.0),
        (1, 1, 4.0),
        (2, 1, 2.0),
        (-1, 2, 2.0),
        (0, 2, 3.0),
        (1, 2, 2.0),
    ),
)

KERNELS: Dict[DitherMethod, Kernel] = {
    DitherMethod.FLOYD_STEINBERG: FLOYD_STEINBERG,
    DitherMethod.ATKINSON: ATKINSON,
    DitherMethod.STUCKI: STUCKI,
    DitherMethod.BURKES: BURKES,
    DitherMethod.JARVIS_JUDICE_NINKE: JARVIS_JUDICE_NINKE,
    DitherMethod.SIERRA3: SIERRA_3,
}

_NAMES: Dict[str, Kernel] = {
    "floyd": FLOYD_STEINBERG,
    "steinberg": FLOYD_STEINBERG,
    "floydsteinberg": FLOYD_STEINBERG,
    "floyd steinberg": FLOYD_STEINBERG,
    "atkinson": ATKINSON,
    "stucki": STUCKI,
    "burkes": BURKES,
    "jarvis": JARVIS_JUDICE_NINKE,
    "judice": JARVIS_JUDICE_NINKE,
    "ninke": JARVIS_JUDICE_NINKE,
    "sierra": SIERRA_3,
    "sierra3": SIERRA_3,
}


def kernel_for(method: DitherMethod) -> Kernel:
    return KERNELS[method]


def kernel_from_name(name: str) -> Kernel:
    """Look up a kernel by its common name (case-insensitive)."""
    kernel = _NAMES.get(name.strip().lower())
    if kernel is None:
        raise InvalidConversionMethodError(name, expected="dither kernel")
    return kernel


# Engine


def dither(img: Img, kernel: Kernel, quantize: Quantize) -> Img:
    """
    Dither an image with the kernel's offsets and divisor.

    Args:
      img     : Img with a (N,) or (N,C) numeric buffer
      kernel  : Kernel
      quantize: value -> (quantized, residual); value is a float for (N,)
                buffers and a float64 vector for (N,C) buffers
    Returns:
      new float64 Img of the same shape; the input is not modified
    """
    width, height = img.width, img.height
    buf = img.buffer.astype(np.float64, copy=True)
    spillover = np.zeros_like(buf)
    spread = [(dx, dy, w / kernel.divisor) for dx, dy, w in kernel.offsets]

    for i in range(buf.shape[0]):
        y, x = divmod(i, width)
        quantized, residual = quantize(buf[i] + spillover[i])
        buf[i] = quantized

        for dx, dy, mul in spread:
            tx, ty = x + dx, y + dy
            if 0 <= tx < width and ty < height:
                spillover[ty * width + tx] += residual * mul

    return Img(buf, width)


__all__ = [
    "Kernel",
    "FLOYD_STEINBERG",
    "ATKINSON",
    "BURKES",
    "STUCKI",
    "JARVIS_JUDICE_NINKE",
    "SIERRA_3",
    "KERNELS",
    "kernel_for",
    "kernel_from_name",
    "dither",
]
