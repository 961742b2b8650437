"""Test the error-diffusion engine and its kernels.

Tests for faerber.dither:
    - Golden Floyd-Steinberg row against a {0, 255} palette
    - Same row on RGB pixels with a palette quantizer
    - Colours already in the palette pass through with zero error
    - Error never wraps from the right edge onto the next row
    - Error that would fall off the bottom or sides is dropped
    - The input image is left untouched
    - The pass is order-dependent: reversing the rows changes the result
    - Kernel construction rejects upstream offsets and a zero divisor
    - Named kernels carry their published weight totals

Test cases:
    - test_floyd_golden_row()
    - test_floyd_golden_row_rgb()
    - test_palette_colours_pass_through()
    - test_no_wrap_at_right_edge()
    - test_single_column_only_downward()
    - test_input_not_mutated()
    - test_row_order_matters()
    - test_kernel_rejects_upstream_offsets()
    - test_kernel_rejects_zero_divisor()
    - test_kernel_weight_totals()
    - test_kernel_from_name()
    - test_atkinson_output_levels()

Run:
    pytest tests/test_dither.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from faerber.core_types import RGB, Img
from faerber.dither import (
    ATKINSON,
    BURKES,
    FLOYD_STEINBERG,
    JARVIS_JUDICE_NINKE,
    KERNELS,
    SIERRA_3,
    STUCKI,
    Kernel,
    dither,
    kernel_for,
    kernel_from_name,
)
from faerber.errors import InvalidConversionMethodError
from faerber.methods import DitherMethod
from faerber.quantize import quantize_n_bits, quantize_palette


def _recorder():
    """Quantizer that maps everything to 0 and records each input it sees."""
    seen = []

    def quantize(x):
        seen.append(float(x))
        return 0.0, x

    return quantize, seen


def test_floyd_golden_row():
    img = Img(np.array([0.0, 85.0, 170.0, 255.0]), 4)
    out = dither(img, FLOYD_STEINBERG, quantize_n_bits(1))
    assert_array_equal(out.buffer, [0.0, 0.0, 255.0, 255.0])


def test_floyd_golden_row_rgb():
    row = np.repeat(np.array([0.0, 85.0, 170.0, 255.0])[:, None], 3, axis=1)
    out = dither(Img(row, 4), FLOYD_STEINBERG, quantize_palette([RGB(0, 0, 0), RGB(255, 255, 255)]))
    assert_array_equal(out.buffer[:, 0], [0.0, 0.0, 255.0, 255.0])
    assert_array_equal(out.buffer[:, 0], out.buffer[:, 2])


@pytest.mark.parametrize("kernel", list(KERNELS.values()))
def test_palette_colours_pass_through(kernel):
    palette = [RGB(0, 0, 0), RGB(200, 30, 90), RGB(255, 255, 255)]
    buf = np.tile(np.array([200.0, 30.0, 90.0]), (12, 1))
    out = dither(Img(buf, 4), kernel, quantize_palette(palette))
    assert_array_equal(out.buffer, buf)


def test_no_wrap_at_right_edge():
    quantize, seen = _recorder()
    kernel = Kernel("right", 1.0, ((1, 0, 1.0),))
    dither(Img(np.array([100.0, 0.0, 0.0, 0.0]), 2), kernel, quantize)
    assert seen == [100.0, 100.0, 0.0, 0.0]


def test_single_column_only_downward():
    quantize, seen = _recorder()
    dither(Img(np.array([100.0, 0.0]), 1), FLOYD_STEINBERG, quantize)
    assert seen[1] == pytest.approx(100.0 * 5.0 / 16.0)


def test_input_not_mutated():
    buf = np.array([10.0, 200.0, 90.0, 40.0])
    img = Img(buf, 2)
    dither(img, ATKINSON, quantize_n_bits(1))
    assert_array_equal(img.buffer, buf)


def test_row_order_matters():
    rng = np.random.default_rng(1)
    grid = rng.uniform(0.0, 255.0, size=(8, 8))
    one_bit = quantize_n_bits(1)
    forward = dither(Img(grid.reshape(-1), 8), FLOYD_STEINBERG, one_bit)
    flipped = dither(Img(grid[::-1].reshape(-1), 8), FLOYD_STEINBERG, one_bit)
    unflipped = flipped.buffer.reshape(8, 8)[::-1].reshape(-1)
    assert not np.array_equal(forward.buffer, unflipped)


@pytest.mark.parametrize(
    "offsets",
    [((-1, 0, 1.0),), ((0, 0, 1.0),), ((1, -1, 1.0),)],
)
def test_kernel_rejects_upstream_offsets(offsets):
    with pytest.raises(ValueError):
        Kernel("bad", 1.0, offsets)


def test_kernel_rejects_zero_divisor():
    with pytest.raises(ValueError):
        Kernel("bad", 0.0, ((1, 0, 1.0),))


@pytest.mark.parametrize(
    "kernel,total",
    [
        (FLOYD_STEINBERG, 16.0),
        (ATKINSON, 6.0),
        (BURKES, 32.0),
        (STUCKI, 42.0),
        (JARVIS_JUDICE_NINKE, 48.0),
        (SIERRA_3, 32.0),
    ],
)
def test_kernel_weight_totals(kernel, total):
    assert sum(w for _dx, _dy, w in kernel.offsets) == total


def test_kernel_from_name():
    assert kernel_from_name("Floyd") is FLOYD_STEINBERG
    assert kernel_from_name("judice") is JARVIS_JUDICE_NINKE
    assert kernel_for(DitherMethod.STUCKI) is STUCKI
    assert len(KERNELS) == len(DitherMethod)
    with pytest.raises(InvalidConversionMethodError):
        kernel_from_name("bayer")


def test_atkinson_output_levels():
    img = Img(np.full(64, 100.0), 8)
    out = dither(img, ATKINSON, quantize_n_bits(1))
    assert set(np.unique(out.buffer)) <= {0.0, 255.0}
