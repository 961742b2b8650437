"""Test sRGB <-> CIE Lab conversion and the Lab value object.

Tests for faerber.colour_convert:
    - Known Lab values for white, black and primary red (D65)
    - uint8 input is read as 0..255 and float input as 0..1
    - Lab -> sRGB round trip stays within one unit per channel
    - Lab alpha is clamped and carried through to_rgba

Test cases:
    - test_rgb_to_lab_known_values()
    - test_rgb_to_lab_dtype_scaling()
    - test_dark_uint8_image_not_rescaled()
    - test_lab_to_rgb_roundtrip()
    - test_convert_palette_to_lab()
    - test_lab_alpha_clamped()
    - test_lab_from_rgba_roundtrip()

Run:
    pytest tests/test_colour_convert.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from faerber.colour_convert import (
    Lab,
    convert_palette_to_lab,
    lab_to_rgb,
    rgb_to_lab,
)


@pytest.mark.parametrize(
    "rgb,expected",
    [
        ((255, 255, 255), (100.0, 0.0, 0.0)),
        ((0, 0, 0), (0.0, 0.0, 0.0)),
        ((255, 0, 0), (53.24, 80.09, 67.20)),
    ],
)
def test_rgb_to_lab_known_values(rgb, expected):
    lab = rgb_to_lab(np.array(rgb, dtype=np.uint8))
    assert lab.dtype == np.float32
    assert_allclose(lab, expected, atol=0.1)


def test_rgb_to_lab_dtype_scaling():
    as_u8 = rgb_to_lab(np.array([[200, 100, 50]], dtype=np.uint8))
    as_f = rgb_to_lab(np.array([[200, 100, 50]], dtype=np.float64) / 255.0)
    assert_allclose(as_u8, as_f, atol=1e-3)


def test_dark_uint8_image_not_rescaled():
    # every channel <= 1 must still be read as 0..255
    lab = rgb_to_lab(np.array([[1, 1, 1]], dtype=np.uint8))
    assert lab[0, 0] < 1.0


def test_lab_to_rgb_roundtrip():
    rng = np.random.default_rng(3)
    rgb = rng.integers(0, 256, size=(64, 3), dtype=np.uint8)
    back = lab_to_rgb(rgb_to_lab(rgb))
    assert back.dtype == np.uint8
    diff = np.abs(back.astype(int) - rgb.astype(int))
    assert diff.max() <= 1


def test_convert_palette_to_lab():
    lab = convert_palette_to_lab([0x000000, 0xFFFFFF])
    assert lab.shape == (2, 3)
    assert_allclose(lab[:, 0], [0.0, 100.0], atol=0.1)


def test_lab_alpha_clamped():
    assert Lab(50.0, 0.0, 0.0, 1.5).alpha == 1.0
    assert Lab(50.0, 0.0, 0.0, -0.2).alpha == 0.0


def test_lab_from_rgba_roundtrip():
    lab = Lab.from_rgba((18, 52, 86, 77))
    assert lab.alpha_u8() == 77
    r, g, b, a = lab.to_rgba()
    assert a == 77
    assert abs(r - 18) <= 1 and abs(g - 52) <= 1 and abs(b - 86) <= 1
    assert Lab.from_rgb((1, 2, 3)).alpha == 1.0
