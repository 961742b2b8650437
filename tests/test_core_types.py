"""Test the RGB value type, the Img buffer and the hex helpers.

Tests for faerber.core_types:
    - RGB elementwise arithmetic and map_across
    - Hex parsing: optional 0x prefix, exactly six digits
    - Hex formatting (lowercase, alpha only when not opaque)
    - Img validation, copying and (x, y) indexing
    - clamp_f64_to_u8 clamps then rounds

Test cases:
    - test_rgb_arithmetic()
    - test_rgb_map_across()
    - test_rgb_hex_roundtrip()
    - test_parse_hex_rgb_valid()
    - test_parse_hex_rgb_invalid()
    - test_rgb_to_hex_alpha()
    - test_img_rejects_bad_width()
    - test_img_copies_buffer()
    - test_img_indexing()
    - test_clamp_f64_to_u8()
    - test_as_rgba_u8_fills_alpha()

Run:
    pytest tests/test_core_types.py -v
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from faerber.core_types import (
    RGB,
    Img,
    as_rgba_u8,
    clamp_f64_to_u8,
    hex_to_rgb,
    parse_hex_rgb,
    rgb_to_hex,
)
from faerber.errors import RGBParseError


def test_rgb_arithmetic():
    a = RGB(10, 20, 30)
    b = RGB(1, 2, 3)
    assert a + b == RGB(11, 22, 33)
    assert a - b == RGB(9, 18, 27)
    assert a * 2 == RGB(20, 40, 60)
    assert a / 10 == RGB(1.0, 2.0, 3.0)
    assert -b == RGB(-1, -2, -3)
    assert list(a) == [10, 20, 30]


def test_rgb_map_across():
    halve = RGB.map_across(lambda v: (v // 2, v % 2))
    quot, rem = halve(RGB(5, 6, 7))
    assert quot == RGB(2, 3, 3)
    assert rem == RGB(1, 0, 1)


def test_rgb_hex_roundtrip():
    rgb = RGB.from_hex(0x123456)
    assert rgb == RGB(0x12, 0x34, 0x56)
    assert rgb.to_hex() == 0x123456
    assert f"{rgb:x}" == "123456"
    assert f"{RGB(255, 0, 171):X}" == "FF00AB"
    assert RGB.parse("0xff00ab") == RGB(255, 0, 171)


@pytest.mark.parametrize("text", ["ff8000", "FF8000", "0xff8000", "0XFF8000"])
def test_parse_hex_rgb_valid(text):
    assert parse_hex_rgb(text) == 0xFF8000


@pytest.mark.parametrize("text", ["", "fff", "ff80000", "#ff8000", "gg8000", "0x"])
def test_parse_hex_rgb_invalid(text):
    with pytest.raises(RGBParseError):
        parse_hex_rgb(text)


def test_rgb_to_hex_alpha():
    assert rgb_to_hex((255, 0, 16)) == "#ff0010"
    assert rgb_to_hex((255, 0, 16, 255)) == "#ff0010"
    assert rgb_to_hex((255, 0, 16, 128)) == "#ff001080"
    assert hex_to_rgb("#f00") == (255, 0, 0)


def test_img_rejects_bad_width():
    with pytest.raises(ValueError):
        Img(np.zeros(5), 2)
    with pytest.raises(ValueError):
        Img(np.zeros(4), 0)


def test_img_copies_buffer():
    buf = np.zeros((4, 3))
    img = Img(buf, 2)
    buf[0, 0] = 99.0
    assert img.buffer[0, 0] == 0.0
    assert img.height == 2
    assert img.size == (2, 2)


def test_img_indexing():
    arr = np.arange(6).reshape(2, 3)
    img = Img.from_array(arr)
    assert img.width == 3
    assert img[2, 1] == 5
    assert_array_equal(img.to_array(), arr)


def test_clamp_f64_to_u8():
    out = clamp_f64_to_u8(np.array([-3.0, 0.4, 0.6, 127.5, 300.0]))
    assert out.dtype == np.uint8
    assert_array_equal(out, [0, 0, 1, 128, 255])
    assert clamp_f64_to_u8(254.7) == 255
    assert clamp_f64_to_u8(-1.0) == 0


def test_as_rgba_u8_fills_alpha():
    rgb = np.full((2, 2, 3), 9, dtype=np.uint8)
    out = as_rgba_u8(rgb)
    assert out.shape == (2, 2, 4)
    assert (out[..., 3] == 255).all()
    with pytest.raises(TypeError):
        as_rgba_u8(rgb.astype(np.float32))
