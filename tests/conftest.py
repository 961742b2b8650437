"""Shared fixtures: small palettes built the way the CLI builds them."""

import pytest

from faerber.palette_data import PaletteColor, build_palette


@pytest.fixture
def black_white():
    return build_palette([PaletteColor("black", 0x000000), PaletteColor("white", 0xFFFFFF)])


@pytest.fixture
def eight_colours():
    values = [0x000000, 0xFFFFFF, 0xFF0000, 0x00FF00, 0x0000FF, 0xFFFF00, 0x808080, 0x7F3FBF]
    return build_palette([PaletteColor(f"c{i}", v) for i, v in enumerate(values)])
