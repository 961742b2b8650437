"""Test the command-line front end end to end.

Tests for faerber.cli:
    - Raster conversion with a built-in palette writes only palette colours
    - Default output name is <stem>_<scheme>[_<flavour>].png
    - Palette files, --disable and bit-depth mode (greyscale and tinted)
    - SVG input is recoloured; a dither method is rejected for SVG
    - Missing input exits 2, configuration errors exit 1
    - --list prints the bundled colourschemes

Test cases:
    - test_builtin_palette_conversion()
    - test_default_output_name()
    - test_palette_file_and_disable()
    - test_bit_depth_mode()
    - test_tint_mode()
    - test_svg_conversion()
    - test_svg_rejects_dither()
    - test_missing_input()
    - test_bad_method()
    - test_palette_file_too_small()
    - test_list()

Run:
    pytest tests/test_cli.py -v
"""

import numpy as np
from numpy.testing import assert_array_equal
from PIL import Image

from faerber.cli import main
from faerber.image_io import load_image_rgba
from faerber.palette_data import CGA


def _write_png(path, seed=0, size=(6, 5)):
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0], 4), dtype=np.uint8)
    arr[..., 3] = 255
    Image.fromarray(arr).save(path)
    return arr


def _colours(arr):
    return {tuple(p) for p in arr[..., :3].reshape(-1, 3).tolist()}


def test_builtin_palette_conversion(tmp_path, capsys):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    _write_png(src)
    assert main([str(src), str(dst), "--colours", "cga", "--method", "de1976", "--workers", "1"]) == 0
    out = load_image_rgba(dst)
    assert out.shape == (5, 6, 4)
    assert _colours(out) <= {c.as_tuple() for c in CGA}
    assert "Colours used:" in capsys.readouterr().out


def test_default_output_name(tmp_path):
    src = tmp_path / "pic.png"
    _write_png(src)
    assert main([str(src), "--palette", "nord", "--workers", "1"]) == 0
    assert (tmp_path / "pic_nord.png").exists()
    assert main([str(src), "--flavour", "mocha", "--workers", "2"]) == 0
    assert (tmp_path / "pic_catppuccin_mocha.png").exists()


def test_palette_file_and_disable(tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    plt = tmp_path / "mine.plt"
    _write_png(src, seed=4)
    plt.write_text("// three colours\nff0000\n00ff00\n0000ff\n", "utf-8")
    code = main(
        [str(src), str(dst), "--palette-file", str(plt), "--disable", "color1", "--method", "floyd"]
    )
    assert code == 0
    out = load_image_rgba(dst)
    assert _colours(out) <= {(255, 0, 0), (0, 0, 255)}
    assert_array_equal(out[..., 3], 255)


def test_bit_depth_mode(tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    _write_png(src, seed=8)
    assert main([str(src), str(dst), "--depth", "1", "--method", "atkinson"]) == 0
    out = load_image_rgba(dst)
    assert set(np.unique(out[..., :3]).tolist()) <= {0, 255}
    assert_array_equal(out[..., 0], out[..., 2])


def test_tint_mode(tmp_path):
    src = tmp_path / "in.png"
    dst = tmp_path / "out.png"
    _write_png(src, seed=4, size=(8, 8))
    assert main([str(src), str(dst), "--tint", "LIGHT_CYAN"]) == 0
    out = load_image_rgba(dst)
    assert _colours(out) <= {(0, 0, 0), (0x55, 0xFF, 0xFF)}
    assert_array_equal(out[..., 3], 255)


def test_svg_conversion(tmp_path):
    src = tmp_path / "logo.svg"
    dst = tmp_path / "logo_out.svg"
    src.write_text('<svg xmlns="http://www.w3.org/2000/svg"><rect fill="#010101"/></svg>', "utf-8")
    assert main([str(src), str(dst), "--colours", "cga", "--method", "de1994t"]) == 0
    assert 'fill="#000000"' in dst.read_text("utf-8")


def test_svg_rejects_dither(tmp_path, capsys):
    src = tmp_path / "logo.svg"
    src.write_text('<svg xmlns="http://www.w3.org/2000/svg"/>', "utf-8")
    assert main([str(src), "--method", "dither_burkes"]) == 1
    assert "[error]" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.png")]) == 2
    assert "not found" in capsys.readouterr().err


def test_bad_method(tmp_path):
    src = tmp_path / "in.png"
    _write_png(src)
    assert main([str(src), "--method", "de3000"]) == 1
    assert main([str(src), "--depth", "9"]) == 1
    assert main([str(src), "--palette", "monokai"]) == 1
    assert main([str(src), "--tint", "mauve"]) == 1


def test_palette_file_too_small(tmp_path, capsys):
    src = tmp_path / "in.png"
    plt = tmp_path / "two.plt"
    _write_png(src)
    plt.write_text("000000\nffffff\n", "utf-8")
    assert main([str(src), "--palette-file", str(plt)]) == 1
    assert "more than two" in capsys.readouterr().err


def test_list(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "catppuccin" in out
    assert "macchiato" in out
    assert "crayon" in out
    assert "gruvbox" in out
