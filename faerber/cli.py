# faerber/cli.py
from __future__ import annotations

"""
Command-line front end: recolour a raster image or an SVG to a palette.

Usage:
  faerber INPUT [OUTPUT] [--palette SCHEME] [--flavour FLAVOUR]
          [--palette-file FILE | --colours cga|crayon]
          [--method NAME] [--depth N [--bw | --color | --tint NAME]]
          [--disable NAME ...] [--workers N] [--debug]
  faerber --list

Methods:
  de1976, de1994g, de1994t, de2000         nearest colour in CIE Lab
  dither_floydsteinberg, dither_atkinson,  error diffusion onto the palette
  dither_stucki, dither_burkes,
  dither_jarvisjudiceninke, dither_sierra3

Output:
  PNG for raster inputs, SVG for .svg inputs (distance metrics only).
  If OUTPUT is omitted, writes <stem>_<scheme>[_<flavour>].<ext> next to INPUT.
  --tint alone implies --depth 1.
"""

import argparse
import time
from pathlib import Path
from typing import List, Optional, Tuple

from .dither import FLOYD_STEINBERG, kernel_for
from .errors import FaerberError
from .image_io import load_image_rgba, save_image_rgba
from .methods import DitherMethod, all_method_names, as_distance_metric, parse_method
from .palette_data import (
    BUILTIN_PALETTES,
    LibraryManager,
    SINGLE_COLOURS,
    PaletteView,
    load_default_library,
    palette_from_values,
    parse_palette_text,
    single_colour,
)
from .pipeline import convert, dither_bit_depth, dither_single_colour
from .quantize import quantize_n_bits
from .utils import (
    colour_usage_report,
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)
from .vector import convert_vector

DEFAULT_SCHEME = "catppuccin"
DEFAULT_METHOD = "de2000"


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        input, output: Paths (output optional)
        palette, flavour: colourscheme selection
        palette_file, colours: alternative palette sources
        method: method name, resolved later by parse_method
        depth, color, tint: bit-depth dithering options
        disable: colour names to switch off
        workers, debug, list
    """
    parser = argparse.ArgumentParser(
        prog="faerber",
        description="Recolour an image or SVG to a colourscheme palette.",
    )
    parser.add_argument("input", type=Path, nargs="?", help="Input image or SVG")
    parser.add_argument("output", type=Path, nargs="?", help="Output path (optional)")
    parser.add_argument(
        "--palette", default=DEFAULT_SCHEME, help="Colourscheme name (see --list)"
    )
    parser.add_argument(
        "--flavour", default=None, help="Flavour of the colourscheme (default: first)"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--palette-file",
        type=Path,
        default=None,
        help="Plain-text palette: one hex colour per line",
    )
    source.add_argument(
        "--colours",
        choices=sorted(BUILTIN_PALETTES),
        default=None,
        help="Built-in palette",
    )
    parser.add_argument(
        "--method",
        default=DEFAULT_METHOD,
        help=f"One of: {', '.join(all_method_names())}",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Dither to N bits per channel instead of matching a palette (1..7)",
    )
    tone = parser.add_mutually_exclusive_group()
    tone.add_argument(
        "--bw", dest="color", action="store_false", help="Greyscale bit-depth output"
    )
    tone.add_argument(
        "--color", dest="color", action="store_true", help="Per-channel bit-depth output"
    )
    tone.add_argument(
        "--tint",
        default=None,
        metavar="NAME",
        help=f"Single-colour bit-depth output: {', '.join(SINGLE_COLOURS)}",
    )
    parser.set_defaults(color=False)
    parser.add_argument(
        "--disable",
        nargs="+",
        action="extend",
        default=[],
        metavar="NAME",
        help="Colour names to leave out of the palette",
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Internal workers"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    parser.add_argument(
        "--list", action="store_true", help="List colourschemes and flavours, then exit"
    )
    args = parser.parse_args(argv)
    if args.input is None and not args.list:
        parser.error("the following arguments are required: input")
    if args.tint is not None and args.depth is None:
        args.depth = 1
    return args


def _select_palette(
    manager: LibraryManager, args: argparse.Namespace
) -> Tuple[str, Optional[str], PaletteView]:
    """
    Register the requested palette source and resolve it.

    Returns (scheme, flavour, view); flavour is None when the scheme was
    resolved to its first flavour.
    """
    scheme, flavour = args.palette, args.flavour
    if args.palette_file is not None:
        colours = parse_palette_text(args.palette_file.read_text("utf-8"))
        scheme, flavour = args.palette_file.stem, None
    elif args.colours is not None:
        colours = BUILTIN_PALETTES[args.colours]
        scheme, flavour = args.colours, None
    else:
        colours = None

    if colours is not None:
        flavor = palette_from_values(scheme, [c.to_hex() for c in colours])
        manager.library[scheme] = {flavor.name: flavor}

    resolved = manager.flavour(scheme, flavour)
    for name in args.disable:
        manager.set_color(scheme, resolved.name, name, False)
    return scheme, flavour, manager.resolve(scheme, resolved.name)


def _default_output(src: Path, scheme: str, flavour: Optional[str]) -> Path:
    suffix = ".svg" if src.suffix.lower() == ".svg" else ".png"
    tag = f"{scheme}_{flavour}" if flavour else scheme
    return src.with_name(f"{src.stem}_{tag}{suffix}")


def _list_library(manager: LibraryManager) -> None:
    for name, flavours in manager.flavour_names().items():
        print_banner(name)
        for flavour in flavours:
            log(f"  {flavour}  ({len(manager.flavour(name, flavour).colors())} colours)")
    print_banner("built-in")
    for name, colours in BUILTIN_PALETTES.items():
        log(f"  {name}  ({len(colours)} colours)")


def _process_vector(
    src: Path, dst: Path, args: argparse.Namespace, palette: PaletteView
) -> None:
    metric = as_distance_metric(parse_method(args.method))
    text = src.read_text("utf-8")
    dst.write_text(convert_vector(text, metric, palette, args.workers), "utf-8")
    log(f"Wrote {dst.name} | palette_size={len(palette)}")


def _process_raster(
    src: Path, dst: Path, args: argparse.Namespace, palette: PaletteView
) -> None:
    method = parse_method(args.method)
    if args.depth is not None:
        if isinstance(method, DitherMethod):
            kernel = kernel_for(method)
        else:
            warn(f"{method} is not a dither kernel; using {FLOYD_STEINBERG} for --depth")
            kernel = FLOYD_STEINBERG
        rgba = load_image_rgba(src)
        if args.tint is not None:
            tint = single_colour(args.tint)
            mapped = dither_single_colour(rgba, kernel, args.depth, tint)
        else:
            mapped = dither_bit_depth(rgba, kernel, args.depth, colour=args.color)
        save_image_rgba(dst, mapped)
        height, width = rgba.shape[:2]
        log(f"Wrote {dst.name} | size={width}x{height} | bits={args.depth}")
        return

    rgba = load_image_rgba(src)
    t0 = time.perf_counter()
    mapped = convert(rgba, method, palette, args.workers, debug=args.debug)
    t_map = time.perf_counter() - t0
    save_image_rgba(dst, mapped)

    height, width = rgba.shape[:2]
    log(f"Wrote {dst.name} | size={width}x{height} | palette_size={len(palette)}")
    log("Colours used:")
    for hex_code, name, count in colour_usage_report(mapped, palette.name_of_hex()):
        log(f"  {hex_code}  {name}: {count:,}")
    if args.debug:
        pixels = width * height
        if t_map > 0:
            debug_log(
                f"throughput {pixels / t_map / 1e6:.2f} MPx/s "
                f"({pixels / 1e6:.2f} MPx in {format_seconds_compact(t_map)})"
            )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    t_start = time.perf_counter()

    try:
        manager = load_default_library()
        if args.list:
            _list_library(manager)
            return 0

        src: Path = args.input
        if not src.exists():
            error(f"not found: {src}")
            return 2

        # Resolve everything that can fail on configuration before reading pixels.
        method = parse_method(args.method)
        if args.depth is not None:
            quantize_n_bits(args.depth)
        if args.tint is not None:
            single_colour(args.tint)
        scheme, flavour, palette = _select_palette(manager, args)
        dst = args.output or _default_output(src, scheme, flavour)

        print_banner(src.name)
        print_config_line(
            "run",
            [
                ("Method", str(method)),
                ("Palette", scheme if flavour is None else f"{scheme}/{flavour}"),
                ("Colours", len(palette)),
                ("Workers", args.workers),
            ],
            debug=False,
        )
        if args.debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Depth", args.depth or "-"),
                        ("Colour", args.color),
                        ("Tint", args.tint or "-"),
                        ("Disabled", len(args.disable)),
                    ]
                )
            )

        if src.suffix.lower() == ".svg":
            _process_vector(src, dst, args, palette)
        else:
            _process_raster(src, dst, args, palette)
    except (FaerberError, OSError) as e:
        error(str(e))
        return 1

    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return 0
