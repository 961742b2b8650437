# faerber/__init__.py
"""
faerber package.

Purpose:
  Remap images and SVG documents onto a constrained colour palette, either by
  nearest colour in CIE Lab (Delta-E) or by error-diffusion dithering.
  See faerber.cli for the command-line front end.

Public API:
  convert        : dispatch a raster conversion by ConversionMethod.
  convert_naive  : nearest-colour match of every pixel.
  convert_dither : error diffusion onto the palette.
  convert_vector : recolour an SVG document.
  parse_method   : method name -> DistanceMetric | DitherMethod.
  LibraryManager : caller-owned colourscheme cache; load_default_library()
                   returns one holding the bundled schemes.
  colour_convert, delta_e, dither, quantize, palette_data, core_types, errors
                 : the building blocks, importable on their own.

Quick start:
  from faerber import convert, load_default_library, parse_method
  palette = load_default_library().resolve("catppuccin", "mocha")
  out = convert(rgba, parse_method("de2000"), palette)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import delta_e
from . import dither
from . import errors
from . import palette_data
from . import quantize
from . import utils

from .errors import FaerberError
from .methods import ConversionMethod, DistanceMetric, DitherMethod, parse_method
from .palette_data import LibraryManager, PaletteView, load_default_library
from .pipeline import (
    convert,
    convert_dither,
    convert_naive,
    dither_bit_depth,
    dither_single_colour,
)
from .vector import convert_vector

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "delta_e",
    "dither",
    "errors",
    "palette_data",
    "quantize",
    "utils",
    "FaerberError",
    "ConversionMethod",
    "DistanceMetric",
    "DitherMethod",
    "parse_method",
    "LibraryManager",
    "PaletteView",
    "load_default_library",
    "convert",
    "convert_dither",
    "convert_naive",
    "dither_bit_depth",
    "dither_single_colour",
    "convert_vector",
]
