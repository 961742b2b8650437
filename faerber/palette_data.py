# faerber/palette_data.py
from __future__ import annotations

"""
Palette definitions, the colourscheme library, and build helpers.

Exports:
  PaletteColor, Flavor, ColorScheme, Library
  PaletteView                     # what the conversion core consumes
  build_palette(colours)          -> PaletteView of the enabled entries
  palette_from_values(values)     -> Flavor from plain 24-bit values
  parse_palette_text(text)        -> list[RGB] from a .plt file body
  CGA, CRAYON                     # built-in palettes (list[RGB])
  single_colour(name)             -> RGB tint from the CGA names
  LibraryManager                  # caller-owned, load-once palette cache
  load_default_library()          -> LibraryManager with the bundled schemes
"""

import json
from dataclasses import dataclass, field
from importlib import resources
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .colour_convert import rgb_to_lab
from .core_types import RGB, Lab, U8Palette, parse_hex_rgb, rgb_to_hex, value_to_rgb_tuple
from .errors import (
    ColorschemeParseError,
    NoSuchColorschemeError,
    NoSuchColourError,
    NoSuchFlavourError,
    PaletteTooSmallError,
    RGBParseError,
)


# Palette model


@dataclass
class PaletteColor:
    """Named 24-bit colour that can be toggled off without being removed."""

    name: str
    value: int
    enabled: bool = True

    @property
    def rgb(self) -> RGB[int]:
        return RGB.from_hex(self.value)

    @property
    def hex(self) -> str:
        return rgb_to_hex(value_to_rgb_tuple(self.value))


@dataclass
class Flavor:
    """One resolved palette: an ordered mapping of colour name -> PaletteColor."""

    name: str
    palette: Dict[str, PaletteColor] = field(default_factory=dict)
    enabled: bool = True

    def get(self, name: str) -> Optional[PaletteColor]:
        return self.palette.get(name)

    def colors(self) -> List[PaletteColor]:
        return list(self.palette.values())

    def enabled_colors(self) -> List[PaletteColor]:
        return [c for c in self.palette.values() if c.enabled]

    def values(self) -> List[int]:
        """24-bit values of the enabled entries, in palette order."""
        return [c.value for c in self.enabled_colors()]


ColorScheme = Dict[str, Flavor]
Library = Dict[str, ColorScheme]


@dataclass(frozen=True)
class PaletteView:
    """
    Flat, already-resolved palette handed to the conversion core.

    rgb and lab are row-aligned: rgb[i] is the original 24-bit colour whose
    CIE Lab coordinates are lab[i]. Only enabled entries are present.
    """

    names: Tuple[str, ...]
    rgb: U8Palette  # uint8 [P,3]
    lab: Lab  # float32 [P,3]

    def __len__(self) -> int:
        return int(self.rgb.shape[0])

    def colours(self) -> List[RGB[int]]:
        return [RGB(int(r), int(g), int(b)) for r, g, b in self.rgb.tolist()]

    def name_of_hex(self) -> Dict[str, str]:
        """'#rrggbb' -> colour name, for usage reports."""
        return {
            rgb_to_hex((int(r), int(g), int(b))): name
            for name, (r, g, b) in zip(self.names, self.rgb.tolist())
        }


def build_palette(colours: Iterable[PaletteColor]) -> PaletteView:
    """
    Convert palette entries into a PaletteView, skipping disabled ones:
      names: tuple of colour names
      rgb  : uint8 array [P,3]
      lab  : float32 array [P,3]
    """
    enabled = [c for c in colours if c.enabled]
    rgbs_u8 = np.array(
        [value_to_rgb_tuple(c.value) for c in enabled], dtype=np.uint8
    ).reshape(-1, 3)
    pal_lab: Lab = rgb_to_lab(rgbs_u8).reshape(-1, 3).astype(np.float32, copy=False)
    return PaletteView(names=tuple(c.name for c in enabled), rgb=rgbs_u8, lab=pal_lab)


def palette_from_values(name: str, values: Sequence[int]) -> Flavor:
    """Wrap plain 24-bit values as a Flavor with generated colour names."""
    flavor = Flavor(name)
    for i, value in enumerate(values):
        color = PaletteColor(f"color{i}", int(value) & 0xFFFFFF)
        flavor.palette[color.name] = color
    return flavor


# Plain-text palette files


def parse_palette_text(text: str) -> List[RGB[int]]:
    """
    Parse a palette written as 6-digit hex values (optional 0x prefix), one per
    line. Blank lines and lines starting with '//' are ignored.

    Raises PaletteTooSmallError for two colours or fewer and RGBParseError for
    a malformed line.
    """
    lines = [line.strip() for line in text.splitlines()]
    filtered = [line for line in lines if line and not line.startswith("//")]
    if len(filtered) <= 2:
        raise PaletteTooSmallError(len(filtered))
    return [RGB.from_hex(parse_hex_rgb(line)) for line in filtered]


# Built-in palettes

CGA: List[RGB[int]] = [
    RGB(0x00, 0x00, 0x00),  # black
    RGB(0x00, 0x00, 0xAA),  # blue
    RGB(0x00, 0xAA, 0x00),  # green
    RGB(0x00, 0xAA, 0xAA),  # cyan
    RGB(0xAA, 0x00, 0x00),  # red
    RGB(0xAA, 0x00, 0xAA),  # magenta
    RGB(0xAA, 0x55, 0x00),  # brown
    RGB(0xAA, 0xAA, 0xAA),  # light gray
    RGB(0x55, 0x55, 0x55),  # gray
    RGB(0x55, 0x55, 0xFF),  # light blue
    RGB(0x55, 0xFF, 0x55),  # light green
    RGB(0x55, 0xFF, 0xFF),  # light cyan
    RGB(0xFF, 0x55, 0x55),  # light red
    RGB(0xFF, 0x55, 0xFF),  # light magenta
    RGB(0xFF, 0xFF, 0x55),  # yellow
    RGB(0xFF, 0xFF, 0xFF),  # white
]

CRAYON: List[RGB[int]] = [
    RGB(0xFC, 0xE8, 0x83),  # yellow
    RGB(0x1F, 0x75, 0xFE),  # blue
    RGB(0x23, 0x23, 0x23),  # black
    RGB(0x92, 0x6E, 0xAE),  # violet
    RGB(0x19, 0x9E, 0xBD),  # blue green
    RGB(0xC0, 0x44, 0x8F),  # red violet
    RGB(0xFF, 0x53, 0x49),  # red orange
    RGB(0xC5, 0xE3, 0x84),  # yellow green
    RGB(0xEE, 0x20, 0x4D),  # red
    RGB(0xFF, 0x75, 0x38),  # orange
    RGB(0xFD, 0xDB, 0x6D),  # dandelion
    RGB(0x1D, 0xAC, 0xD6),  # cerulean
    RGB(0xED, 0xED, 0xED),  # white
    RGB(0xF7, 0x53, 0x94),  # violet red
    RGB(0x95, 0x91, 0x8C),  # gray
    RGB(0x5D, 0x76, 0xCB),  # indigo
    RGB(0xFD, 0xD9, 0xB5),  # apricot
    RGB(0xFC, 0x28, 0x47),  # scarlet
    RGB(0xFF, 0xAA, 0xCC),  # carnation pink
    RGB(0x1C, 0xAC, 0x78),  # green
    RGB(0x73, 0x66, 0xBD),  # blue violet
    RGB(0xB4, 0x67, 0x4D),  # brown
    RGB(0xF0, 0xE8, 0x91),  # green yellow
    RGB(0x00, 0x00, 0x00),  # true black
    RGB(0xFF, 0xFF, 0xFF),  # true white
]

BUILTIN_PALETTES: Dict[str, List[RGB[int]]] = {"cga": CGA, "crayon": CRAYON}

# CGA entries usable as a single tint colour (black and white excluded).
SINGLE_COLOURS: Dict[str, RGB[int]] = {
    "blue": CGA[1],
    "green": CGA[2],
    "cyan": CGA[3],
    "red": CGA[4],
    "magenta": CGA[5],
    "brown": CGA[6],
    "light_gray": CGA[7],
    "gray": CGA[8],
    "light_blue": CGA[9],
    "light_green": CGA[10],
    "light_cyan": CGA[11],
    "light_red": CGA[12],
    "light_magenta": CGA[13],
    "yellow": CGA[14],
}


def single_colour(name: str) -> RGB[int]:
    """Look up a SINGLE_COLOURS entry by name (case-insensitive)."""
    colour = SINGLE_COLOURS.get(name.strip().lower())
    if colour is None:
        raise NoSuchColourError(name)
    return colour


# Colourscheme library


def _hex_value(text: str) -> Optional[int]:
    """'#rrggbb' (or six bare digits) -> 24-bit value; None for anything else."""
    s = text.strip()
    try:
        return parse_hex_rgb(s[1:] if s.startswith("#") else s)
    except RGBParseError:
        return None


class LibraryManager:
    """
    Caller-owned palette cache keyed by (scheme, flavour).

    Construct once at start-up and pass the resolved PaletteView into the
    core; nothing in the conversion code reads this object implicitly.
    """

    def __init__(self, library: Optional[Library] = None) -> None:
        self.library: Library = library if library is not None else {}

    @staticmethod
    def parse_colorscheme(name: str, text: str) -> ColorScheme:
        """
        Parse '{flavour: {colour_name: "#rrggbb", ...}, ...}'.
        Values that are not hex are skipped; malformed JSON raises.
        """
        try:
            saved = json.loads(text)
        except json.JSONDecodeError as e:
            raise ColorschemeParseError(name) from e
        if not isinstance(saved, dict):
            raise ColorschemeParseError(name)

        scheme: ColorScheme = {}
        for flavour_name, colours in saved.items():
            if not isinstance(colours, dict):
                raise ColorschemeParseError(name)
            flavor = Flavor(flavour_name)
            for colour_name, value in colours.items():
                parsed = _hex_value(str(value))
                if parsed is not None:
                    flavor.palette[colour_name] = PaletteColor(colour_name, parsed)
            scheme[flavour_name] = flavor
        return scheme

    @staticmethod
    def parse_wezterm_colorscheme(text: str) -> ColorScheme:
        """Parse '{scheme_name: ["#hex", ...], ...}' into one flavour per entry."""
        try:
            saved = json.loads(text)
        except json.JSONDecodeError as e:
            raise ColorschemeParseError("wezterm") from e
        if not isinstance(saved, dict):
            raise ColorschemeParseError("wezterm")

        scheme: ColorScheme = {}
        for flavour_name, values in saved.items():
            flavor = Flavor(flavour_name)
            for i, value in enumerate(values):
                parsed = _hex_value(str(value))
                if parsed is not None:
                    colour = PaletteColor(f"color{i}", parsed)
                    flavor.palette[colour.name] = colour
            scheme[flavour_name] = flavor
        return scheme

    def add_colorscheme(self, name: str, text: str) -> ColorScheme:
        scheme = self.parse_colorscheme(name, text)
        self.library[name] = scheme
        return scheme

    def add_wezterm_colorschemes(self, text: str, name: str = "wezterm") -> ColorScheme:
        scheme = self.parse_wezterm_colorscheme(text)
        self.library[name] = scheme
        return scheme

    def get(self, name: str) -> Optional[ColorScheme]:
        return self.library.get(name)

    def scheme(self, name: str) -> ColorScheme:
        scheme = self.library.get(name)
        if scheme is None:
            raise NoSuchColorschemeError(name)
        return scheme

    def flavour(self, scheme_name: str, flavour_name: Optional[str] = None) -> Flavor:
        """
        Resolve (scheme, flavour). Flavour names match case-insensitively; with
        no flavour the first one in the scheme is used.
        """
        scheme = self.scheme(scheme_name)
        if flavour_name is None:
            if not scheme:
                raise NoSuchFlavourError(f"{scheme_name}/<default>")
            return next(iter(scheme.values()))
        if flavour_name in scheme:
            return scheme[flavour_name]
        wanted = flavour_name.lower()
        for key, flavor in scheme.items():
            if key.lower() == wanted:
                return flavor
        raise NoSuchFlavourError(flavour_name)

    def set_color(self, scheme: str, flavour: str, colour: str, status: bool) -> bool:
        """Enable or disable one colour; the entry itself is never removed."""
        entry = self.flavour(scheme, flavour).get(colour)
        if entry is None:
            raise NoSuchColourError(colour)
        entry.enabled = status
        return status

    def resolve(self, scheme: str, flavour: Optional[str] = None) -> PaletteView:
        """Resolved enabled palette for the core."""
        return build_palette(self.flavour(scheme, flavour).colors())

    def names(self) -> List[str]:
        return list(self.library.keys())

    def flavour_names(self) -> Mapping[str, List[str]]:
        return {name: list(scheme.keys()) for name, scheme in self.library.items()}


BUNDLED_SCHEMES: Tuple[str, ...] = (
    "catppuccin",
    "dracula",
    "gruvbox",
    "nord",
    "solarized",
)


def load_default_library() -> LibraryManager:
    """Build a LibraryManager holding the bundled colourschemes."""
    manager = LibraryManager()
    data_dir = resources.files("faerber") / "data"
    for name in BUNDLED_SCHEMES:
        manager.add_colorscheme(name, (data_dir / f"{name}.json").read_text("utf-8"))
    return manager


__all__ = [
    "PaletteColor",
    "Flavor",
    "ColorScheme",
    "Library",
    "PaletteView",
    "build_palette",
    "palette_from_values",
    "parse_palette_text",
    "CGA",
    "CRAYON",
    "BUILTIN_PALETTES",
    "SINGLE_COLOURS",
    "single_colour",
    "LibraryManager",
    "BUNDLED_SCHEMES",
    "load_default_library",
]
