# faerber/errors.py
from __future__ import annotations

"""
Typed errors raised by the conversion core and its collaborators.

Every error derives from FaerberError (a ValueError) so callers can catch the
whole family at once; the CLI does exactly that.
"""

from typing import Optional


class FaerberError(ValueError):
    """Base class for all faerber errors."""


# Configuration


class BadBitDepthError(FaerberError):
    """Bit depth outside 1..7."""

    def __init__(self, bits: int) -> None:
        self.bits = bits
        super().__init__(
            f"configuration error: bit depth must be between 1 and 7, but was {bits}"
        )


class InvalidConversionMethodError(FaerberError):
    """Method from the wrong family, or an unknown method name."""

    def __init__(self, method: object, expected: Optional[str] = None) -> None:
        self.method = method
        self.expected = expected
        msg = f"invalid conversion method: {method}"
        if expected:
            msg += f" (expected a {expected})"
        super().__init__(msg)


# Palettes


class EmptyPaletteError(FaerberError):
    """No enabled palette colours to match against."""

    def __init__(self) -> None:
        super().__init__("palette has no enabled colours")


class PaletteTooSmallError(FaerberError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"user-specified palette has {count} colour(s); must have more than two"
        )


class RGBParseError(FaerberError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(
            f"could not parse {text!r} to an RGB value: must be exactly six "
            "hexadecimal characters, with optional 0x prefix"
        )


class ColorschemeParseError(FaerberError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"failed to parse colourscheme: {name}")


class PaletteLookupError(FaerberError):
    """A (scheme, flavour, colour) key that does not exist in the library."""

    kind = "entry"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{self.kind} {key!r} does not exist")


class NoSuchColorschemeError(PaletteLookupError):
    kind = "colourscheme"


class NoSuchFlavourError(PaletteLookupError):
    kind = "flavour"


class NoSuchColourError(PaletteLookupError):
    kind = "colour"


# Documents and images


class AttributeParseError(FaerberError):
    def __init__(self, name: str, value: str, reason: str = "") -> None:
        self.name = name
        self.value = value
        msg = f"invalid attribute {name}={value[:64]!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DocumentReadError(FaerberError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"error reading XML: {reason}")


class ImageReadError(FaerberError):
    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        super().__init__(f"input error: loading image {source}: {reason}")


__all__ = [
    "FaerberError",
    "BadBitDepthError",
    "InvalidConversionMethodError",
    "EmptyPaletteError",
    "PaletteTooSmallError",
    "RGBParseError",
    "ColorschemeParseError",
    "PaletteLookupError",
    "NoSuchColorschemeError",
    "NoSuchFlavourError",
    "NoSuchColourError",
    "AttributeParseError",
    "DocumentReadError",
    "ImageReadError",
]
