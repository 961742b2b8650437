# faerber/methods.py
from __future__ import annotations

"""
Conversion method selection.

Exports:
- DistanceMetric: Delta-E formulas used by direct palette matching.
- DitherMethod: error-diffusion kernels used by dithering.
- ConversionMethod = Union[DistanceMetric, DitherMethod]
- parse_method(name) -> ConversionMethod
- as_distance_metric(method) / as_dither_method(method): explicit narrowing.

Notes:
- The two families need different palette representations (Lab vs raw RGB)
  and are never coerced into each other. Unknown names and wrong-family
  narrowing raise InvalidConversionMethodError.
"""

from enum import Enum
from typing import List, Union

from .errors import InvalidConversionMethodError


class DistanceMetric(Enum):
    DE1976 = "de1976"
    DE1994G = "de1994g"
    DE1994T = "de1994t"
    DE2000 = "de2000"

    def __str__(self) -> str:
        return self.value


class DitherMethod(Enum):
    FLOYD_STEINBERG = "dither_floydsteinberg"
    ATKINSON = "dither_atkinson"
    STUCKI = "dither_stucki"
    BURKES = "dither_burkes"
    JARVIS_JUDICE_NINKE = "dither_jarvisjudiceninke"
    SIERRA3 = "dither_sierra3"

    def __str__(self) -> str:
        return self.value


ConversionMethod = Union[DistanceMetric, DitherMethod]

# Short CLI spellings kept alongside the canonical names.
_ALIASES = {
    "de76": DistanceMetric.DE1976,
    "de94g": DistanceMetric.DE1994G,
    "de94t": DistanceMetric.DE1994T,
    "de2000": DistanceMetric.DE2000,
    "floyd": DitherMethod.FLOYD_STEINBERG,
    "atkinson": DitherMethod.ATKINSON,
    "stucki": DitherMethod.STUCKI,
    "burkes": DitherMethod.BURKES,
    "jarvis": DitherMethod.JARVIS_JUDICE_NINKE,
    "sierra3": DitherMethod.SIERRA3,
}


def all_method_names() -> List[str]:
    """Canonical names, distance metrics first."""
    return [m.value for m in DistanceMetric] + [m.value for m in DitherMethod]


def parse_method(name: str) -> ConversionMethod:
    """
    Resolve a user-facing method name (case-insensitive).
    Accepts canonical names ('de2000', 'dither_atkinson', ...) and the short
    aliases ('de76', 'floyd', ...).
    """
    key = name.strip().lower()
    for family in (DistanceMetric, DitherMethod):
        for member in family:
            if member.value == key:
                return member
    if key in _ALIASES:
        return _ALIASES[key]
    raise InvalidConversionMethodError(name)


def is_distance_metric(method: ConversionMethod) -> bool:
    return isinstance(method, DistanceMetric)


def as_distance_metric(method: ConversionMethod) -> DistanceMetric:
    """Narrow to a distance metric; a dither method is an error."""
    if isinstance(method, DistanceMetric):
        return method
    raise InvalidConversionMethodError(method, expected="distance metric")


def as_dither_method(method: ConversionMethod) -> DitherMethod:
    """Narrow to a dither method; a distance metric is an error."""
    if isinstance(method, DitherMethod):
        return method
    raise InvalidConversionMethodError(method, expected="dither kernel")


__all__ = [
    "DistanceMetric",
    "DitherMethod",
    "ConversionMethod",
    "all_method_names",
    "parse_method",
    "is_distance_metric",
    "as_distance_metric",
    "as_dither_method",
]
