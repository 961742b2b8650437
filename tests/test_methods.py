"""Test conversion method names and family narrowing.

Tests for faerber.methods:
    - Canonical names and short aliases resolve case-insensitively
    - Unknown names raise InvalidConversionMethodError
    - Narrowing to the wrong family raises InvalidConversionMethodError

Test cases:
    - test_parse_canonical_names()
    - test_parse_aliases()
    - test_parse_unknown()
    - test_narrowing()
    - test_method_string_names()

Run:
    pytest tests/test_methods.py -v
"""

import pytest

from faerber.errors import InvalidConversionMethodError
from faerber.methods import (
    DistanceMetric,
    DitherMethod,
    all_method_names,
    as_distance_metric,
    as_dither_method,
    is_distance_metric,
    parse_method,
)


def test_parse_canonical_names():
    for name in all_method_names():
        assert str(parse_method(name)) == name
    assert parse_method("DE2000") is DistanceMetric.DE2000
    assert parse_method(" dither_sierra3 ") is DitherMethod.SIERRA3


@pytest.mark.parametrize(
    "alias,expected",
    [
        ("de76", DistanceMetric.DE1976),
        ("de94g", DistanceMetric.DE1994G),
        ("de94t", DistanceMetric.DE1994T),
        ("floyd", DitherMethod.FLOYD_STEINBERG),
        ("jarvis", DitherMethod.JARVIS_JUDICE_NINKE),
    ],
)
def test_parse_aliases(alias, expected):
    assert parse_method(alias) is expected


def test_parse_unknown():
    with pytest.raises(InvalidConversionMethodError):
        parse_method("de3000")


def test_narrowing():
    assert as_distance_metric(DistanceMetric.DE1976) is DistanceMetric.DE1976
    assert as_dither_method(DitherMethod.BURKES) is DitherMethod.BURKES
    with pytest.raises(InvalidConversionMethodError):
        as_distance_metric(DitherMethod.ATKINSON)
    with pytest.raises(InvalidConversionMethodError):
        as_dither_method(DistanceMetric.DE2000)
    assert is_distance_metric(DistanceMetric.DE1994T)
    assert not is_distance_metric(DitherMethod.STUCKI)


def test_method_string_names():
    assert all_method_names() == [
        "de1976",
        "de1994g",
        "de1994t",
        "de2000",
        "dither_floydsteinberg",
        "dither_atkinson",
        "dither_stucki",
        "dither_burkes",
        "dither_jarvisjudiceninke",
        "dither_sierra3",
    ]
