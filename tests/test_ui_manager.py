"""Tests for the pure helpers behind the dashboard panels."""

import pytest

from conftest import PRESSURE, TEMPERATURE
from ui_manager import axis_limits, format_refs, parse_colour, parse_refs


@pytest.mark.parametrize("low, high, values, expected", [
    (None, None, [1.0, 5.0], None),
    (0, 10, [50.0], (0, 10)),
    (0, None, [3.0, 7.0], (0, 7.0)),
    (None, 10, [3.0, 7.0], (3.0, 10)),
    (5, None, [], (5, 6.0)),
    (5, None, [1.0, 2.0], (5, 6.0)),
])
def test_axis_limits(low, high, values, expected):
    assert axis_limits(low, high, values) == expected


def test_parse_refs_skips_malformed_and_duplicates():
    refs = parse_refs("boiler1:temperature, bad, boiler1:pressure, boiler1:temperature")
    assert refs == [TEMPERATURE, PRESSURE]
    assert format_refs(refs) == "boiler1:temperature, boiler1:pressure"


def test_parse_colour():
    assert parse_colour("#00ff00") == (0, 255, 0, 255)
    assert parse_colour("green") == (128, 128, 128, 255)
