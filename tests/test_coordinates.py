import logging
import math

import pytest

from agriplot.modules.plots.coordinates import (
    EARTH_RADIUS_METERS,
    Coordinate,
    coerce_ring,
    ring_area,
    ring_area_square_meters,
    validate_coordinate,
)
from conftest import ring_of


@pytest.mark.parametrize("raw, expected", [
    ({"latitude": 14.5, "longitude": 121.0}, Coordinate(14.5, 121.0)),
    ({"Latitude": "14.5", "Longitude": "121.0"}, Coordinate(14.5, 121.0)),
    ((1, 2), Coordinate(1.0, 2.0)),
    (Coordinate(3.0, 4.0), Coordinate(3.0, 4.0)),
])
def test_validate_coordinate_accepts_numbers_and_numeric_strings(raw, expected):
    assert validate_coordinate(raw) == expected


@pytest.mark.parametrize("raw", [
    {"latitude": float("nan"), "longitude": 1.0},
    {"latitude": 1.0, "longitude": float("inf")},
    {"latitude": "north", "longitude": 1.0},
    {"latitude": None, "longitude": 1.0},
    {"longitude": 1.0},
    {"latitude": True, "longitude": 1.0},
    "14.5,121.0",
    None,
])
def test_validate_coordinate_rejects_unusable_input(raw, caplog):
    with caplog.at_level(logging.WARNING):
        assert validate_coordinate(raw) is None
    assert caplog.records


def test_coerce_ring_drops_invalid_entries():
    ring = coerce_ring([
        {"Latitude": 1, "Longitude": 2},
        {"Latitude": "x", "Longitude": 2},
        {"Latitude": "3", "Longitude": "4"},
    ])
    assert ring == (Coordinate(1.0, 2.0), Coordinate(3.0, 4.0))


def test_coerce_ring_handles_missing_list():
    assert coerce_ring(None) == ()


def test_ring_area_incomplete_ring_is_zero():
    assert ring_area(()) == "0.00"
    assert ring_area(ring_of((0, 0), (0, 1))) == "0.00"


def test_ring_area_triangle_matches_planar_shoelace():
    ring = ring_of((10, 10), (10, 20), (20, 20))
    # right triangle in the projected frame: legs of 10 degrees each,
    # longitude scaled by cos(mean latitude)
    leg = EARTH_RADIUS_METERS * math.radians(10)
    expected_m2 = leg * leg * math.cos(math.radians(40 / 3)) / 2
    assert ring_area_square_meters(ring) == pytest.approx(expected_m2, rel=1e-9)
    assert ring_area(ring) == f"{expected_m2 / 10000:.2f}"


def test_ring_area_small_square_in_hectares():
    side = 0.001  # about 111 m at the equator
    ring = ring_of((0, 0), (0, side), (side, side), (side, 0))
    assert ring_area(ring) == "1.24"


def test_ring_area_independent_of_winding_and_rotation():
    ring = ring_of(
        (14.6001, 121.0002), (14.6004, 121.0011), (14.6013, 121.0015),
        (14.6009, 121.0006), (14.6016, 121.0001),
    )
    expected = ring_area(ring)
    assert ring_area(tuple(reversed(ring))) == expected
    for k in range(len(ring)):
        assert ring_area(ring[k:] + ring[:k]) == expected
    assert ring_area_square_meters(tuple(reversed(ring))) == ring_area_square_meters(ring)
