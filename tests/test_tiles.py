"""Tests for tile geometry"""

import pytest

from services.sampler import make_tile
from services.sampler.tiles import METERS_PER_DEG_LAT, meters_to_lon_deg


def test_one_meter_tile_at_origin_is_symmetric():
    tile = make_tile(0, 0, 1)
    corners = tile.corners

    assert tile.area_m2 == 1.0
    assert tile.center.lat == 0 and tile.center.lon == 0
    assert corners.NW.lat == -corners.SW.lat
    assert corners.NE.lon == -corners.NW.lon
    assert corners.NE.lat == corners.NW.lat
    assert corners.SE.lon == corners.NE.lon
    assert corners.NE.lat == pytest.approx(0.5 / METERS_PER_DEG_LAT)
    assert corners.NE.lon == pytest.approx(0.5 / METERS_PER_DEG_LAT)


def test_thousand_meter_tile_area():
    tile = make_tile(-41.29, 174.78, 1000)
    assert tile.area_m2 == 1_000_000
    assert tile.size_meters == 1000


def test_bounds_match_corners():
    tile = make_tile(35.0, 139.0, 10)
    assert tile.bounds.north == tile.corners.NW.lat
    assert tile.bounds.south == tile.corners.SE.lat
    assert tile.bounds.east == tile.corners.NE.lon
    assert tile.bounds.west == tile.corners.SW.lon


def test_longitude_span_widens_with_latitude():
    equator = make_tile(0, 0, 100)
    north = make_tile(60, 0, 100)
    eq_width = equator.bounds.east - equator.bounds.west
    north_width = north.bounds.east - north.bounds.west
    assert north_width == pytest.approx(eq_width * 2, rel=1e-6)


def test_longitude_scale_is_clamped_near_poles():
    assert meters_to_lon_deg(100, 90) == pytest.approx(100 / (METERS_PER_DEG_LAT * 0.12))
    assert meters_to_lon_deg(100, 89.99) == meters_to_lon_deg(100, 90)


def test_fractional_tile_area_rounds_to_cents():
    assert make_tile(0, 0, 0.333).area_m2 == 0.11
