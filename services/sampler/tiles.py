"""Tile geometry around a spot (flat-earth approximation, fine for small tiles)"""

import math

from .models import LatLon, Tile, TileBounds, TileCorners

METERS_PER_DEG_LAT = 111320
MIN_LON_COS = 0.12  # keeps longitude spans finite near the poles


def meters_to_lat_deg(meters: float) -> float:
    return meters / METERS_PER_DEG_LAT


def meters_to_lon_deg(meters: float, lat_deg: float) -> float:
    cos = math.cos(math.radians(lat_deg))
    return meters / (METERS_PER_DEG_LAT * max(cos, MIN_LON_COS))


def make_tile(lat: float, lon: float, size_meters: float = 1) -> Tile:
    """Square tile of ``size_meters`` per side centred on (lat, lon)"""
    half = size_meters / 2
    d_lat = meters_to_lat_deg(half)
    d_lon = meters_to_lon_deg(half, lat)

    north = lat + d_lat
    south = lat - d_lat
    east = lon + d_lon
    west = lon - d_lon

    return Tile(
        size_meters=size_meters,
        area_m2=round(size_meters * size_meters, 2),
        center=LatLon(lat=lat, lon=lon),
        bounds=TileBounds(north=north, south=south, east=east, west=west),
        corners=TileCorners(
            NW=LatLon(lat=north, lon=west),
            NE=LatLon(lat=north, lon=east),
            SW=LatLon(lat=south, lon=west),
            SE=LatLon(lat=south, lon=east),
        ),
    )
