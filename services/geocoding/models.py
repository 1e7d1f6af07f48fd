"""Pydantic models for geocoding"""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

ROAD_KEYS = ("road", "pedestrian", "footway", "cycleway")
PLACE_KEYS = ("city", "town", "village", "hamlet", "suburb", "neighbourhood")


class Coordinates(BaseModel):
    """Geographic coordinates"""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @field_validator("latitude", "longitude")
    @classmethod
    def round_precision(cls, v: float) -> float:
        """Round to 6 decimal places (~11cm precision)"""
        return round(v, 6)


class Address(BaseModel):
    """Address parts reported by Nominatim (only the ones the land checks use)"""

    road: str | None = None
    pedestrian: str | None = None
    footway: str | None = None
    cycleway: str | None = None
    city: str | None = None
    town: str | None = None
    village: str | None = None
    hamlet: str | None = None
    suburb: str | None = None
    neighbourhood: str | None = None
    country: str | None = None
    country_code: str | None = None

    @property
    def has_roadish(self) -> bool:
        return any(getattr(self, key) for key in ROAD_KEYS)

    @property
    def has_placeish(self) -> bool:
        return any(getattr(self, key) for key in PLACE_KEYS)

    @property
    def has_country(self) -> bool:
        return bool(self.country)


class ReverseGeocodeResult(BaseModel):
    """Reverse geocoding result (coordinates → feature)"""

    coordinates: Coordinates
    display_name: str = ""
    type: str = ""
    category: str = ""
    address: Address = Field(default_factory=Address)
    provider: Literal["nominatim"] = "nominatim"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
