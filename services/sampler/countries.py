"""Country bounding boxes used to draw random spots"""

from pydantic import BaseModel, Field, model_validator

DEFAULT_COUNTRY_CODE = "NZ"


class CountryBounds(BaseModel):
    """Display name plus the lat/lon rectangle a spot is drawn from"""

    name: str
    lat_min: float = Field(..., ge=-90, le=90)
    lat_max: float = Field(..., ge=-90, le=90)
    lon_min: float = Field(..., ge=-180, le=180)
    lon_max: float = Field(..., ge=-180, le=180)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_ordering(self) -> "CountryBounds":
        if self.lat_min >= self.lat_max:
            raise ValueError(f"lat_min must be below lat_max for {self.name}")
        if self.lon_min >= self.lon_max:
            raise ValueError(f"lon_min must be below lon_max for {self.name}")
        return self


COUNTRY_BOUNDS: dict[str, CountryBounds] = {
    "NZ": CountryBounds(name="New Zealand", lat_min=-47.5, lat_max=-34.0, lon_min=166.0, lon_max=179.8),
    "AU": CountryBounds(name="Australia", lat_min=-43.8, lat_max=-10.0, lon_min=112.0, lon_max=154.0),
    "US": CountryBounds(name="USA (lower 48)", lat_min=24.5, lat_max=49.5, lon_min=-125.0, lon_max=-66.5),
    "GB": CountryBounds(name="United Kingdom", lat_min=49.8, lat_max=59.0, lon_min=-8.6, lon_max=1.8),
    "JP": CountryBounds(name="Japan", lat_min=30.0, lat_max=45.8, lon_min=129.0, lon_max=145.8),
}


def get_bounds(country_code: str) -> CountryBounds:
    """Bounds for a country code, falling back to the default country"""
    return COUNTRY_BOUNDS.get(country_code) or COUNTRY_BOUNDS[DEFAULT_COUNTRY_CODE]
