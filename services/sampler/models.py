"""Pydantic models for spot sampling"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

BRAND = "Random Spot Certificate"


class SpotMode(str, Enum):
    PUBLICISH = "publicish"
    ANYWHERE = "anywhere"


STRICT_MODE = SpotMode.PUBLICISH.value

MODE_LABELS = {
    SpotMode.PUBLICISH.value: "Publicish (check rules)",
    SpotMode.ANYWHERE.value: "Anywhere",
}


def mode_label(mode: Optional[str]) -> str:
    """Human label for a mode string ("—" when empty)"""
    if not mode:
        return "—"
    return MODE_LABELS.get(mode, mode)


def is_strict(mode: str) -> bool:
    return mode == STRICT_MODE


class ConfidenceLevel(str, Enum):
    """How much check evidence supports a spot"""
    NONE = "none"
    WEAK = "weak"
    STRONG = "strong"
    FALLBACK = "fallback"
    EXHAUSTED = "exhausted"


class SampleRequest(BaseModel):
    """Inputs of one deterministic derivation"""

    country_code: str
    mode: str
    user_seed: str
    attempt: int = Field(1, ge=1)

    model_config = {"frozen": True}


class SampledPoint(BaseModel):
    """A derived point (pure function of its SampleRequest)"""

    brand: str = BRAND
    country: str
    country_code: str
    mode: str
    lat: float
    lon: float
    seed: str = Field(..., description="<code>-<mode>-<hex seed> label")
    attempt: int


class LatLon(BaseModel):
    lat: float
    lon: float


class TileBounds(BaseModel):
    north: float
    south: float
    east: float
    west: float


class TileCorners(BaseModel):
    NW: LatLon
    NE: LatLon
    SW: LatLon
    SE: LatLon


class Tile(BaseModel):
    """Square ground area centred on a spot"""

    size_meters: float
    area_m2: float
    center: LatLon
    bounds: TileBounds
    corners: TileCorners


class PlaceCheck(BaseModel):
    """Outcome of the reverse-geocoding place-type check"""

    ok: bool
    looks_water: bool = False
    place: str = "Unknown"
    type: str = ""
    category: str = ""
    signals: dict[str, bool] = Field(default_factory=dict)


class RoadCheck(BaseModel):
    """Outcome of the road-proximity check (ok is None when the call failed)"""

    ok: Optional[bool]
    count: int = 0
    radius_meters: int
    error: Optional[str] = None


class CheckResult(BaseModel):
    """Acceptance verdict for a spot plus the diagnostics behind it"""

    accepted: bool
    confidence: ConfidenceLevel
    place: str = "—"
    place_check: Optional[PlaceCheck] = None
    road_check: Optional[RoadCheck] = None
    error: Optional[str] = None
    note: Optional[str] = None


class Spot(SampledPoint):
    """Sampled point with its tile and check verdict"""

    tile: Tile
    check: CheckResult

    def summary(self) -> dict[str, Any]:
        return {
            "country": self.country,
            "mode": mode_label(self.mode),
            "center": f"{self.lat:.6f}, {self.lon:.6f}",
            "tile": f"{self.tile.size_meters:g} m × {self.tile.size_meters:g} m ({self.tile.area_m2:.2f} m²)",
            "seed": self.seed,
            "nearby": self.check.place,
            "checks": f"{'Pass' if self.check.accepted else 'Uncertain'} ({self.check.confidence.value})",
        }
