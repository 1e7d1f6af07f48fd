"""
Heuristic "plausibly accessible land" checks for strict mode.

Two independently callable checks:
- place-type: Nominatim reverse lookup, rejects water features and spots
  without country attribution or any road/place signal
- road proximity: Overpass lookup for any highway-tagged element nearby

``LandChecks.check`` composes them into a CheckResult.
"""

import logging
from typing import Optional, Protocol

from core.config import settings
from services.geocoding import GeocodingService, GeocodingUnavailableError, ReverseGeocodeResult
from services.overpass_client import OverpassClient, OverpassUnavailableError

from .errors import CheckUnavailableError
from .models import CheckResult, ConfidenceLevel, PlaceCheck, RoadCheck

logger = logging.getLogger(__name__)


class SpotChecker(Protocol):
    async def check(self, lat: float, lon: float) -> CheckResult: ...


def evaluate_place(
    result: Optional[ReverseGeocodeResult],
    water_keywords: tuple[str, ...] = settings.WATER_KEYWORDS,
    min_display_name_length: int = settings.MIN_DISPLAY_NAME_LENGTH,
) -> PlaceCheck:
    """Judge a reverse-geocoding answer (None means no feature at the point)"""
    if result is None:
        return PlaceCheck(
            ok=False,
            place="Unknown",
            signals={"has_roadish": False, "has_placeish": False, "has_country": False},
        )

    place_type = result.type
    category = result.category
    display = result.display_name

    looks_water = (
        any(word in place_type for word in water_keywords)
        or any(word in category for word in water_keywords)
        or (category == "natural" and place_type in ("water", "coastline"))
    )

    has_roadish = result.address.has_roadish
    has_placeish = result.address.has_placeish
    has_country = result.address.has_country

    ok = (
        not looks_water
        and has_country
        and (has_roadish or has_placeish or len(display) > min_display_name_length)
    )

    return PlaceCheck(
        ok=ok,
        looks_water=looks_water,
        place=display or "Unknown",
        type=place_type,
        category=category,
        signals={"has_roadish": has_roadish, "has_placeish": has_placeish, "has_country": has_country},
    )


class LandChecks:
    """
    Runs the land checks for one sampling run; owns its HTTP clients.

    Clients are opened on the first check, so a run that never checks
    (non-strict mode) never opens a connection.
    """

    def __init__(
        self,
        geocoding: Optional[GeocodingService] = None,
        overpass: Optional[OverpassClient] = None,
        road_check_enabled: Optional[bool] = None,
        road_radius_meters: Optional[int] = None,
        water_keywords: Optional[tuple[str, ...]] = None,
        min_display_name_length: Optional[int] = None,
    ):
        self.geocoding = geocoding
        self.overpass = overpass
        self._geocoding_open = False
        self.road_check_enabled = (
            settings.ROAD_CHECK_ENABLED if road_check_enabled is None else road_check_enabled
        )
        self.road_radius_meters = road_radius_meters or settings.ROAD_RADIUS_METERS
        self.water_keywords = water_keywords or settings.WATER_KEYWORDS
        self.min_display_name_length = (
            settings.MIN_DISPLAY_NAME_LENGTH if min_display_name_length is None else min_display_name_length
        )

    async def __aenter__(self) -> "LandChecks":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if self._geocoding_open:
                await self.geocoding.close()
                self._geocoding_open = False
        finally:
            if self.overpass is not None:
                await self.overpass.close()

    async def _geocoding_service(self) -> GeocodingService:
        if self.geocoding is None:
            self.geocoding = GeocodingService()
        if not self._geocoding_open:
            await self.geocoding.__aenter__()
            self._geocoding_open = True
        return self.geocoding

    def _overpass_client(self) -> OverpassClient:
        if self.overpass is None:
            self.overpass = OverpassClient()
        return self.overpass

    async def check_place(self, lat: float, lon: float) -> PlaceCheck:
        """Place-type check. Raises CheckUnavailableError if the lookup fails."""
        geocoding = await self._geocoding_service()
        try:
            result = await geocoding.reverse_geocode(lat, lon)
        except GeocodingUnavailableError as e:
            raise CheckUnavailableError(f"Nominatim reverse failed: {e}") from e
        return evaluate_place(result, self.water_keywords, self.min_display_name_length)

    async def check_roads(self, lat: float, lon: float) -> RoadCheck:
        """Road-proximity check. Raises CheckUnavailableError if Overpass fails."""
        try:
            count = await self._overpass_client().count_highways_nearby(lat, lon, self.road_radius_meters)
        except OverpassUnavailableError as e:
            raise CheckUnavailableError(f"Overpass failed: {e}") from e
        return RoadCheck(ok=count > 0, count=count, radius_meters=self.road_radius_meters)

    async def check(self, lat: float, lon: float) -> CheckResult:
        """
        Place check first, then (when enabled) the road check.

        Only a failed place lookup raises; a failed road lookup after a passing
        place check is accepted at ``fallback`` confidence.
        """
        place = await self.check_place(lat, lon)
        if not place.ok:
            return CheckResult(
                accepted=False, confidence=ConfidenceLevel.NONE, place=place.place, place_check=place
            )

        if not self.road_check_enabled:
            return CheckResult(
                accepted=True, confidence=ConfidenceLevel.WEAK, place=place.place, place_check=place
            )

        try:
            roads = await self.check_roads(lat, lon)
        except CheckUnavailableError as e:
            logger.info(f"Road check unavailable at {lat},{lon}, falling back to place check: {e}")
            return CheckResult(
                accepted=True,
                confidence=ConfidenceLevel.FALLBACK,
                place=place.place,
                place_check=place,
                road_check=RoadCheck(ok=None, radius_meters=self.road_radius_meters, error=str(e)),
            )

        if not roads.ok:
            return CheckResult(
                accepted=False,
                confidence=ConfidenceLevel.WEAK,
                place=place.place,
                place_check=place,
                road_check=roads,
            )

        return CheckResult(
            accepted=True,
            confidence=ConfidenceLevel.STRONG,
            place=place.place,
            place_check=place,
            road_check=roads,
        )
