"""Reverse geocoding service using OpenStreetMap Nominatim"""

import asyncio
import logging

from geopy.adapters import AioHTTPAdapter
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.extra.rate_limiter import AsyncRateLimiter
from geopy.geocoders import Nominatim

from core.config import settings
from .models import Address, Coordinates, ReverseGeocodeResult

logger = logging.getLogger(__name__)

# Zoom 18 asks Nominatim for building/street level detail
DETAIL_ZOOM = 18

# One gate per (Nominatim host, event loop), shared by every service instance
_request_gates: dict[tuple[str, int], AsyncRateLimiter] = {}


async def _forward(call, *args, **kwargs):
    return await call(*args, **kwargs)


def get_request_gate(domain: str, min_delay_seconds: float) -> AsyncRateLimiter:
    """
    Process-wide request spacing for a Nominatim host.

    The public instance allows one request per second in total, so every
    sampling run in the process has to queue behind the same gate.
    Must be called from inside the running event loop.
    """
    key = (domain, id(asyncio.get_running_loop()))
    gate = _request_gates.get(key)
    if gate is None:
        gate = AsyncRateLimiter(
            _forward,
            min_delay_seconds=min_delay_seconds,
            max_retries=0,
            swallow_exceptions=False,
        )
        _request_gates[key] = gate
    return gate


class GeocodingUnavailableError(Exception):
    """Raised when the geocoding provider could not be reached or errored."""


class GeocodingService:
    """
    Async reverse geocoding against Nominatim.

    Use as an async context manager so the underlying aiohttp session is
    closed when the sampling run ends.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        domain: str | None = None,
        timeout: float | None = None,
        min_delay_seconds: float | None = None,
        geocoder=None,
    ):
        """
        Initialize geocoding service

        Args:
            user_agent: User agent required by the Nominatim usage policy
            domain: Nominatim host (public instance by default)
            timeout: Request timeout in seconds
            min_delay_seconds: Minimum spacing between requests (public instance allows 1/s)
            geocoder: Pre-built geopy-style geocoder (mainly for tests)
        """
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._owns_geocoder = geocoder is None
        self.domain = domain or settings.NOMINATIM_DOMAIN
        self.geocoder = geocoder or Nominatim(
            user_agent=user_agent or settings.NOMINATIM_USER_AGENT,
            domain=self.domain,
            timeout=self.timeout,
            adapter_factory=AioHTTPAdapter,
        )
        self.min_delay_seconds = (
            settings.NOMINATIM_MIN_DELAY_SECONDS if min_delay_seconds is None else min_delay_seconds
        )
        self.provider = "nominatim"

    async def _reverse(self, *args, **kwargs):
        if self.min_delay_seconds <= 0:
            return await self.geocoder.reverse(*args, **kwargs)
        gate = get_request_gate(self.domain, self.min_delay_seconds)
        return await gate(self.geocoder.reverse, *args, **kwargs)

    async def __aenter__(self) -> "GeocodingService":
        if self._owns_geocoder:
            await self.geocoder.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP session held by the geocoder."""
        if self._owns_geocoder:
            await self.geocoder.__aexit__(None, None, None)

    async def reverse_geocode(self, latitude: float, longitude: float) -> ReverseGeocodeResult | None:
        """
        Convert coordinates to the feature found there (reverse geocoding)

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            ReverseGeocodeResult, or None when Nominatim has no feature there
            (open ocean, for example)

        Raises:
            GeocodingUnavailableError: the lookup itself failed
        """
        coords = Coordinates(latitude=latitude, longitude=longitude)
        try:
            location = await self._reverse(
                (coords.latitude, coords.longitude),
                exactly_one=True,
                timeout=self.timeout,
                zoom=DETAIL_ZOOM,
                addressdetails=True,
            )
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.warning(f"Reverse geocoding error at {coords.latitude},{coords.longitude}: {e}")
            raise GeocodingUnavailableError(str(e)) from e

        if not location:
            return None

        return self._parse_nominatim(location.raw, coords)

    def _parse_nominatim(self, raw: dict, coords: Coordinates) -> ReverseGeocodeResult:
        """Parse a Nominatim json/jsonv2 payload into ReverseGeocodeResult"""
        if not isinstance(raw, dict):
            raise GeocodingUnavailableError("Malformed Nominatim response")

        address = raw.get("address") or {}
        known = {key: str(value) for key, value in address.items() if key in Address.model_fields and value}

        return ReverseGeocodeResult(
            coordinates=coords,
            display_name=str(raw.get("display_name") or "").strip(),
            type=str(raw.get("type") or "").lower(),
            # jsonv2 calls it "category", plain json calls it "class"
            category=str(raw.get("category") or raw.get("class") or "").lower(),
            address=Address(**known),
            provider=self.provider,
        )
