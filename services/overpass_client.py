"""
Client for the Overpass API.
Answers "is there any mapped road or path near this point" for the land checks.
"""

import logging
from typing import Optional

import httpx

from core.config import settings

logger = logging.getLogger(__name__)


class OverpassUnavailableError(Exception):
    """Raised when the Overpass interpreter could not answer."""


def build_highway_query(lat: float, lon: float, radius_meters: int, timeout_seconds: int = 12) -> str:
    """Overpass QL for highway-tagged nodes, ways and relations around a point (one hit is enough)"""
    around = f"around:{radius_meters},{lat},{lon}"
    return "\n".join([
        f"[out:json][timeout:{timeout_seconds}];",
        "(",
        f'  way["highway"]({around});',
        f'  node["highway"]({around});',
        f'  relation["highway"]({around});',
        ");",
        "out tags 1;",
    ])


class OverpassClient:
    """Client for an Overpass interpreter endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Overpass client.

        Args:
            base_url: Interpreter URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url or settings.OVERPASS_URL
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def __aenter__(self) -> "OverpassClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def count_highways_nearby(self, lat: float, lon: float, radius_meters: int) -> int:
        """
        Count highway-tagged elements within a radius of a point.

        Returns:
            Number of elements returned (0 or 1, the query asks for one)

        Raises:
            OverpassUnavailableError: transport failure, non-2xx status or a non-JSON body
        """
        query = build_highway_query(lat, lon, radius_meters, timeout_seconds=int(self.timeout))
        try:
            response = await self.client.post(
                self.base_url,
                content=query.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=UTF-8"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Overpass request failed: {e}")
            raise OverpassUnavailableError(str(e)) from e

        if not response.is_success:
            logger.warning(f"Overpass returned {response.status_code}")
            raise OverpassUnavailableError(f"Overpass failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise OverpassUnavailableError("Overpass returned a non-JSON body") from e

        elements = data.get("elements") if isinstance(data, dict) else None
        return len(elements) if isinstance(elements, list) else 0
