"""Geocoding service package"""

from .models import Address, Coordinates, ReverseGeocodeResult
from .service import GeocodingService, GeocodingUnavailableError

__all__ = [
    "Address",
    "Coordinates",
    "ReverseGeocodeResult",
    "GeocodingService",
    "GeocodingUnavailableError",
]
