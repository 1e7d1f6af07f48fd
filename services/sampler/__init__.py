"""Spot sampling package

Deterministic point derivation, tile geometry and the land-check loop.

Usage:
    from services.sampler import derive_point, make_tile, sample_until_accepted
"""

from .countries import COUNTRY_BOUNDS, DEFAULT_COUNTRY_CODE, CountryBounds, get_bounds
from .errors import CheckUnavailableError
from .generator import derive, derive_point
from .models import (
    BRAND,
    CheckResult,
    ConfidenceLevel,
    PlaceCheck,
    RoadCheck,
    SampledPoint,
    SampleRequest,
    Spot,
    SpotMode,
    Tile,
    is_strict,
    mode_label,
)
from .checks import LandChecks, evaluate_place
from .orchestrator import SamplerState, default_max_attempts, sample_until_accepted
from .tiles import make_tile

__all__ = [
    "BRAND",
    "COUNTRY_BOUNDS",
    "DEFAULT_COUNTRY_CODE",
    "CountryBounds",
    "get_bounds",
    "CheckUnavailableError",
    "derive",
    "derive_point",
    "CheckResult",
    "ConfidenceLevel",
    "PlaceCheck",
    "RoadCheck",
    "SampledPoint",
    "SampleRequest",
    "Spot",
    "SpotMode",
    "Tile",
    "is_strict",
    "mode_label",
    "LandChecks",
    "evaluate_place",
    "SamplerState",
    "default_max_attempts",
    "sample_until_accepted",
    "make_tile",
]
