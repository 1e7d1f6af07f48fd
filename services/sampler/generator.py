"""Deterministic spot derivation"""

from .countries import get_bounds
from .models import SampledPoint, SampleRequest
from .rng import Mulberry32, hash_str_to_seed


def _round6(value: float) -> float:
    return float(f"{value:.6f}")


def seed_input(request: SampleRequest) -> str:
    return f"{request.country_code}|{request.mode}|{request.user_seed}|{request.attempt}"


def derive(request: SampleRequest) -> SampledPoint:
    """
    Derive the point for a request.

    The same request always yields the same point. Unknown country codes
    draw from the default country's box but keep their own code in the
    hash input and seed label.
    """
    bounds = get_bounds(request.country_code)
    seed32 = hash_str_to_seed(seed_input(request))
    rng = Mulberry32(seed32)

    lat = bounds.lat_min + rng() * (bounds.lat_max - bounds.lat_min)
    lon = bounds.lon_min + rng() * (bounds.lon_max - bounds.lon_min)

    return SampledPoint(
        country=bounds.name,
        country_code=request.country_code,
        mode=request.mode,
        lat=_round6(lat),
        lon=_round6(lon),
        seed=f"{request.country_code}-{request.mode}-{seed32:x}",
        attempt=request.attempt,
    )


def derive_point(country_code: str, mode: str, user_seed: str, attempt: int = 1) -> SampledPoint:
    return derive(SampleRequest(country_code=country_code, mode=mode, user_seed=user_seed, attempt=attempt))
