"""
Roll spots until one passes the land checks.

Strict mode walks a bounded state machine::

    SAMPLING -> CHECKING -> ACCEPTED
                         -> SAMPLING   (rejected, attempts remain)
                         -> EXHAUSTED  (rejected, no attempts left)

Every attempt derives a fresh deterministic candidate from the same user
seed, so a run can be replayed from (country, mode, seed). Nothing here
raises to the caller: check outages and exhaustion become confidence
annotations on the returned spot.
"""

import logging
import uuid
from enum import Enum
from typing import Optional

from core.config import settings

from .checks import LandChecks, SpotChecker
from .errors import CheckUnavailableError
from .generator import derive_point
from .models import CheckResult, ConfidenceLevel, SampledPoint, Spot, is_strict
from .tiles import make_tile

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 30
EXHAUSTED_NOTE = "Could not confidently avoid water/remote picks."
LOOKUP_UNAVAILABLE = "Lookup unavailable"


class SamplerState(str, Enum):
    SAMPLING = "sampling"
    CHECKING = "checking"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


def default_max_attempts(mode: str) -> int:
    return settings.STRICT_MAX_ATTEMPTS if is_strict(mode) else settings.LOOSE_MAX_ATTEMPTS


def _to_spot(point: SampledPoint, tile_meters: float, check: CheckResult) -> Spot:
    return Spot(**point.model_dump(), tile=make_tile(point.lat, point.lon, tile_meters), check=check)


async def sample_until_accepted(
    country_code: str,
    mode: str,
    tile_meters: float = 1,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    user_seed: Optional[str] = None,
    checks: Optional[SpotChecker] = None,
    max_consecutive_errors: Optional[int] = None,
) -> Spot:
    """
    Draw a spot for the country, checking it in strict mode.

    Args:
        country_code: Key into the country table (unknown codes use the default box)
        mode: "publicish" runs the land checks, anything else accepts the first draw
        tile_meters: Side length of the tile around the spot
        max_attempts: Upper bound on derivations in strict mode (clamped to >= 1)
        user_seed: Seed string for the run (random UUID when omitted)
        checks: Checker to use; by default a LandChecks is opened for the run
        max_consecutive_errors: Check outages tolerated before accepting unchecked

    Returns:
        A Spot; check.accepted is False only when attempts ran out
    """
    user_seed = user_seed or str(uuid.uuid4())

    if not is_strict(mode):
        point = derive_point(country_code, mode, user_seed, 1)
        return _to_spot(point, tile_meters, CheckResult(accepted=True, confidence=ConfidenceLevel.NONE))

    if checks is not None:
        return await _run_strict(
            checks, country_code, mode, tile_meters, max_attempts, user_seed, max_consecutive_errors
        )

    async with LandChecks() as land_checks:
        return await _run_strict(
            land_checks, country_code, mode, tile_meters, max_attempts, user_seed, max_consecutive_errors
        )


async def _run_strict(
    checks: SpotChecker,
    country_code: str,
    mode: str,
    tile_meters: float,
    max_attempts: int,
    user_seed: str,
    max_consecutive_errors: Optional[int],
) -> Spot:
    max_attempts = max(1, int(max_attempts))
    error_limit = max_consecutive_errors or settings.MAX_CONSECUTIVE_CHECK_ERRORS

    state = SamplerState.SAMPLING
    attempt = 0
    candidate: Optional[SampledPoint] = None
    check: Optional[CheckResult] = None
    consecutive_errors = 0
    any_check_answered = False

    while state not in (SamplerState.ACCEPTED, SamplerState.EXHAUSTED):
        if state is SamplerState.SAMPLING:
            attempt += 1
            candidate = derive_point(country_code, mode, user_seed, attempt)
            state = SamplerState.CHECKING
            continue

        try:
            check = await checks.check(candidate.lat, candidate.lon)
            any_check_answered = True
            consecutive_errors = 0
        except CheckUnavailableError as e:
            consecutive_errors += 1
            logger.warning(f"Land check unavailable on attempt {attempt}/{max_attempts}: {e}")
            check = CheckResult(
                accepted=False, confidence=ConfidenceLevel.NONE, place=LOOKUP_UNAVAILABLE, error=str(e)
            )
            if not any_check_answered and consecutive_errors >= error_limit:
                check = check.model_copy(
                    update={"accepted": True, "confidence": ConfidenceLevel.FALLBACK}
                )

        if check.accepted:
            state = SamplerState.ACCEPTED
        elif attempt >= max_attempts:
            state = SamplerState.EXHAUSTED
        else:
            state = SamplerState.SAMPLING

    if state is SamplerState.EXHAUSTED:
        logger.info(f"No acceptable spot in {country_code} after {attempt} attempts")
        check = check.model_copy(
            update={"accepted": False, "confidence": ConfidenceLevel.EXHAUSTED, "note": EXHAUSTED_NOTE}
        )
    else:
        logger.info(f"Accepted spot in {country_code} on attempt {attempt} ({check.confidence.value})")

    return _to_spot(candidate, tile_meters, check)
