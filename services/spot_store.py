"""Saved-spot storage between rolling a spot and paying for it

A spot is kept as JSON under one well-known key per client token. Reads
never raise: a missing key, a corrupt payload or Redis being down all mean
"no spot saved".
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from core.config import settings
from services.redis import get_redis
from services.sampler import Spot

logger = logging.getLogger(__name__)

STORE_KEY = "rsc_spot_v3"


def spot_key(token: str) -> str:
    return f"{STORE_KEY}:{token}"


async def save_spot(token: str, spot: Spot, ttl: int | None = None) -> bool:
    """Store a spot for a client token. Returns False if Redis is unavailable."""
    try:
        redis = await get_redis()
        await redis.setex(spot_key(token), ttl or settings.SPOT_TTL_SECONDS, spot.model_dump_json())
        return True
    except Exception as e:
        logger.error(f"Failed to save spot for {token}: {e}")
        return False


async def load_spot(token: str) -> Optional[Spot]:
    """Load the saved spot, or None when nothing usable is stored"""
    try:
        redis = await get_redis()
        value = await redis.get(spot_key(token))
    except Exception as e:
        logger.warning(f"Saved spot lookup failed for {token}: {e}")
        return None

    if not value:
        return None

    try:
        return Spot.model_validate(json.loads(value))
    except (ValueError, ValidationError) as e:
        logger.warning(f"Discarding corrupt saved spot for {token}: {e}")
        return None


async def clear_spot(token: str) -> None:
    """Delete a saved spot"""
    try:
        redis = await get_redis()
        await redis.delete(spot_key(token))
    except Exception as e:
        logger.warning(f"Failed to clear saved spot for {token}: {e}")
