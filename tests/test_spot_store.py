"""Tests for saved-spot storage"""

import pytest

from services import spot_store
from services.sampler import sample_until_accepted

from tests.fakes import BrokenRedis


async def _spot():
    return await sample_until_accepted("NZ", "anywhere", tile_meters=3, user_seed="store")


@pytest.mark.asyncio
async def test_save_then_load_round_trip(fake_redis):
    spot = await _spot()

    assert await spot_store.save_spot("token-123", spot)
    assert "rsc_spot_v3:token-123" in fake_redis.data
    assert fake_redis.ttls["rsc_spot_v3:token-123"] == 7 * 24 * 3600
    assert await spot_store.load_spot("token-123") == spot


@pytest.mark.asyncio
async def test_missing_spot_is_none(fake_redis):
    assert await spot_store.load_spot("nobody-here") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", ["{not json", "null", '{"lat": 1}', "[]"])
async def test_corrupt_spot_is_none(fake_redis, payload):
    fake_redis.data[spot_store.spot_key("token-123")] = payload
    assert await spot_store.load_spot("token-123") is None


@pytest.mark.asyncio
async def test_clear_spot(fake_redis):
    await spot_store.save_spot("token-123", await _spot())
    await spot_store.clear_spot("token-123")
    assert await spot_store.load_spot("token-123") is None


@pytest.mark.asyncio
async def test_redis_down_degrades_quietly(monkeypatch):
    async def _get_redis():
        return BrokenRedis()

    monkeypatch.setattr(spot_store, "get_redis", _get_redis)

    assert await spot_store.save_spot("token-123", await _spot()) is False
    assert await spot_store.load_spot("token-123") is None
    await spot_store.clear_spot("token-123")
