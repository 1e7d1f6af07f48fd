"""Shared fixtures"""

import pytest

from api.dependencies import limiter
from tests.fakes import FakeGateway, FakeMailer, FakeRedis


@pytest.fixture(autouse=True)
def no_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def fake_redis(monkeypatch):
    redis = FakeRedis()

    async def _get_redis():
        return redis

    monkeypatch.setattr("services.spot_store.get_redis", _get_redis)
    return redis


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def fake_mailer():
    return FakeMailer()
