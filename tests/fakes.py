"""Test doubles for external services"""

import time
from types import SimpleNamespace
from typing import Optional

from services.certificates import DeliveryError
from services.payments import CertificateMetadata, CheckoutSession, PaymentError
from services.sampler import CheckResult, CheckUnavailableError


class FakeGeocoder:
    """Stands in for geopy's Nominatim: returns canned raw payloads or raises"""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.times = []
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True

    async def reverse(self, query, **kwargs):
        self.calls.append((query, kwargs))
        self.times.append(time.monotonic())
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if response is None:
            return None
        return SimpleNamespace(raw=response)


class ScriptedChecker:
    """Returns queued CheckResults (or raises queued exceptions) in order"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def check(self, lat: float, lon: float) -> CheckResult:
        self.calls.append((lat, lon))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeRedis:
    """In-memory subset of redis.asyncio.Redis used by the spot store"""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def get(self, key):
        return self.data.get(key)

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


class BrokenRedis:
    async def setex(self, *args):
        raise ConnectionError("redis down")

    async def get(self, *args):
        raise ConnectionError("redis down")

    async def delete(self, *args):
        raise ConnectionError("redis down")


class FakeGateway:
    """Payment gateway double keeping payment-intent metadata in memory"""

    def __init__(self, payment_status: str = "paid", metadata: Optional[dict] = None,
                 payment_intent_id: Optional[str] = "pi_123"):
        self.payment_status = payment_status
        self.metadata = metadata if metadata is not None else {
            "country": "New Zealand",
            "mode": "publicish",
            "seed": "NZ-publicish-b6cdbe5d",
            "lat": "-43.882785",
            "lon": "174.596411",
            "tile_m": "1",
            "email": "buyer@example.com",
            "email_consent": "yes",
        }
        self.payment_intent_id = payment_intent_id
        self.pi_metadata = {}
        self.fail_update = False
        self.created = []
        self.updates = []

    async def create_checkout_session(self, metadata: CertificateMetadata) -> str:
        self.created.append(metadata)
        return "https://checkout.stripe.com/c/pay/cs_test_abc"

    async def retrieve_session(self, session_id, expand_payment_intent=False):
        return CheckoutSession(
            id=session_id,
            payment_status=self.payment_status,
            created=1700000000,
            amount_total=500,
            currency="nzd",
            metadata=CertificateMetadata.from_metadata(self.metadata),
            raw_metadata=dict(self.metadata),
            payment_intent_id=self.payment_intent_id,
            payment_intent_metadata=dict(self.pi_metadata),
        )

    async def update_payment_intent_metadata(self, payment_intent_id, metadata):
        self.updates.append((payment_intent_id, metadata))
        if self.fail_update:
            raise PaymentError("stripe unavailable")
        self.pi_metadata = dict(metadata)


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.user = "owner@example.com"
        self.sent = []
        self.fail = fail

    async def send(self, to, subject, html=None, text=None, attachments=()):
        if self.fail:
            raise DeliveryError("smtp down")
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text,
                          "attachments": list(attachments)})


def unavailable(message: str = "timeout") -> CheckUnavailableError:
    return CheckUnavailableError(message)
