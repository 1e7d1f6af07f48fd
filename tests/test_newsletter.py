"""Tests for mailing list signup"""

import pytest

from services.certificates import subscribe
from services.certificates.newsletter import SUBSCRIBED_MESSAGE


@pytest.mark.asyncio
async def test_subscribe_notifies_owner_and_confirms(fake_mailer):
    message = await subscribe("reader@example.com", fake_mailer)

    assert message == SUBSCRIBED_MESSAGE
    assert [mail["to"] for mail in fake_mailer.sent] == ["owner@example.com", "reader@example.com"]
    assert "reader@example.com" in fake_mailer.sent[0]["text"]
    assert fake_mailer.sent[1]["html"]


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["", "reader", "reader@example", "two words@example.com"])
async def test_subscribe_rejects_invalid_email(fake_mailer, email):
    with pytest.raises(ValueError, match="Invalid email"):
        await subscribe(email, fake_mailer)
    assert fake_mailer.sent == []


@pytest.mark.asyncio
async def test_disposable_address_looks_subscribed_but_sends_nothing(fake_mailer):
    message = await subscribe("bot@Mailinator.com", fake_mailer)

    assert message == SUBSCRIBED_MESSAGE
    assert fake_mailer.sent == []
