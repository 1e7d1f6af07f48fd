"""Tests for checkout metadata validation and the Stripe gateway wrapper"""

from types import SimpleNamespace

import pytest
import stripe

from services.payments import (
    CertificateMetadata,
    CheckoutCreateRequest,
    PaymentConfigurationError,
    PaymentError,
    StripeGateway,
    as_str,
    certificate_filename,
    is_session_id,
    looks_like_email,
)

VALID_BODY = {
    "country": "New Zealand",
    "mode": "publicish",
    "seed": "NZ-publicish-b6cdbe5d",
    "lat": "-43.882785",
    "lon": "174.596411",
    "tile_m": "1",
}


def test_as_str_trims_and_caps():
    assert as_str("  hi  ") == "hi"
    assert as_str("x" * 300, 10) == "x" * 10
    assert as_str(42) == ""
    assert as_str(None) == ""


def test_looks_like_email():
    assert looks_like_email("buyer@example.com")
    assert not looks_like_email("buyer@example")
    assert not looks_like_email("buyer example@x.com")
    assert not looks_like_email("")


def test_certificate_filename():
    assert certificate_filename("New Zealand", "NZ-publicish-b6cdbe5d") == "certificate-New_Zealand-NZ-publici.pdf"
    assert certificate_filename("", "") == "certificate-XX-seed.pdf"


@pytest.mark.parametrize("country,expected", [
    ("日本", "certificate-XX-NZ-publici.pdf"),
    ('Côte "d\'Ivoire"', "certificate-C_te_d_Ivoire-NZ-publici.pdf"),
    ("../../etc", "certificate-etc-NZ-publici.pdf"),
])
def test_certificate_filename_is_header_safe(country, expected):
    name = certificate_filename(country, "NZ-publicish-b6cdbe5d")
    assert name == expected
    name.encode("ascii")


def test_session_id_prefix():
    assert is_session_id("cs_test_123")
    assert not is_session_id("pi_123")
    assert not is_session_id("")


def test_create_request_builds_fixed_metadata():
    meta = CheckoutCreateRequest(**VALID_BODY).to_metadata()

    assert meta.to_metadata() == {
        "country": "New Zealand",
        "mode": "publicish",
        "seed": "NZ-publicish-b6cdbe5d",
        "lat": "-43.882785",
        "lon": "174.596411",
        "tile_m": "1",
        "email": "",
        "email_consent": "no",
    }


def test_create_request_defaults_and_formatting():
    meta = CheckoutCreateRequest(lat="-41.2", lon="174.7", tile_m="2.50").to_metadata()

    assert meta.country == "NZ"
    assert meta.mode == "publicish"
    assert meta.lat == "-41.200000"
    assert meta.lon == "174.700000"
    assert meta.tile_m == "2.5"


@pytest.mark.parametrize("lat,lon", [("", "1"), ("abc", "1"), ("91", "0"), ("0", "-180.5"), ("nan", "0"), (1, 2)])
def test_create_request_rejects_bad_coordinates(lat, lon):
    with pytest.raises(ValueError, match="Invalid coordinates"):
        CheckoutCreateRequest(**{**VALID_BODY, "lat": lat, "lon": lon}).to_metadata()


@pytest.mark.parametrize("tile_m", ["0", "-1", "1000.5", "big", "inf"])
def test_create_request_rejects_bad_tile(tile_m):
    with pytest.raises(ValueError, match="Invalid tile_m"):
        CheckoutCreateRequest(**{**VALID_BODY, "tile_m": tile_m}).to_metadata()


def test_consent_requires_email():
    with pytest.raises(ValueError, match="Email consent"):
        CheckoutCreateRequest(**VALID_BODY, email_consent="yes", email="nope").to_metadata()


def test_email_dropped_without_consent():
    meta = CheckoutCreateRequest(**VALID_BODY, email="buyer@example.com", email_consent="maybe").to_metadata()
    assert meta.email == ""
    assert meta.email_consent == "no"


def test_email_kept_with_consent():
    meta = CheckoutCreateRequest(**VALID_BODY, email="buyer@example.com", email_consent="YES").to_metadata()
    assert meta.email == "buyer@example.com"
    assert meta.consented


def test_metadata_read_back_ignores_unknown_keys_and_fills_defaults():
    meta = CertificateMetadata.from_metadata({"country": "Japan", "lat": "35.0", "extra": "x"})

    assert meta.country == "Japan"
    assert meta.lat == "35.0"
    assert meta.tile_m == "1"
    assert meta.email_consent == "no"
    assert "extra" not in meta.to_metadata()


def test_metadata_tile_meters_falls_back_to_one():
    assert CertificateMetadata(tile_m="abc").tile_meters == 1.0
    assert CertificateMetadata(tile_m="").tile_meters == 1.0
    assert CertificateMetadata(tile_m="10").tile_meters == 10.0


# --- StripeGateway ------------------------------------------------------------

def test_gateway_requires_secret_key(monkeypatch):
    monkeypatch.setattr("services.payments.gateway.settings.STRIPE_SECRET_KEY", "")
    with pytest.raises(PaymentConfigurationError):
        StripeGateway(api_key="")


@pytest.mark.asyncio
async def test_gateway_create_requires_price_and_site():
    gateway = StripeGateway(api_key="sk_test", price_id="", site_url="")
    gateway.price_id = ""
    gateway.site_url = ""
    with pytest.raises(PaymentConfigurationError):
        await gateway.create_checkout_session(CertificateMetadata())


@pytest.mark.asyncio
async def test_gateway_create_passes_session_params(monkeypatch):
    captured = {}

    async def fake_create(**params):
        captured.update(params)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")

    monkeypatch.setattr(stripe.checkout.Session, "create_async", fake_create)
    gateway = StripeGateway(api_key="sk_test", price_id="price_1", site_url="https://spot.example/")
    meta = CheckoutCreateRequest(**VALID_BODY, email="buyer@example.com", email_consent="yes").to_metadata()

    url = await gateway.create_checkout_session(meta)

    assert url.endswith("cs_test_1")
    assert captured["mode"] == "payment"
    assert captured["line_items"] == [{"price": "price_1", "quantity": 1}]
    assert captured["success_url"] == "https://spot.example/success.html?session_id={CHECKOUT_SESSION_ID}"
    assert captured["cancel_url"] == "https://spot.example/cancel.html"
    assert captured["customer_email"] == "buyer@example.com"
    assert captured["metadata"]["email_consent"] == "yes"
    assert captured["api_key"] == "sk_test"


@pytest.mark.asyncio
async def test_gateway_create_omits_email_without_consent(monkeypatch):
    captured = {}

    async def fake_create(**params):
        captured.update(params)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")

    monkeypatch.setattr(stripe.checkout.Session, "create_async", fake_create)
    gateway = StripeGateway(api_key="sk_test", price_id="price_1", site_url="https://spot.example")

    await gateway.create_checkout_session(CheckoutCreateRequest(**VALID_BODY).to_metadata())

    assert "customer_email" not in captured


@pytest.mark.asyncio
async def test_gateway_retrieve_maps_session_and_payment_intent(monkeypatch):
    captured = {}

    async def fake_retrieve(session_id, **params):
        captured["id"] = session_id
        captured.update(params)
        return SimpleNamespace(
            id=session_id,
            url=None,
            payment_status="paid",
            created=1700000000,
            amount_total=500,
            currency="nzd",
            metadata={**VALID_BODY, "email_consent": "no"},
            payment_intent=SimpleNamespace(id="pi_9", metadata={"certificate_emailed": "yes"}),
        )

    monkeypatch.setattr(stripe.checkout.Session, "retrieve_async", fake_retrieve)
    gateway = StripeGateway(api_key="sk_test", price_id="price_1", site_url="https://spot.example")

    session = await gateway.retrieve_session("cs_test_1", expand_payment_intent=True)

    assert captured["expand"] == ["payment_intent"]
    assert session.paid
    assert session.raw_metadata["lat"] == "-43.882785"
    assert session.metadata.seed == "NZ-publicish-b6cdbe5d"
    assert session.payment_intent_id == "pi_9"
    assert session.payment_intent_metadata == {"certificate_emailed": "yes"}


@pytest.mark.asyncio
async def test_gateway_wraps_stripe_errors(monkeypatch):
    async def failing(*args, **kwargs):
        raise stripe.InvalidRequestError("No such checkout.session", param="id")

    monkeypatch.setattr(stripe.checkout.Session, "retrieve_async", failing)
    gateway = StripeGateway(api_key="sk_test", price_id="price_1", site_url="https://spot.example")

    with pytest.raises(PaymentError):
        await gateway.retrieve_session("cs_missing")
