"""
Stripe Checkout gateway.
Creates hosted checkout sessions, reads them back, and keeps the
certificate delivery marker on the payment intent.
"""

import logging
from typing import Any, Optional

import stripe

from core.config import settings
from .models import CertificateMetadata, CheckoutSession

logger = logging.getLogger(__name__)

SESSION_ID_PREFIX = "cs_"


class PaymentError(Exception):
    """Raised when the payment provider rejects or fails a call."""


class PaymentConfigurationError(PaymentError):
    """Raised when required Stripe settings are missing."""


def is_session_id(session_id: str) -> bool:
    return bool(session_id) and session_id.startswith(SESSION_ID_PREFIX)


def _string_map(obj: Any) -> dict[str, str]:
    if not obj:
        return {}
    return {str(k): str(v) for k, v in dict(obj).items() if v is not None}


class StripeGateway:
    """Thin async wrapper over the Stripe Checkout API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        price_id: Optional[str] = None,
        site_url: Optional[str] = None,
        api_version: Optional[str] = None,
    ):
        self.api_key = api_key or settings.STRIPE_SECRET_KEY
        self.price_id = price_id or settings.STRIPE_PRICE_ID
        self.site_url = (site_url or settings.SITE_URL).rstrip("/")
        self.api_version = api_version or settings.STRIPE_API_VERSION
        if not self.api_key:
            raise PaymentConfigurationError("Missing STRIPE_SECRET_KEY")

    @property
    def _request_options(self) -> dict[str, str]:
        return {"api_key": self.api_key, "stripe_version": self.api_version}

    async def create_checkout_session(self, metadata: CertificateMetadata) -> str:
        """
        Create a one-item payment session carrying the certificate metadata.

        Returns:
            The hosted checkout URL
        """
        if not self.price_id or not self.site_url:
            raise PaymentConfigurationError("Missing STRIPE_PRICE_ID or SITE_URL")

        params: dict[str, Any] = {
            "mode": "payment",
            "line_items": [{"price": self.price_id, "quantity": 1}],
            "success_url": f"{self.site_url}/success.html?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.site_url}/cancel.html",
            "allow_promotion_codes": True,
            "payment_method_types": ["card"],
            "metadata": metadata.to_metadata(),
        }
        # Stripe sends its own receipt too when the buyer opted in
        if metadata.consented:
            params["customer_email"] = metadata.email

        try:
            session = await stripe.checkout.Session.create_async(**params, **self._request_options)
        except stripe.StripeError as e:
            logger.error(f"Failed to create checkout session: {e}")
            raise PaymentError(str(e)) from e

        logger.info(f"Created checkout session {session.id} for {metadata.country} ({metadata.seed})")
        return session.url

    async def retrieve_session(self, session_id: str, expand_payment_intent: bool = False) -> CheckoutSession:
        """Retrieve a checkout session (optionally with its payment intent expanded)"""
        params: dict[str, Any] = dict(self._request_options)
        if expand_payment_intent:
            params["expand"] = ["payment_intent"]
        try:
            session = await stripe.checkout.Session.retrieve_async(session_id, **params)
        except stripe.StripeError as e:
            logger.error(f"Failed to retrieve checkout session {session_id}: {e}")
            raise PaymentError(str(e)) from e

        raw_metadata = _string_map(getattr(session, "metadata", None))

        payment_intent = getattr(session, "payment_intent", None)
        pi_id = None
        pi_metadata: dict[str, str] = {}
        if isinstance(payment_intent, str):
            pi_id = payment_intent
        elif payment_intent is not None:
            pi_id = getattr(payment_intent, "id", None)
            pi_metadata = _string_map(getattr(payment_intent, "metadata", None))

        return CheckoutSession(
            id=session.id,
            url=getattr(session, "url", None),
            payment_status=getattr(session, "payment_status", None) or "unpaid",
            created=getattr(session, "created", None),
            amount_total=getattr(session, "amount_total", None),
            currency=getattr(session, "currency", None),
            metadata=CertificateMetadata.from_metadata(raw_metadata),
            raw_metadata=raw_metadata,
            payment_intent_id=pi_id,
            payment_intent_metadata=pi_metadata,
        )

    async def update_payment_intent_metadata(self, payment_intent_id: str, metadata: dict[str, str]) -> None:
        """Replace-merge metadata on a payment intent"""
        try:
            await stripe.PaymentIntent.modify_async(
                payment_intent_id, metadata=metadata, **self._request_options
            )
        except stripe.StripeError as e:
            logger.error(f"Failed to update payment intent {payment_intent_id}: {e}")
            raise PaymentError(str(e)) from e


# Global gateway instance
_gateway: Optional[StripeGateway] = None


def get_stripe_gateway() -> StripeGateway:
    """Get or create the global gateway instance."""
    global _gateway

    if _gateway is None:
        _gateway = StripeGateway()

    return _gateway
