"""Payment (Stripe Checkout) package"""

from .gateway import (
    PaymentConfigurationError,
    PaymentError,
    StripeGateway,
    get_stripe_gateway,
    is_session_id,
)
from .models import (
    CertificateMetadata,
    CheckoutCreateRequest,
    CheckoutSession,
    VerifyResponse,
    as_str,
    certificate_filename,
    looks_like_email,
)

__all__ = [
    "PaymentConfigurationError",
    "PaymentError",
    "StripeGateway",
    "get_stripe_gateway",
    "is_session_id",
    "CertificateMetadata",
    "CheckoutCreateRequest",
    "CheckoutSession",
    "VerifyResponse",
    "as_str",
    "certificate_filename",
    "looks_like_email",
]
