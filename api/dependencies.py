from typing import AsyncIterator

from fastapi import HTTPException, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import settings
from services.certificates import Mailer, get_mailer
from services.payments import PaymentConfigurationError, StripeGateway, get_stripe_gateway
from services.sampler import LandChecks
from services.sampler.checks import SpotChecker

# Rate limiter - uses client IP address for identification
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def get_land_checks() -> AsyncIterator[SpotChecker]:
    """Land checks for one request; HTTP sessions close when the request ends"""
    async with LandChecks() as checks:
        yield checks


def get_payment_gateway() -> StripeGateway:
    """Get the Stripe gateway (500 when Stripe is not configured)"""
    try:
        return get_stripe_gateway()
    except PaymentConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


def get_certificate_mailer() -> Mailer:
    return get_mailer()
