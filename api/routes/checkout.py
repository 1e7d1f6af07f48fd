"""Checkout endpoints: create a Stripe session, verify payment, deliver the certificate"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from api.dependencies import get_certificate_mailer, get_payment_gateway, limiter
from services.certificates import (
    DeliveryError,
    DeliveryResult,
    Mailer,
    deliver_certificate,
    render_certificate_pdf,
)
from services.payments import (
    CheckoutCreateRequest,
    PaymentConfigurationError,
    PaymentError,
    StripeGateway,
    VerifyResponse,
    is_session_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


class CheckoutCreateResponse(BaseModel):
    url: str


class DeliverRequest(BaseModel):
    session_id: str = Field("", max_length=200)


def _require_session_id(session_id: str) -> str:
    session_id = (session_id or "").strip()[:200]
    if not is_session_id(session_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing/invalid session_id"
        )
    return session_id


def _provider_error(e: PaymentError) -> HTTPException:
    if isinstance(e, PaymentConfigurationError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Payment provider error: {str(e)}"
    )


@router.post("/create", response_model=CheckoutCreateResponse)
@limiter.limit("10/minute")
async def create_checkout(
    request: Request,
    body: CheckoutCreateRequest,
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    """
    Create a hosted checkout session for a locked-in spot.

    Example: {"country": "New Zealand", "mode": "publicish", "seed": "NZ-publicish-1a2b3c",
              "lat": "-41.2", "lon": "174.7", "tile_m": "1"}
    """
    try:
        metadata = body.to_metadata()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        url = await gateway.create_checkout_session(metadata)
    except PaymentError as e:
        raise _provider_error(e)

    if not url:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="No checkout URL returned"
        )
    return CheckoutCreateResponse(url=url)


@router.get("/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify_checkout(
    session_id: str = Query("", description="Checkout session id (cs_...)"),
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    """
    Check whether a session is paid and return the metadata it was created with.

    Example: /checkout/verify?session_id=cs_test_123
    """
    session_id = _require_session_id(session_id)
    try:
        session = await gateway.retrieve_session(session_id)
    except PaymentError as e:
        raise _provider_error(e)

    if not session.paid:
        return VerifyResponse(paid=False, status=session.payment_status)

    return VerifyResponse(
        paid=True,
        status=session.payment_status,
        created=session.created,
        amount_total=session.amount_total,
        currency=session.currency,
        metadata=session.raw_metadata,
    )


@router.post("/deliver", response_model=DeliveryResult, response_model_exclude_none=True)
@limiter.limit("5/minute")
async def deliver(
    request: Request,
    body: DeliverRequest,
    gateway: StripeGateway = Depends(get_payment_gateway),
    mailer: Mailer = Depends(get_certificate_mailer)
):
    """Email the PDF certificate to the payer (once per session, opted-in only)"""
    session_id = _require_session_id(body.session_id)
    try:
        return await deliver_certificate(session_id, gateway, mailer)
    except PaymentError as e:
        raise _provider_error(e)
    except DeliveryError as e:
        logger.error(f"Certificate delivery failed for {session_id}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=DeliveryResult(ok=False, delivered=False, message=str(e)).model_dump(exclude_none=True),
        )


@router.get("/certificate/{session_id}")
async def download_certificate(
    session_id: str,
    gateway: StripeGateway = Depends(get_payment_gateway)
):
    """PDF certificate for a paid session"""
    session_id = _require_session_id(session_id)
    try:
        session = await gateway.retrieve_session(session_id)
    except PaymentError as e:
        raise _provider_error(e)

    if not session.paid:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Payment not confirmed yet."
        )

    meta = session.metadata
    return Response(
        content=render_certificate_pdf(meta),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{meta.filename}"'},
    )
