"""Mailing list signup"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from api.dependencies import get_certificate_mailer, limiter
from services.certificates import DeliveryError, Mailer, subscribe
from services.payments import as_str

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


class SubscribeRequest(BaseModel):
    email: str = Field("", max_length=320)


class SubscribeResponse(BaseModel):
    ok: bool
    message: str


@router.post("/subscribe", response_model=SubscribeResponse)
@limiter.limit("5/minute")
async def subscribe_newsletter(
    request: Request,
    body: SubscribeRequest,
    mailer: Mailer = Depends(get_certificate_mailer)
):
    """Subscribe to occasional product updates"""
    email = as_str(body.email, 120)
    try:
        message = await subscribe(email, mailer)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DeliveryError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not send confirmation: {str(e)}"
        )
    return SubscribeResponse(ok=True, message=message)
