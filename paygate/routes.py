import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from paygate.auth import verify_token
from paygate.config import get_settings
from paygate.database import SessionLocal
from paygate.errors import ConfigurationError, InvalidSignature, OrderNotFound
from paygate.logging_config import order_id_ctx
from paygate.razorpay_service import RazorpayGateway
from paygate.settlement import settle_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments")


class CreateOrderRequest(BaseModel):
    amount: Any = None
    order_id: Optional[str] = Field(None, alias="orderId")


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    order_id: Optional[str] = Field(None, alias="orderId")


def get_gateway() -> RazorpayGateway:
    settings = get_settings()
    if not settings.razorpay_configured:
        raise ConfigurationError()
    return RazorpayGateway(
        settings.razorpay_key_id,
        settings.razorpay_key_secret,
        currency=settings.currency,
        timeout=settings.razorpay_timeout,
    )


def settle_verified_payment(order_id: str, provider_payment_id: str) -> None:
    """Settle a verified payment, logging (not raising) a missing order."""
    db = SessionLocal()
    try:
        settle_order(db, order_id, provider_payment_id)
    except OrderNotFound:
        logger.warning(
            "verified payment for unknown order, needs reconciliation order_id=%s payment_id=%s",
            order_id, provider_payment_id,
        )
    finally:
        db.close()


@router.get("/key")
def get_key():
    key_id = get_settings().razorpay_key_id
    if not key_id:
        raise ConfigurationError()
    return {"success": True, "keyId": key_id}


@router.post("/create-order")
def create_order(
    request: CreateOrderRequest,
    user_id: str = Depends(verify_token),
    gateway: RazorpayGateway = Depends(get_gateway),
):
    order_id_ctx.set(request.order_id or "")
    intent = gateway.create_order(request.amount, order_id=request.order_id, user_id=user_id)
    logger.info("razorpay order created provider_order_id=%s", intent["orderId"])
    return {"success": True, **intent}


@router.post("/verify")
def verify_payment(
    request: VerifyPaymentRequest,
    user_id: str = Depends(verify_token),
    gateway: RazorpayGateway = Depends(get_gateway),
):
    order_id_ctx.set(request.order_id or "")
    verified = gateway.verify_signature(
        request.razorpay_order_id,
        request.razorpay_payment_id,
        request.razorpay_signature,
    )
    if not verified:
        logger.warning(
            "invalid payment signature provider_order_id=%s order_id=%s user_id=%s",
            request.razorpay_order_id, request.order_id, user_id,
        )
        raise InvalidSignature()

    if request.order_id:
        settle_verified_payment(request.order_id, request.razorpay_payment_id)
    else:
        logger.info("payment verified without local order id payment_id=%s", request.razorpay_payment_id)

    return {
        "success": True,
        "message": "Payment verified successfully",
        "paymentId": request.razorpay_payment_id,
    }
