import json
import logging

from fastapi import FastAPI, Header, HTTPException, Request

from paygate.config import get_settings
from paygate.database import Base, engine
from paygate.errors import ConfigurationError, InvalidSignature, register_exception_handlers
from paygate.logging_config import configure_logging, order_id_ctx
from paygate.routes import router, settle_verified_payment
from paygate.signature import verify_webhook_signature
import paygate.models  # noqa: F401  registers tables on Base

configure_logging()
logger = logging.getLogger(__name__)

SETTLING_EVENTS = {"payment.captured", "order.paid"}

app = FastAPI(title="Razorpay Payment Microservice")

app.include_router(router)
register_exception_handlers(app)

Base.metadata.create_all(bind=engine)

if not get_settings().razorpay_configured:
    logger.error("RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET are not set; payment routes will fail")


def _payment_entity(event: dict) -> dict:
    """Return payload.payment.entity, or {} when any level is missing or not an object."""
    node = event
    for key in ("payload", "payment", "entity"):
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}


@app.post("/payments/webhook")
async def razorpay_webhook(request: Request, x_razorpay_signature: str = Header(None)):
    secret = get_settings().razorpay_webhook_secret
    if not secret:
        raise ConfigurationError()

    payload = await request.body()

    if not verify_webhook_signature(payload, x_razorpay_signature, secret):
        logger.warning("invalid webhook signature")
        raise InvalidSignature()

    try:
        event = json.loads(payload)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")

    if event.get("event") in SETTLING_EVENTS:
        payment = _payment_entity(event)
        notes = payment.get("notes")
        order_id = notes.get("orderId") if isinstance(notes, dict) else None
        order_id_ctx.set(order_id or "")
        if order_id and order_id != "pending" and payment.get("id"):
            settle_verified_payment(order_id, payment["id"])
        else:
            logger.info("webhook payment has no local order id payment_id=%s", payment.get("id"))

    return {"ok": True}
