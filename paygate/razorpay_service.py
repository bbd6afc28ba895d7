import logging
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError

from paygate.errors import InvalidAmount, PaymentProviderError
from paygate.signature import verify_payment_signature

logger = logging.getLogger(__name__)

PROVIDER_ERRORS = (BadRequestError, ServerError, GatewayError, requests.RequestException)


def to_minor_units(amount) -> int:
    """Convert a decimal rupee amount to integer paise, rounding half up."""
    # JSON numbers only; bool is an int subclass
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        raise InvalidAmount()
    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value <= 0:
            raise InvalidAmount()
        # Beyond the context precision quantize signals InvalidOperation
        paise = (value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise InvalidAmount()
    if paise <= 0:
        raise InvalidAmount()
    return int(paise)


class RazorpayGateway:
    def __init__(self, key_id: str, key_secret: str, currency: str = "INR",
                 timeout: float = 10.0, client=None):
        self.key_id = key_id
        self._key_secret = key_secret
        self.currency = currency
        self.timeout = timeout
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount, order_id: str = None, user_id: str = None) -> dict:
        minor_amount = to_minor_units(amount)

        options = {
            "amount": minor_amount,
            "currency": self.currency,
            "receipt": f"order_{order_id or int(time.time() * 1000)}",
            "notes": {
                "orderId": order_id or "pending",
                "userId": user_id,
            },
        }

        try:
            provider_order = self.client.order.create(data=options, timeout=self.timeout)
        except PROVIDER_ERRORS as exc:
            logger.error("razorpay order creation failed receipt=%s error=%r", options["receipt"], exc)
            raise PaymentProviderError() from exc

        return {
            "orderId": provider_order["id"],
            "amount": provider_order["amount"],
            "currency": provider_order["currency"],
            "keyId": self.key_id,
        }

    def verify_signature(self, provider_order_id: str, provider_payment_id: str, signature: str) -> bool:
        return verify_payment_signature(
            provider_order_id, provider_payment_id, signature, self._key_secret
        )
