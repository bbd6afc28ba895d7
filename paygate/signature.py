import hashlib
import hmac

from paygate.errors import MissingVerificationData


def compute_signature(provider_order_id: str, provider_payment_id: str, secret: str) -> str:
    payload = f"{provider_order_id}|{provider_payment_id}"
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def verify_payment_signature(
    provider_order_id: str,
    provider_payment_id: str,
    signature: str,
    secret: str,
) -> bool:
    """Return True when ``signature`` authenticates the order/payment pair.

    Raises MissingVerificationData before any HMAC work if a field is empty.
    """
    if not provider_order_id or not provider_payment_id or not signature:
        raise MissingVerificationData()

    expected = compute_signature(provider_order_id, provider_payment_id, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())


def verify_webhook_signature(body: bytes, signature: str, secret: str) -> bool:
    if not signature:
        raise MissingVerificationData()

    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected.encode(), signature.encode())
