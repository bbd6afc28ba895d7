"""Payment errors and their {success, message} JSON rendering."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PaymentError(Exception):
    status_code = 500
    message = "Payment request failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class InvalidAmount(PaymentError):
    status_code = 400
    message = "Invalid amount"


class ConfigurationError(PaymentError):
    status_code = 500
    message = "Payment gateway is not configured"


class PaymentProviderError(PaymentError):
    status_code = 500
    message = "Failed to create payment order"


class MissingVerificationData(PaymentError):
    status_code = 400
    message = "Missing payment verification data"


class InvalidSignature(PaymentError):
    status_code = 400
    message = "Payment verification failed - Invalid signature"


class OrderNotFound(PaymentError):
    status_code = 404
    message = "Order not found"

    def __init__(self, order_id: str):
        super().__init__()
        self.order_id = order_id


async def payment_error_handler(request: Request, exc: PaymentError):
    if isinstance(exc, ConfigurationError):
        logger.error("razorpay credentials not configured path=%s", request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("request validation failed path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request body"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PaymentError, payment_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
