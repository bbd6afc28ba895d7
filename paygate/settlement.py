import logging
from datetime import datetime, timezone

from sqlalchemy import update

from paygate.errors import OrderNotFound
from paygate.models import Order, PaymentState

logger = logging.getLogger(__name__)

COMPLETED_STATUS = "completed"


def settle_order(db, order_id: str, provider_payment_id: str) -> bool:
    """Mark an order paid after its payment signature has been verified.

    The write is guarded by ``payment_state = 'unpaid'`` so that of two
    concurrent callbacks for the same order only one applies. Returns True when
    this call settled the order, False when it was already paid. Raises
    OrderNotFound when no such order exists.
    """

    now = datetime.now(timezone.utc)
    result = db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.payment_state == PaymentState.UNPAID.value,
        )
        .values(
            payment_state=PaymentState.PAID.value,
            paid_at=now,
            payment_id=provider_payment_id,
            payment_status=COMPLETED_STATUS,
            payment_update_time=now.isoformat(),
        )
    )
    if result.rowcount == 1:
        db.commit()
        logger.info("order settled order_id=%s payment_id=%s", order_id, provider_payment_id)
        return True

    db.rollback()
    if db.get(Order, order_id) is None:
        raise OrderNotFound(order_id)

    logger.info("order already paid, settlement skipped order_id=%s", order_id)
    return False
