import enum
from uuid import uuid4

from sqlalchemy import Column, DateTime, Numeric, String
from paygate.database import Base


class PaymentState(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    user_id = Column(String, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_state = Column(String, nullable=False, default=PaymentState.UNPAID.value)  # unpaid | paid

    # Set together with payment_state, only by settlement
    paid_at = Column(DateTime(timezone=True))
    payment_id = Column(String)                    # Razorpay payment id
    payment_status = Column(String)
    payment_update_time = Column(String)

    @property
    def is_paid(self) -> bool:
        return self.payment_state == PaymentState.PAID.value

    @property
    def payment_result(self):
        if self.payment_id is None:
            return None
        return {
            "id": self.payment_id,
            "status": self.payment_status,
            "update_time": self.payment_update_time,
        }
