"""Settlement transition and idempotency tests."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paygate.database import Base
from paygate.errors import OrderNotFound
from paygate.models import Order, PaymentState
from paygate.settlement import settle_order

engine = create_engine("sqlite:///./test_settlement.db", connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    session.add(Order(id="ORD1", user_id="user_1", amount=Decimal("250.00")))
    session.commit()
    yield session
    session.close()


def load(order_id):
    session = TestingSessionLocal()
    try:
        return session.get(Order, order_id)
    finally:
        session.close()


def assert_state_invariant(order):
    assert order.is_paid == (order.payment_result is not None)
    assert order.is_paid == (order.paid_at is not None)


def test_new_order_is_unpaid(db):
    order = load("ORD1")

    assert order.payment_state == PaymentState.UNPAID.value
    assert order.payment_result is None
    assert_state_invariant(order)


def test_settle_marks_order_paid(db):
    assert settle_order(db, "ORD1", "pay_xyz") is True

    order = load("ORD1")
    assert order.is_paid
    assert order.paid_at is not None
    assert order.payment_result["id"] == "pay_xyz"
    assert order.payment_result["status"] == "completed"
    assert order.payment_result["update_time"]
    assert_state_invariant(order)


def test_second_settlement_is_noop(db):
    settle_order(db, "ORD1", "pay_xyz")
    first = load("ORD1")

    assert settle_order(db, "ORD1", "pay_duplicate") is False

    second = load("ORD1")
    assert second.is_paid
    assert second.payment_result == first.payment_result
    assert second.paid_at == first.paid_at
    assert_state_invariant(second)


def test_concurrent_sessions_settle_once(db):
    other = TestingSessionLocal()
    try:
        results = [settle_order(db, "ORD1", "pay_a"), settle_order(other, "ORD1", "pay_b")]
    finally:
        other.close()

    assert results == [True, False]
    assert load("ORD1").payment_id == "pay_a"


def test_missing_order_raises(db):
    with pytest.raises(OrderNotFound) as excinfo:
        settle_order(db, "NOPE", "pay_xyz")

    assert excinfo.value.order_id == "NOPE"
    assert load("ORD1").is_paid is False
