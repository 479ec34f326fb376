"""Mock payments confirm pending orders whose total matches."""

from decimal import Decimal

import pytest

from shopfront.api.v1.payments.services import PaymentService
from shopfront.core.exceptions import InternalServerException, InvalidPaymentException, NotFoundException
from shopfront.models import OrderStatus


@pytest.fixture
def payment_call(session_factory, notifier):
    async def _call(method, *args, **kwargs):
        async with session_factory() as session:
            return await getattr(PaymentService(session, notifier=notifier), method)(*args, **kwargs)

    return _call


async def test_payment_confirms_pending_order(
    payment_call, order_call, place_order, make_user, make_product, notifier
):
    user = await make_user()
    product = await make_product(price="10.00", stock=5)
    order = await place_order(user, (product, 2))

    result = await payment_call(
        "process_payment", order.id, Decimal("31.99"), "card", user.id, user.role.value
    )

    assert result["status"] == "SUCCESS"
    assert result["payment_id"].startswith("PAY-")
    assert len(result["payment_id"]) == len("PAY-") + 8
    assert result["amount"] == Decimal("31.99")

    paid = await order_call("get_order", order.id, user.id, user.role.value)
    assert paid.status == OrderStatus.CONFIRMED
    assert paid.payment_id == result["payment_id"]
    assert paid.payment_method == "card"
    assert [entry.status for entry in paid.status_history] == [
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
    ]
    assert notifier.status_changes[-1] == (order.order_number, OrderStatus.PENDING, OrderStatus.CONFIRMED)


async def test_amount_mismatch_is_rejected(payment_call, order_call, place_order, make_user, make_product):
    user = await make_user()
    product = await make_product(price="10.00", stock=5)
    order = await place_order(user, (product, 2))

    with pytest.raises(InvalidPaymentException) as exc_info:
        await payment_call("process_payment", order.id, Decimal("20.00"), "card", user.id, user.role.value)

    assert "does not match" in exc_info.value.detail
    unpaid = await order_call("get_order", order.id, user.id, user.role.value)
    assert unpaid.status == OrderStatus.PENDING


async def test_only_pending_orders_can_be_paid(payment_call, place_order, make_user, make_product):
    user = await make_user()
    product = await make_product(price="10.00", stock=5)
    order = await place_order(user, (product, 2))
    await payment_call("process_payment", order.id, Decimal("31.99"), "card", user.id, user.role.value)

    with pytest.raises(InvalidPaymentException) as exc_info:
        await payment_call("process_payment", order.id, Decimal("31.99"), "card", user.id, user.role.value)

    assert "pending" in exc_info.value.detail


async def test_cannot_pay_someone_elses_order(payment_call, place_order, make_user, make_product):
    owner = await make_user()
    stranger = await make_user()
    product = await make_product(price="10.00", stock=5)
    order = await place_order(owner, (product, 2))

    with pytest.raises(NotFoundException):
        await payment_call(
            "process_payment", order.id, Decimal("31.99"), "card", stranger.id, stranger.role.value
        )


async def test_payment_status_lookup(payment_call, place_order, make_user, make_product, admin):
    owner = await make_user()
    stranger = await make_user()
    product = await make_product(price="10.00", stock=5)
    order = await place_order(owner, (product, 2))
    paid = await payment_call(
        "process_payment", order.id, Decimal("31.99"), "card", owner.id, owner.role.value
    )

    status = await payment_call("get_payment_status", paid["payment_id"], owner.id, owner.role.value)
    assert status["order_id"] == order.id
    assert status["amount"] == Decimal("31.99")

    seen_by_admin = await payment_call("get_payment_status", paid["payment_id"], admin.id, admin.role.value)
    assert seen_by_admin["order_id"] == order.id

    with pytest.raises(NotFoundException):
        await payment_call("get_payment_status", paid["payment_id"], stranger.id, stranger.role.value)
    with pytest.raises(NotFoundException):
        await payment_call("get_payment_status", "PAY-UNKNOWN", owner.id, owner.role.value)


async def test_payment_id_clash_rolls_back(
    payment_call, order_call, place_order, make_user, make_product, monkeypatch
):
    user = await make_user()
    product = await make_product(price="10.00", stock=5)
    first = await place_order(user, (product, 1))
    second = await place_order(user, (product, 1))
    paid = await payment_call(
        "process_payment", first.id, first.total_amount, "card", user.id, user.role.value
    )
    monkeypatch.setattr(PaymentService, "generate_payment_id", lambda self: paid["payment_id"])

    with pytest.raises(InternalServerException) as exc_info:
        await payment_call(
            "process_payment", second.id, second.total_amount, "card", user.id, user.role.value
        )

    assert exc_info.value.detail == "Failed to process payment"
    unpaid = await order_call("get_order", second.id, user.id, user.role.value)
    assert unpaid.status == OrderStatus.PENDING
    assert unpaid.payment_id is None
    assert [entry.status for entry in unpaid.status_history] == [OrderStatus.PENDING]
