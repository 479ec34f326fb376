"""Order listings: pagination, ordering, status filter, lookup by number."""

import pytest

from shopfront.api.v1.orders.query import OrderQueryService
from shopfront.core.exceptions import NotFoundException
from shopfront.models import OrderStatus


@pytest.fixture
def query_call(session_factory):
    async def _call(method, *args, **kwargs):
        async with session_factory() as session:
            return await getattr(OrderQueryService(session), method)(*args, **kwargs)

    return _call


async def test_user_orders_are_paginated_newest_first(query_call, place_order, make_user, make_product):
    user = await make_user()
    product = await make_product(stock=10)
    placed = [await place_order(user, (product, 1)) for _ in range(3)]

    first_page = await query_call("list_user_orders", user.id, page=1, size=2)
    second_page = await query_call("list_user_orders", user.id, page=2, size=2)

    assert first_page["total"] == 3
    assert first_page["pages"] == 2
    assert [order.id for order in first_page["items"]] == [placed[2].id, placed[1].id]
    assert [order.id for order in second_page["items"]] == [placed[0].id]


async def test_user_orders_exclude_other_users(query_call, place_order, make_user, make_product):
    user = await make_user()
    other = await make_user()
    product = await make_product(stock=10)
    await place_order(other, (product, 1))

    page = await query_call("list_user_orders", user.id)

    assert page["total"] == 0
    assert page["items"] == []


async def test_all_orders_filter_by_status(query_call, order_call, place_order, admin, make_user, make_product):
    user = await make_user()
    product = await make_product(stock=10)
    kept = await place_order(user, (product, 1))
    cancelled = await place_order(user, (product, 1))
    await order_call("cancel_order", cancelled.id, user.id, "customer")

    everything = await query_call("list_all_orders")
    pending = await query_call("list_all_orders", status=OrderStatus.PENDING)

    assert everything["total"] == 2
    assert [order.id for order in pending["items"]] == [kept.id]


async def test_lookup_by_number_is_masked(query_call, place_order, admin, make_user, make_product):
    owner = await make_user()
    stranger = await make_user()
    product = await make_product()
    order = await place_order(owner, (product, 1))

    found = await query_call("get_order_by_number", order.order_number, owner.id, "customer")
    assert found.id == order.id

    seen_by_admin = await query_call("get_order_by_number", order.order_number, admin.id, "admin")
    assert seen_by_admin.id == order.id

    with pytest.raises(NotFoundException):
        await query_call("get_order_by_number", order.order_number, stranger.id, "customer")
    with pytest.raises(NotFoundException):
        await query_call("get_order_by_number", "ORD-MISSING", owner.id, "customer")


async def test_recent_orders_respects_limit(query_call, place_order, make_user, make_product):
    user = await make_user()
    product = await make_product(stock=10)
    placed = [await place_order(user, (product, 1)) for _ in range(3)]

    recent = await query_call("recent_orders", limit=2)

    assert [order.id for order in recent] == [placed[2].id, placed[1].id]
