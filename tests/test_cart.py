"""Cart aggregate: lazy creation, merge, validation, removal, live pricing."""

import asyncio
import uuid
from decimal import Decimal

import pytest

from shopfront.api.v1.cart.services import CartService
from shopfront.core.exceptions import (
    InsufficientStockException,
    NotFoundException,
    ProductUnavailableException,
)


@pytest.fixture
def cart_call(session_factory):
    """Run one CartService method in its own session, like a request would."""

    async def _call(method, *args, **kwargs):
        async with session_factory() as session:
            service = CartService(session)
            return await getattr(service, method)(*args, **kwargs)

    return _call


async def test_cart_created_lazily_and_empty(cart_call, make_user):
    user = await make_user()

    cart = await cart_call("get_cart", user.id)

    assert cart.user_id == user.id
    assert cart.items == []
    assert cart.total_items == 0
    assert cart.total_price == Decimal("0.00")


async def test_one_cart_per_user(cart_call, make_user):
    user = await make_user()

    first = await cart_call("get_cart", user.id)
    second = await cart_call("get_cart", user.id)

    assert first.id == second.id


async def test_concurrent_first_touch_yields_one_cart(cart_call, make_user):
    user = await make_user()

    carts = await asyncio.gather(*(cart_call("get_cart", user.id) for _ in range(4)))

    assert len({cart.id for cart in carts}) == 1


async def test_add_item_merges_quantities(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product(price="10.00", stock=5)

    await cart_call("add_item", user.id, product.id, 2)
    cart = await cart_call("add_item", user.id, product.id, 1)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3
    assert cart.total_items == 3
    assert cart.total_price == Decimal("30.00")


async def test_add_item_merged_total_cannot_exceed_stock(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product(stock=3)

    await cart_call("add_item", user.id, product.id, 2)
    with pytest.raises(InsufficientStockException):
        await cart_call("add_item", user.id, product.id, 2)

    cart = await cart_call("get_cart", user.id)
    assert cart.items[0].quantity == 2


async def test_add_unknown_product_is_not_found(cart_call, make_user):
    user = await make_user()

    with pytest.raises(NotFoundException):
        await cart_call("add_item", user.id, uuid.uuid4(), 1)


async def test_add_inactive_or_out_of_stock_product_fails(cart_call, make_user, make_product):
    user = await make_user()
    inactive = await make_product(active=False)
    sold_out = await make_product(stock=0)

    with pytest.raises(ProductUnavailableException):
        await cart_call("add_item", user.id, inactive.id, 1)
    with pytest.raises(ProductUnavailableException):
        await cart_call("add_item", user.id, sold_out.id, 1)


async def test_cart_view_uses_live_discount_price(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product(price="20.00", discount_price="15.00", stock=10)

    cart = await cart_call("add_item", user.id, product.id, 2)
    line = cart.items[0]

    assert line.unit_price == Decimal("15.00")
    assert line.subtotal == Decimal("30.00")
    assert line.in_stock is True
    assert line.available_stock == 10


async def test_update_quantity_revalidates_stock(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product(stock=4)
    cart = await cart_call("add_item", user.id, product.id, 1)
    item_id = cart.items[0].id

    cart = await cart_call("update_item_quantity", user.id, item_id, 4)
    assert cart.items[0].quantity == 4

    with pytest.raises(InsufficientStockException):
        await cart_call("update_item_quantity", user.id, item_id, 5)


async def test_update_quantity_zero_removes_line(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product()
    cart = await cart_call("add_item", user.id, product.id, 1)

    cart = await cart_call("update_item_quantity", user.id, cart.items[0].id, 0)

    assert cart.items == []


async def test_remove_item_twice_is_not_found(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product()
    cart = await cart_call("add_item", user.id, product.id, 1)
    item_id = cart.items[0].id

    cart = await cart_call("remove_item", user.id, item_id)
    assert cart.items == []

    with pytest.raises(NotFoundException):
        await cart_call("remove_item", user.id, item_id)


async def test_cannot_touch_another_users_item(cart_call, make_user, make_product):
    owner = await make_user()
    other = await make_user()
    product = await make_product()
    cart = await cart_call("add_item", owner.id, product.id, 1)

    with pytest.raises(NotFoundException):
        await cart_call("remove_item", other.id, cart.items[0].id)
    with pytest.raises(NotFoundException):
        await cart_call("update_item_quantity", other.id, cart.items[0].id, 1)


async def test_clear_is_idempotent(cart_call, make_user, make_product):
    user = await make_user()
    product = await make_product()
    await cart_call("add_item", user.id, product.id, 2)

    await cart_call("clear", user.id)
    await cart_call("clear", user.id)

    cart = await cart_call("get_cart", user.id)
    assert cart.items == []


async def test_clear_without_cart_is_noop(cart_call, make_user):
    user = await make_user()

    await cart_call("clear", user.id)


async def test_cart_never_touches_stock(cart_call, make_user, make_product, read_stock):
    user = await make_user()
    product = await make_product(stock=5)

    await cart_call("add_item", user.id, product.id, 3)
    await cart_call("clear", user.id)

    assert await read_stock(product) == 5
