"""Shared test fixtures: per-test SQLite file database, seed helpers, HTTP client.

Invariants:
    - Every test gets a fresh SQLite file under tmp_path, so concurrent
      sessions use separate connections serialized by BEGIN IMMEDIATE.
      The concurrency tests therefore check ordering, not row-level lock
      contention, which only PostgreSQL exercises; the stale-instance
      ledger test covers the interleaving a row lock would otherwise hide
    - get_db dependency overridden to use the test engine
    - Every helper and service call runs in its own short-lived session;
      an open SQLite transaction holds the write lock
    - Notification dispatch in route tests is captured, not queued
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./shopfront-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopfront.core.cache import cache
from shopfront.core.database import create_engine_for, get_db
from shopfront.api.v1.orders.services import OrderService
from shopfront.core.security import create_user_token
from shopfront.models import Base, Cart, CartItem, Order, Product, User, UserRole
from shopfront.services.notification import NotificationService
from shopfront.main import app


class FakeNotifier:
    """Records notifications instead of queueing them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.created = []
        self.status_changes = []

    async def send_order_created(self, order):
        if self.fail:
            raise RuntimeError("mail transport down")
        self.created.append(order.order_number)

    async def send_status_changed(self, order, previous_status=None, reason=None):
        if self.fail:
            raise RuntimeError("mail transport down")
        self.status_changes.append((order.order_number, previous_status, order.status))


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'shopfront.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False,
    )


@pytest.fixture(autouse=True)
async def clear_cache():
    cache._fallback_cache.clear()
    yield
    cache._fallback_cache.clear()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def failing_notifier():
    return FakeNotifier(fail=True)


@pytest.fixture
def order_call(session_factory, notifier):
    """Run one OrderService method in its own session, like a request would."""

    async def _call(method, *args, notifier_override=None, **kwargs):
        async with session_factory() as session:
            service = OrderService(session, notifier=notifier_override or notifier)
            return await getattr(service, method)(*args, **kwargs)

    return _call


@pytest.fixture
def dispatched(monkeypatch):
    """Capture NotificationService dispatches as (kind, to_email, payload)."""
    log = []

    def _capture(self, kind, task, *args):
        log.append((kind, *args))

    monkeypatch.setattr(NotificationService, "_dispatch", _capture)
    return log


@pytest.fixture
async def client(session_factory, dispatched):
    """FastAPI test client with DB dependency overridden."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# Seed helpers. Each opens and closes its own session so no lock is held.

@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    async def _make(role: UserRole = UserRole.CUSTOMER, is_active: bool = True) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            name=f"User {counter['n']}",
            role=role,
            is_active=is_active,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_product(session_factory):
    counter = {"n": 0}

    async def _make(
        price: str = "10.00",
        stock: int = 5,
        discount_price=None,
        active: bool = True,
        name=None,
    ) -> Product:
        counter["n"] += 1
        product = Product(
            name=name or f"Product {counter['n']}",
            sku=f"SKU-{counter['n']:04d}",
            price=Decimal(price),
            discount_price=Decimal(discount_price) if discount_price is not None else None,
            stock_quantity=stock,
            active=active,
        )
        async with session_factory() as session:
            session.add(product)
            await session.commit()
        return product

    return _make


@pytest.fixture
def fill_cart(session_factory):
    """Put (product, quantity) lines straight into a user's cart."""

    async def _fill(user: User, *lines) -> Cart:
        async with session_factory() as session:
            result = await session.execute(select(Cart).where(Cart.user_id == user.id))
            cart = result.scalar_one_or_none()
            if cart is None:
                cart = Cart(user_id=user.id)
                session.add(cart)
                await session.flush()
            for product, quantity in lines:
                session.add(CartItem(cart_id=cart.id, product_id=product.id, quantity=quantity))
                # One flush per line keeps created_at, and so cart order, distinct
                await session.flush()
            await session.commit()
        return cart

    return _fill


@pytest.fixture
def read_stock(session_factory):
    async def _read(product: Product) -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(Product.stock_quantity).where(Product.id == product.id)
            )
            return result.scalar_one()

    return _read


@pytest.fixture
def count_orders(session_factory):
    async def _count(user=None) -> int:
        async with session_factory() as session:
            query = select(Order)
            if user is not None:
                query = query.where(Order.user_id == user.id)
            result = await session.execute(query)
            return len(result.scalars().all())

    return _count


@pytest.fixture
def count_cart_items(session_factory):
    async def _count(user: User) -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(CartItem).join(Cart, Cart.id == CartItem.cart_id).where(Cart.user_id == user.id)
            )
            return len(result.scalars().all())

    return _count


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_user_token(user.id, user.role.value, user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def address():
    return {
        "recipient_name": "Ada Lovelace",
        "address_line1": "12 Analytical Row",
        "city": "London",
        "postal_code": "N1 9GU",
        "country": "United Kingdom",
    }


@pytest.fixture
async def admin(make_user):
    return await make_user(role=UserRole.ADMIN)


@pytest.fixture
def place_order(order_call, fill_cart, address):
    """Fill a cart with (product, quantity) lines and check it out."""

    async def _place(user: User, *lines, **kwargs) -> Order:
        await fill_cart(user, *lines)
        return await order_call("create_order", user.id, shipping_address=address, **kwargs)

    return _place
