"""
Order service layer
Turns carts into priced orders and drives the order lifecycle
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
import logging
import secrets
import uuid

from shopfront.models import Order, OrderItem, OrderStatus, OrderStatusHistory
from shopfront.models.base import utcnow
from shopfront.core.database import commit_or_raise
from shopfront.core.exceptions import (
    ShopfrontException,
    NotFoundException,
    EmptyCartException,
    InsufficientStockException,
    InternalServerException,
    InvalidStatusTransitionException,
    OrderNotCancellableException,
    ProductUnavailableException,
    StockConflictException
)
from shopfront.core.monitoring import (
    orders_created,
    orders_cancelled,
    orders_refunded,
    order_status_changes,
    stock_reservation_conflicts
)
from shopfront.core.security import ADMIN_ROLE, is_admin
from shopfront.api.v1.cart.services import CartService
from shopfront.services.catalog import ProductCatalog
from shopfront.services.inventory_service import InventoryLedger
from shopfront.services.notification import NotificationService
from shopfront.services.pricing import order_totals
from .state_machine import order_state_machine

logger = logging.getLogger(__name__)

class OrderService:
    """Order service for business logic"""

    def __init__(
        self,
        db: AsyncSession,
        notifier: Optional[NotificationService] = None,
        catalog: Optional[ProductCatalog] = None
    ):
        self.db = db
        self.cart_service = CartService(db)
        self.ledger = InventoryLedger(db)
        self.notifier = notifier or NotificationService(db)
        self.catalog = catalog or ProductCatalog(db)
        self.state_machine = order_state_machine

    def generate_order_number(self) -> str:
        """Generate unique order number"""
        timestamp = datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')
        return f"ORD{timestamp}{secrets.token_hex(4).upper()}"

    async def create_order(
        self,
        user_id: uuid.UUID,
        shipping_address: Dict[str, Any],
        billing_address: Optional[Dict[str, Any]] = None,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Order:
        """
        Create an order from the user's cart

        Stock for every line is reserved, the order is persisted and the
        cart is emptied in one transaction. Any failure rolls the whole
        transaction back, which also returns every reservation made so far.

        Raises:
            EmptyCartException: If the cart has no items
            ProductUnavailableException: If a product was deactivated
            InsufficientStockException: If a line asks for more than is in stock
            StockConflictException: If stock changed between the check and the reservation
            InternalServerException: If the order could not be persisted
        """
        cart = await self.cart_service.load_cart(user_id)
        if cart is None or not cart.items:
            raise EmptyCartException()

        # Fail fast before touching stock; the reservation below is authoritative
        for item in cart.items:
            product = item.product
            if not product.active:
                raise ProductUnavailableException(f"Product is not available: {product.name}")
            if product.stock_quantity < item.quantity:
                raise InsufficientStockException(product.name, product.stock_quantity)

        try:
            # Fixed lock order across concurrent checkouts
            for item in sorted(cart.items, key=lambda line: str(line.product_id)):
                try:
                    await self.ledger.reserve(item.product_id, item.quantity)
                except InsufficientStockException as e:
                    stock_reservation_conflicts.inc()
                    raise StockConflictException(e.product_name) from e

            order_items = [
                OrderItem(
                    product_id=item.product_id,
                    position=position,
                    product_name=item.product.name,
                    product_sku=item.product.sku,
                    quantity=item.quantity,
                    unit_price=item.unit_price
                )
                for position, item in enumerate(cart.items)
            ]
            totals = order_totals(order_item.subtotal for order_item in order_items)

            order = Order(
                id=uuid.uuid4(),
                order_number=self.generate_order_number(),
                user_id=user_id,
                status=OrderStatus.PENDING,
                subtotal=totals.subtotal,
                shipping_cost=totals.shipping_cost,
                tax=totals.tax,
                discount=totals.discount,
                total_amount=totals.total_amount,
                payment_method=payment_method,
                shipping_address=shipping_address,
                billing_address=billing_address or shipping_address,
                notes=notes,
                items=order_items
            )
            order.status_history.append(OrderStatusHistory(
                status=OrderStatus.PENDING,
                changed_by=user_id,
                notes="Order created"
            ))
            self.db.add(order)

            await self.cart_service.remove_all_items(cart.id)
            await self.db.commit()
        except ShopfrontException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to persist order for user {user_id}: {e}")
            raise InternalServerException("Failed to create order")

        orders_created.inc()
        logger.info(f"Order {order.order_number} created for user {user_id}, total {order.total_amount}")

        await self.catalog.invalidate_many(item.product_id for item in order_items)

        order = await self._load_order(order.id)
        try:
            await self.notifier.send_order_created(order)
        except Exception as e:
            logger.error(f"Order created notification failed for {order.order_number}: {e}")

        return order

    async def get_order(
        self,
        order_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str],
        for_update: bool = False
    ) -> Order:
        """
        Get order details

        Orders of other users are reported as not found so their
        existence is not revealed.
        """
        return await self._get_visible_order(order_id, requester_id, requester_role, for_update)

    async def update_order_status(
        self,
        order_id: uuid.UUID,
        new_status: OrderStatus,
        notes: Optional[str] = None,
        changed_by: Optional[uuid.UUID] = None
    ) -> Order:
        """
        Move an order along the state machine (admin)

        Cancellation and refund carry stock effects and are delegated to
        cancel_order and refund_order.
        """
        if new_status == OrderStatus.CANCELLED:
            return await self.cancel_order(order_id, changed_by, ADMIN_ROLE, reason=notes)
        if new_status == OrderStatus.REFUNDED:
            return await self.refund_order(order_id, changed_by, reason=notes)

        order = await self._load_order(order_id, for_update=True)
        if not self.state_machine.can_transition(order.status, new_status):
            raise InvalidStatusTransitionException(order.status.value, new_status.value)

        previous_status = order.status
        order.status = new_status

        if new_status == OrderStatus.SHIPPED:
            order.shipped_at = utcnow()
        elif new_status == OrderStatus.DELIVERED:
            order.delivered_at = utcnow()

        order.append_notes(notes)
        self._record_history(order, previous_status, changed_by, notes)
        await commit_or_raise(self.db, "update order status")

        order_status_changes.labels(status=new_status.value).inc()
        logger.info(f"Order {order.order_number} status updated from {previous_status.value} to {new_status.value}")

        order = await self._load_order(order_id)
        await self._notify_status_changed(order, previous_status, notes)
        return order

    async def cancel_order(
        self,
        order_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str],
        reason: Optional[str] = None
    ) -> Order:
        """
        Cancel order and return its stock

        Raises:
            NotFoundException: If order not found or not visible to the requester
            OrderNotCancellableException: Unless the order is PENDING or CONFIRMED
        """
        order = await self._get_visible_order(order_id, requester_id, requester_role, for_update=True)

        if not self.state_machine.is_cancellable(order.status):
            raise OrderNotCancellableException(
                f"Cannot cancel order in current status: {order.status.value}"
            )

        previous_status = order.status
        for item in order.items:
            await self.ledger.release(item.product_id, item.quantity)

        order.status = OrderStatus.CANCELLED
        order.cancelled_at = utcnow()
        if reason:
            order.append_notes(f"Cancellation reason: {reason}")
        self._record_history(order, previous_status, requester_id, reason)
        await commit_or_raise(self.db, "cancel order")

        orders_cancelled.inc()
        order_status_changes.labels(status=OrderStatus.CANCELLED.value).inc()
        logger.info(f"Order {order.order_number} cancelled")

        await self.catalog.invalidate_many(item.product_id for item in order.items)

        order = await self._load_order(order_id)
        await self._notify_status_changed(order, previous_status, reason)
        return order

    async def refund_order(
        self,
        order_id: uuid.UUID,
        changed_by: Optional[uuid.UUID],
        reason: Optional[str] = None
    ) -> Order:
        """
        Refund order (admin)

        Stock goes back only when the goods never left the warehouse.
        Returned goods from shipped or delivered orders are restocked
        separately once received.
        """
        order = await self._load_order(order_id, for_update=True)

        if not self.state_machine.is_refundable(order.status):
            raise InvalidStatusTransitionException(order.status.value, OrderStatus.REFUNDED.value)

        previous_status = order.status
        releases_stock = self.state_machine.releases_stock_on_refund(previous_status)
        if releases_stock:
            for item in order.items:
                await self.ledger.release(item.product_id, item.quantity)

        order.status = OrderStatus.REFUNDED
        order.refunded_at = utcnow()
        if reason:
            order.append_notes(f"Refund reason: {reason}")
        self._record_history(order, previous_status, changed_by, reason)
        await commit_or_raise(self.db, "refund order")

        orders_refunded.inc()
        order_status_changes.labels(status=OrderStatus.REFUNDED.value).inc()
        logger.info(f"Order {order.order_number} refunded from {previous_status.value}")

        if releases_stock:
            await self.catalog.invalidate_many(item.product_id for item in order.items)

        order = await self._load_order(order_id)
        await self._notify_status_changed(order, previous_status, reason)
        return order

    async def _load_order(self, order_id: uuid.UUID, for_update: bool = False) -> Order:
        query = (
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()

        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundException("Order not found")
        return order

    async def _get_visible_order(
        self,
        order_id: uuid.UUID,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str],
        for_update: bool = False
    ) -> Order:
        order = await self._load_order(order_id, for_update=for_update)
        if not is_admin(requester_role) and order.user_id != requester_id:
            raise NotFoundException("Order not found")
        return order

    def _record_history(
        self,
        order: Order,
        previous_status: OrderStatus,
        changed_by: Optional[uuid.UUID],
        notes: Optional[str]
    ) -> None:
        order.status_history.append(OrderStatusHistory(
            order_id=order.id,
            status=order.status,
            previous_status=previous_status,
            changed_by=changed_by,
            notes=notes
        ))

    async def _notify_status_changed(
        self,
        order: Order,
        previous_status: OrderStatus,
        reason: Optional[str]
    ) -> None:
        try:
            await self.notifier.send_status_changed(order, previous_status, reason)
        except Exception as e:
            logger.error(f"Status notification failed for {order.order_number}: {e}")
