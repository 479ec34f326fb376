"""
Payment service layer
Mock payment collaborator: no gateway is contacted
"""

from typing import Any, Dict, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from shopfront.models import Order, OrderStatus, OrderStatusHistory
from shopfront.core.database import commit_or_raise
from shopfront.core.exceptions import InvalidPaymentException, NotFoundException
from shopfront.core.monitoring import order_status_changes
from shopfront.core.security import is_admin
from shopfront.api.v1.orders.services import OrderService
from shopfront.services.notification import NotificationService
from shopfront.services.pricing import to_money

logger = logging.getLogger(__name__)

class PaymentService:
    """Payment service for business logic"""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.orders = OrderService(db, notifier=self.notifier)

    def generate_payment_id(self) -> str:
        return f"PAY-{uuid.uuid4().hex[:8].upper()}"

    async def process_payment(
        self,
        order_id: uuid.UUID,
        amount: Decimal,
        payment_method: str,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str]
    ) -> Dict[str, Any]:
        """
        Pay a pending order and confirm it

        Raises:
            NotFoundException: If order not found or not visible to the requester
            InvalidPaymentException: If the order is not pending or the amount differs from its total
            InternalServerException: If the payment could not be recorded
        """
        order = await self.orders.get_order(order_id, requester_id, requester_role, for_update=True)

        if order.status != OrderStatus.PENDING:
            raise InvalidPaymentException("Order is not in pending status")

        if to_money(amount) != to_money(order.total_amount):
            raise InvalidPaymentException("Payment amount does not match order total")

        payment_id = self.generate_payment_id()
        logger.info(
            f"Mock payment {payment_id} for order {order.order_number}: "
            f"{amount} via {payment_method}, status SUCCESS"
        )

        previous_status = order.status
        order.payment_id = payment_id
        order.payment_method = payment_method
        order.status = OrderStatus.CONFIRMED
        order.status_history.append(OrderStatusHistory(
            order_id=order.id,
            status=OrderStatus.CONFIRMED,
            previous_status=previous_status,
            changed_by=requester_id,
            notes=f"Payment {payment_id} received"
        ))
        await commit_or_raise(self.db, "process payment")
        await self.db.refresh(order)

        order_status_changes.labels(status=OrderStatus.CONFIRMED.value).inc()

        try:
            await self.notifier.send_status_changed(order, previous_status)
        except Exception as e:
            logger.error(f"Payment notification failed for {order.order_number}: {e}")

        return {
            "payment_id": payment_id,
            "order_id": order.id,
            "amount": to_money(amount),
            "status": "SUCCESS",
            "payment_method": payment_method,
            "message": "Payment processed successfully (MOCK)",
            "processed_at": order.updated_at,
        }

    async def get_payment_status(
        self,
        payment_id: str,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str]
    ) -> Dict[str, Any]:
        """Look up a payment by id; payments of other users are not found"""
        result = await self.db.execute(select(Order).where(Order.payment_id == payment_id))
        order = result.scalar_one_or_none()

        if not order or (not is_admin(requester_role) and order.user_id != requester_id):
            raise NotFoundException("Payment not found")

        return {
            "payment_id": payment_id,
            "order_id": order.id,
            "amount": order.total_amount,
            "status": "SUCCESS",
            "payment_method": order.payment_method,
            "message": "Payment completed",
            "processed_at": order.updated_at,
        }
