"""
Notification service for order emails
Messages are handed to celery and never block or fail the caller
"""

from typing import Optional, Dict, Any
from functools import partial
import asyncio
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopfront.models import User, Order, OrderStatus
from shopfront.core.monitoring import notification_failures
from shopfront.tasks.email_tasks import send_order_confirmation_email, send_order_status_email

logger = logging.getLogger(__name__)

class NotificationService:
    """Service for order notifications"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def send_order_created(self, order: Order) -> None:
        """Queue the order confirmation email"""
        to_email = await self._recipient(order.user_id)
        if not to_email:
            return

        payload = self._order_payload(order)
        payload["items"] = [
            {
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price),
            }
            for item in order.items
        ]
        self._dispatch("order_created", send_order_confirmation_email, to_email, payload)

    async def send_status_changed(
        self,
        order: Order,
        previous_status: Optional[OrderStatus] = None,
        reason: Optional[str] = None
    ) -> None:
        """Queue the status update email"""
        to_email = await self._recipient(order.user_id)
        if not to_email:
            return

        payload = self._order_payload(order)
        payload["previous_status"] = previous_status.value if previous_status else None
        payload["reason"] = reason
        self._dispatch("status_changed", send_order_status_email, to_email, payload)

    async def _recipient(self, user_id: uuid.UUID) -> Optional[str]:
        result = await self.db.execute(select(User.email).where(User.id == user_id))
        to_email = result.scalar_one_or_none()
        if not to_email:
            logger.warning(f"No email address for user {user_id}, notification skipped")
        return to_email

    @staticmethod
    def _order_payload(order: Order) -> Dict[str, Any]:
        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "status": order.status.value,
            "subtotal": str(order.subtotal),
            "shipping_cost": str(order.shipping_cost),
            "tax": str(order.tax),
            "total_amount": str(order.total_amount),
        }

    def _dispatch(self, kind: str, task, *args) -> asyncio.Future:
        """Publish the task from a worker thread so a slow broker never stalls the loop"""
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, partial(task.delay, *args))
        future.add_done_callback(partial(_log_dispatch_result, kind))
        return future

def _log_dispatch_result(kind: str, future: asyncio.Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        notification_failures.labels(kind=kind).inc()
        logger.error(f"Failed to queue {kind} notification: {exc}")
    else:
        logger.debug(f"Queued {kind} notification")
