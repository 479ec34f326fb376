"""
Read-only order queries
Listing endpoints never mutate and apply the same visibility rule as OrderService
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from shopfront.models import Order, OrderStatus
from shopfront.core.exceptions import NotFoundException
from shopfront.core.security import is_admin
from shopfront.utils.pagination import paginate

class OrderQueryService:
    """Paginated order reads"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_user_orders(self, user_id: uuid.UUID, page: int = 1, size: int = 10) -> dict:
        """The user's own orders, newest first"""
        query = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id)
        )
        return await paginate(self.db, query, page, size)

    async def list_all_orders(
        self,
        status: Optional[OrderStatus] = None,
        page: int = 1,
        size: int = 10
    ) -> dict:
        """Every order, optionally filtered by status (admin)"""
        query = select(Order).order_by(Order.created_at.desc(), Order.id)
        if status:
            query = query.where(Order.status == status)
        return await paginate(self.db, query, page, size)

    async def get_order_by_number(
        self,
        order_number: str,
        requester_id: Optional[uuid.UUID],
        requester_role: Optional[str]
    ) -> Order:
        """Look up an order by its public number; hidden from non-owners"""
        result = await self.db.execute(select(Order).where(Order.order_number == order_number))
        order = result.scalar_one_or_none()

        if not order or (not is_admin(requester_role) and order.user_id != requester_id):
            raise NotFoundException("Order not found")
        return order

    async def recent_orders(self, limit: int = 10) -> List[Order]:
        """Latest orders across all users (admin)"""
        result = await self.db.execute(
            select(Order).order_by(Order.created_at.desc(), Order.id).limit(limit)
        )
        return list(result.scalars().all())
