"""
Order API routes
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from shopfront.core.database import get_db
from shopfront.core.security import get_current_user, require_admin
from shopfront.models.order import OrderStatus
from shopfront.utils.dependencies import get_current_active_user, get_pagination_params
from shopfront.utils.pagination import PaginationParams
from .schemas import (
    OrderCreate,
    OrderResponse,
    OrderListResponse,
    OrderStatusUpdate,
    OrderCancelRequest,
    OrderRefundRequest
)
from .query import OrderQueryService
from .services import OrderService

router = APIRouter()

@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Create a new order from the caller's cart"
)
async def create_order(
    order_data: OrderCreate,
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Create new order"""
    service = OrderService(db)
    order = await service.create_order(
        user_id=current_user["id"],
        shipping_address=order_data.shipping_address.model_dump(),
        billing_address=order_data.billing_address.model_dump() if order_data.billing_address else None,
        payment_method=order_data.payment_method,
        notes=order_data.notes
    )
    return OrderResponse.model_validate(order)

@router.get(
    "",
    response_model=OrderListResponse,
    summary="List my orders",
    description="Get paginated list of the caller's orders, newest first"
)
async def list_orders(
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List user orders"""
    service = OrderQueryService(db)
    result = await service.list_user_orders(
        user_id=current_user["id"],
        page=pagination.page,
        size=pagination.size
    )
    return OrderListResponse(**result)

@router.get(
    "/all",
    response_model=OrderListResponse,
    summary="List all orders",
    description="Get paginated list of all orders (Admin only)"
)
async def list_all_orders(
    status: Optional[OrderStatus] = None,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List every order"""
    service = OrderQueryService(db)
    result = await service.list_all_orders(
        status=status,
        page=pagination.page,
        size=pagination.size
    )
    return OrderListResponse(**result)

@router.get(
    "/recent",
    response_model=List[OrderResponse],
    summary="Recent orders",
    description="Latest orders across all users (Admin only)"
)
async def recent_orders(
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get recent orders"""
    service = OrderQueryService(db)
    return await service.recent_orders(limit)

@router.get(
    "/number/{order_number}",
    response_model=OrderResponse,
    summary="Get order by number"
)
async def get_order_by_number(
    order_number: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get order details by order number"""
    service = OrderQueryService(db)
    return await service.get_order_by_number(
        order_number=order_number,
        requester_id=current_user["id"],
        requester_role=current_user["role"]
    )

@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order details",
    description="Get detailed information about a specific order"
)
async def get_order(
    order_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get order details"""
    service = OrderService(db)
    return await service.get_order(
        order_id=order_id,
        requester_id=current_user["id"],
        requester_role=current_user["role"]
    )

@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="Update order status (Admin only)"
)
async def update_order_status(
    order_id: uuid.UUID,
    status_update: OrderStatusUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update order status"""
    service = OrderService(db)
    return await service.update_order_status(
        order_id=order_id,
        new_status=status_update.status,
        notes=status_update.notes,
        changed_by=current_user["id"]
    )

@router.post(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    summary="Cancel order",
    description="Cancel a pending or confirmed order and restore its stock"
)
async def cancel_order(
    order_id: uuid.UUID,
    cancel_request: Optional[OrderCancelRequest] = None,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Cancel order"""
    service = OrderService(db)
    return await service.cancel_order(
        order_id=order_id,
        requester_id=current_user["id"],
        requester_role=current_user["role"],
        reason=cancel_request.reason if cancel_request else None
    )

@router.post(
    "/{order_id}/refund",
    response_model=OrderResponse,
    summary="Refund order",
    description="Refund an order (Admin only)"
)
async def refund_order(
    order_id: uuid.UUID,
    refund_request: Optional[OrderRefundRequest] = None,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Refund order"""
    service = OrderService(db)
    return await service.refund_order(
        order_id=order_id,
        changed_by=current_user["id"],
        reason=refund_request.reason if refund_request else None
    )
