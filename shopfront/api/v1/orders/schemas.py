"""
Order schemas for request/response validation
"""

from pydantic import BaseModel, Field, computed_field
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal
import uuid

from shopfront.models.order import OrderStatus
from .state_machine import order_state_machine

class OrderItemResponse(BaseModel):
    """Schema for order item response"""
    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    product_sku: Optional[str]
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    class Config:
        from_attributes = True

class AddressInfo(BaseModel):
    """Schema for address information"""
    recipient_name: str = Field(..., min_length=2, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    address_line1: str = Field(..., min_length=3, max_length=500)
    address_line2: Optional[str] = Field(None, max_length=500)
    city: str = Field(..., min_length=2, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: str = Field(..., min_length=3, max_length=20)
    country: str = Field(..., min_length=2, max_length=100)

class OrderCreate(BaseModel):
    """Schema for creating an order from the caller's cart"""
    shipping_address: AddressInfo
    billing_address: Optional[AddressInfo] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)

class OrderStatusUpdate(BaseModel):
    """Schema for an admin status change"""
    status: OrderStatus
    notes: Optional[str] = Field(None, max_length=500)

class OrderCancelRequest(BaseModel):
    """Request to cancel order"""
    reason: Optional[str] = Field(None, max_length=500)

class OrderRefundRequest(BaseModel):
    """Request to refund order"""
    reason: Optional[str] = Field(None, max_length=500)

class OrderStatusHistoryResponse(BaseModel):
    status: OrderStatus
    previous_status: Optional[OrderStatus]
    notes: Optional[str]
    changed_by: Optional[uuid.UUID]
    created_at: datetime

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    """Schema for order response"""
    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID

    # Amounts
    subtotal: Decimal
    shipping_cost: Decimal
    tax: Decimal
    discount: Decimal
    total_amount: Decimal

    # Status
    status: OrderStatus
    payment_method: Optional[str]
    payment_id: Optional[str]

    # Addresses
    shipping_address: Dict[str, Any]
    billing_address: Dict[str, Any]

    # Milestones
    shipped_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    refunded_at: Optional[datetime]

    # Additional
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    # Related data
    items: List[OrderItemResponse]
    status_history: List[OrderStatusHistoryResponse] = []

    # Where the order can go from here
    @computed_field
    @property
    def next_statuses(self) -> List[OrderStatus]:
        return order_state_machine.get_valid_transitions(self.status)

    @computed_field
    @property
    def is_final(self) -> bool:
        return order_state_machine.is_terminal_state(self.status)

    class Config:
        from_attributes = True

class OrderListResponse(BaseModel):
    """Schema for paginated order list"""
    items: List[OrderResponse]
    total: int
    page: int
    size: int
    pages: int
