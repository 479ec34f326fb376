"""Order model with state machine"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, Index, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from shopfront.services.pricing import line_subtotal

from .base import BaseModel, TimestampedModel, UUIDModel

class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"

class Order(BaseModel, TimestampedModel, UUIDModel):
    """Priced order; everything except status, notes, payment and milestones is frozen at creation"""

    __tablename__ = "orders"

    # Order identification
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Status
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)

    # Amounts
    subtotal = Column(Numeric(10, 2), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # Payment
    payment_method = Column(String(50), nullable=True)
    payment_id = Column(String(50), nullable=True, unique=True, index=True)

    # Addresses
    shipping_address = Column(JSON, nullable=False)
    billing_address = Column(JSON, nullable=False)

    # Milestones
    shipped_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    refunded_at = Column(DateTime(timezone=True), nullable=True)

    # Additional info
    notes = Column(Text, nullable=True)

    # Children are looked up by order_id
    items = relationship(
        "OrderItem",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.position",
    )
    status_history = relationship(
        "OrderStatusHistory",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderStatusHistory.created_at",
    )

    # Indexes
    __table_args__ = (
        Index("idx_orders_user_created", "user_id", "created_at"),
        Index("idx_orders_status_created", "status", "created_at"),
    )

    def append_notes(self, text: str) -> None:
        """Append to the notes log, never replacing earlier entries"""
        if not text:
            return
        self.notes = f"{self.notes}\n{text}" if self.notes else text

class OrderItem(BaseModel, TimestampedModel, UUIDModel):
    """Individual items within an order"""

    __tablename__ = "order_items"

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Item details (snapshot at time of order)
    product_name = Column(String(255), nullable=False)
    product_sku = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    # Constraints
    __table_args__ = (
        Index("idx_order_items_order_product", "order_id", "product_id"),
    )

    @property
    def subtotal(self):
        return line_subtotal(self.unit_price, self.quantity)

class OrderStatusHistory(BaseModel, TimestampedModel, UUIDModel):
    """Track order status changes"""

    __tablename__ = "order_status_history"

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status = Column(Enum(OrderStatus), nullable=False)
    previous_status = Column(Enum(OrderStatus), nullable=True)
    notes = Column(Text, nullable=True)
    changed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    # Indexes
    __table_args__ = (
        Index("idx_order_status_history_order", "order_id"),
    )
