"""
Shopping cart model
One cart per user; lines reference products and carry no stored price
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from shopfront.services.pricing import line_subtotal

from .base import BaseModel, TimestampedModel, UUIDModel

class Cart(BaseModel, TimestampedModel, UUIDModel):
    """A user's cart, created lazily on first access"""

    __tablename__ = "carts"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)

    # Loaded from the child table by cart_id; items hold no reference back
    items = relationship(
        "CartItem",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.created_at",
    )

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

class CartItem(BaseModel, TimestampedModel, UUIDModel):
    """Shopping cart line"""

    __tablename__ = "cart_items"

    cart_id = Column(UUID(as_uuid=True), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    product = relationship("Product", lazy="selectin")

    # Constraints
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
    )

    @property
    def unit_price(self):
        """Live effective price of the referenced product"""
        return self.product.effective_price

    @property
    def subtotal(self):
        return line_subtotal(self.unit_price, self.quantity)
