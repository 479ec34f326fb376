"""Product model"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, CheckConstraint, Index

from shopfront.services.pricing import effective_price

from .base import BaseModel, TimestampedModel, UUIDModel

class Product(BaseModel, TimestampedModel, UUIDModel):
    """Catalog product; stock_quantity is only written by the inventory ledger"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    sku = Column(String(100), unique=True, nullable=True, index=True)
    description = Column(Text, nullable=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2), nullable=True)

    # Inventory
    stock_quantity = Column(Integer, default=0, nullable=False)

    # Soft delete flag
    active = Column(Boolean, default=True, nullable=False, index=True)

    # Constraints
    __table_args__ = (
        CheckConstraint("price > 0", name="check_positive_price"),
        CheckConstraint("discount_price IS NULL OR discount_price >= 0", name="check_non_negative_discount"),
        CheckConstraint("stock_quantity >= 0", name="check_non_negative_stock"),
        Index("idx_products_active_name", "active", "name"),
    )

    @property
    def is_in_stock(self) -> bool:
        """Check if product is in stock"""
        return (self.stock_quantity or 0) > 0

    @property
    def effective_price(self):
        """Price a customer pays right now"""
        return effective_price(self.price, self.discount_price)
