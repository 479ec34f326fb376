"""
Product schemas for request/response validation
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

class ProductBase(BaseModel):
    """Base schema for products"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    discount_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

class ProductCreate(ProductBase):
    """Schema for creating product"""
    sku: Optional[str] = Field(None, max_length=100)
    stock_quantity: int = Field(0, ge=0)
    active: bool = True

    @field_validator("discount_price")
    @classmethod
    def validate_discount(cls, v, info):
        price = info.data.get("price")
        if v and price is not None and v > price:
            raise ValueError("Discount price cannot exceed price")
        return v

class ProductUpdate(BaseModel):
    """Schema for updating product; stock changes go through inventory"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    discount_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    active: Optional[bool] = None

class ProductResponse(ProductBase):
    """Schema for product response"""
    id: uuid.UUID
    sku: Optional[str]
    stock_quantity: int
    active: bool
    created_at: datetime
    updated_at: datetime

    # Computed fields
    effective_price: Decimal
    is_in_stock: bool

    class Config:
        from_attributes = True
