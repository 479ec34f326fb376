"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal
import uuid

class CartItemCreate(BaseModel):
    """Schema for adding item to cart"""
    product_id: uuid.UUID
    quantity: int = Field(1, gt=0)

class CartItemUpdate(BaseModel):
    """Schema for updating cart item; zero removes the line"""
    quantity: int = Field(..., ge=0)

class CartItemResponse(BaseModel):
    """Schema for cart item response"""
    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    quantity: int
    created_at: datetime

    # Calculated from the live product
    unit_price: Decimal
    subtotal: Decimal
    in_stock: bool
    available_stock: int

class CartResponse(BaseModel):
    """Schema for complete cart response"""
    id: uuid.UUID
    user_id: uuid.UUID
    items: List[CartItemResponse]

    # Summary
    total_items: int
    total_price: Decimal

    class Config:
        json_schema_extra = {
            "example": {
                "id": "8d2f7c3e-0a51-4c1e-9a59-6f3f7c1d2b10",
                "user_id": "0f6e1d1a-2a51-4b44-9f4b-4f0c1f0a8c3e",
                "items": [],
                "total_items": 0,
                "total_price": "0.00"
            }
        }
