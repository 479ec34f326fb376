"""Inventory schemas"""

from pydantic import BaseModel, Field
from typing import Optional
import uuid

class StockLevel(BaseModel):
    product_id: uuid.UUID
    stock_quantity: int
    in_stock: bool

class RestockRequest(BaseModel):
    quantity: int = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=500)
