"""
Payment schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid

class PaymentRequest(BaseModel):
    """Schema for paying an order"""
    order_id: uuid.UUID
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_method: str = Field(..., min_length=2, max_length=50)

class PaymentResponse(BaseModel):
    """Schema for payment response"""
    payment_id: str
    order_id: uuid.UUID
    amount: Decimal
    status: str
    payment_method: Optional[str]
    message: str
    processed_at: Optional[datetime]

    class Config:
        json_schema_extra = {
            "example": {
                "payment_id": "PAY-1A2B3C4D",
                "order_id": "123e4567-e89b-12d3-a456-426614174000",
                "amount": "31.99",
                "status": "SUCCESS",
                "payment_method": "card",
                "message": "Payment processed successfully (MOCK)",
                "processed_at": "2024-01-01T12:00:00Z"
            }
        }
