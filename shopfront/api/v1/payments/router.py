"""
Payment API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopfront.core.database import get_db
from shopfront.core.security import get_current_user
from .schemas import PaymentRequest, PaymentResponse
from .services import PaymentService

router = APIRouter()

@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay order",
    description="Pay a pending order with the mock payment processor"
)
async def process_payment(
    payment_data: PaymentRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Process payment"""
    service = PaymentService(db)
    result = await service.process_payment(
        order_id=payment_data.order_id,
        amount=payment_data.amount,
        payment_method=payment_data.payment_method,
        requester_id=current_user["id"],
        requester_role=current_user["role"]
    )
    return PaymentResponse(**result)

@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment status"
)
async def get_payment_status(
    payment_id: str,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get payment status"""
    service = PaymentService(db)
    result = await service.get_payment_status(
        payment_id=payment_id,
        requester_id=current_user["id"],
        requester_role=current_user["role"]
    )
    return PaymentResponse(**result)
