"""Cart router; every route acts on the caller's own cart"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from shopfront.core.database import get_db
from shopfront.utils.dependencies import get_current_active_user
from .schemas import CartItemCreate, CartItemUpdate, CartResponse
from .services import CartService

router = APIRouter()

@router.get("", response_model=CartResponse)
async def get_cart(
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the caller's cart with live prices"""
    service = CartService(db)
    return await service.get_cart(current_user["id"])

@router.post("/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    item_data: CartItemCreate,
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Add item to cart"""
    service = CartService(db)
    return await service.add_item(
        user_id=current_user["id"],
        product_id=item_data.product_id,
        quantity=item_data.quantity
    )

@router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: uuid.UUID,
    update_data: CartItemUpdate,
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Update cart item quantity"""
    service = CartService(db)
    return await service.update_item_quantity(
        user_id=current_user["id"],
        item_id=item_id,
        quantity=update_data.quantity
    )

@router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    item_id: uuid.UUID,
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove item from cart"""
    service = CartService(db)
    return await service.remove_item(current_user["id"], item_id)

@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    current_user: dict = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Clear all items from cart"""
    service = CartService(db)
    await service.clear(current_user["id"])
