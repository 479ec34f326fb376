"""Inventory routes; stock is read and received here, never set directly"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from shopfront.core.database import get_db
from shopfront.core.security import get_current_user, require_admin
from shopfront.services.catalog import ProductCatalog
from shopfront.services.inventory_service import InventoryLedger
from .schemas import StockLevel, RestockRequest

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/{product_id}", response_model=StockLevel)
async def get_stock_level(
    product_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Current stock for a product"""
    ledger = InventoryLedger(db)
    stock = await ledger.get_stock(product_id)
    return StockLevel(product_id=product_id, stock_quantity=stock, in_stock=stock > 0)

@router.post("/{product_id}/restock", response_model=StockLevel)
async def restock_product(
    product_id: uuid.UUID,
    restock: RestockRequest,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Receive units into stock (Admin only)"""
    ledger = InventoryLedger(db)
    stock = await ledger.restock(product_id, restock.quantity)
    await db.commit()

    await ProductCatalog(db).invalidate(product_id)
    if restock.notes:
        logger.info(f"Restock note for {product_id}: {restock.notes}")

    return StockLevel(product_id=product_id, stock_quantity=stock, in_stock=stock > 0)
