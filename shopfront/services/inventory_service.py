"""
Inventory ledger
Owns every write to products.stock_quantity
"""

from typing import Optional
import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from shopfront.models import Product
from shopfront.core.exceptions import (
    BadRequestException,
    InsufficientStockException,
    NotFoundException,
)

logger = logging.getLogger(__name__)

class InventoryLedger:
    """
    Atomic stock reservations against the products table.

    Every change is a single conditional UPDATE, so the read of the current
    stock and the write of the new value cannot interleave with another
    reservation on the same row. Writes join the caller's transaction;
    rolling that transaction back undoes them.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_stock(self, product_id: uuid.UUID) -> int:
        """Current stock level for a product"""
        result = await self.db.execute(
            select(Product.stock_quantity).where(Product.id == product_id)
        )
        stock = result.scalar_one_or_none()
        if stock is None:
            raise NotFoundException("Product not found")
        return stock

    async def reserve(self, product_id: uuid.UUID, quantity: int) -> int:
        """
        Take quantity units out of stock.

        Returns:
            Remaining stock after the reservation

        Raises:
            NotFoundException: If the product does not exist
            InsufficientStockException: If stock is lower than quantity
        """
        self._check_quantity(quantity)

        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .returning(Product.stock_quantity)
            .execution_options(synchronize_session=False)
        )
        remaining = result.scalar_one_or_none()

        if remaining is None:
            name, available = await self._describe(product_id)
            logger.info(f"Reservation of {quantity} x {name} refused, {available} in stock")
            raise InsufficientStockException(name, available)

        self._sync_identity_map(product_id, remaining)
        return remaining

    async def release(self, product_id: uuid.UUID, quantity: int) -> int:
        """Return previously reserved units to stock"""
        self._check_quantity(quantity)
        return await self._increment(product_id, quantity)

    async def restock(self, product_id: uuid.UUID, quantity: int) -> int:
        """Receive new units into stock"""
        self._check_quantity(quantity)
        remaining = await self._increment(product_id, quantity)
        logger.info(f"Restocked product {product_id} by {quantity}, now {remaining}")
        return remaining

    async def _increment(self, product_id: uuid.UUID, quantity: int) -> int:
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=Product.stock_quantity + quantity)
            .returning(Product.stock_quantity)
            .execution_options(synchronize_session=False)
        )
        remaining = result.scalar_one_or_none()
        if remaining is None:
            raise NotFoundException("Product not found")

        self._sync_identity_map(product_id, remaining)
        return remaining

    async def _describe(self, product_id: uuid.UUID) -> tuple[str, int]:
        result = await self.db.execute(
            select(Product.name, Product.stock_quantity).where(Product.id == product_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundException("Product not found")
        return row.name, row.stock_quantity

    def _sync_identity_map(self, product_id: uuid.UUID, stock: int) -> None:
        """Keep an already-loaded Product instance in step with the row"""
        key = self.db.identity_key(Product, product_id)
        product: Optional[Product] = self.db.identity_map.get(key)
        if product is not None:
            set_committed_value(product, "stock_quantity", stock)

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity <= 0:
            raise BadRequestException("Quantity must be positive", error_code="INVALID_QUANTITY")
