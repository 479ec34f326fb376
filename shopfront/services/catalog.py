"""
Product catalog with an explicit read-through cache
Writers invalidate the cached entries they make stale
"""

from typing import Any, Dict, Iterable, Optional
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopfront.models import Product
from shopfront.core.cache import RedisCache, cache
from shopfront.core.config import settings
from shopfront.core.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)

def product_cache_key(product_id: uuid.UUID) -> str:
    return f"catalog:product:{product_id}"

class ProductCatalog:
    """Product lookups and admin writes"""

    def __init__(self, db: AsyncSession, cache_backend: Optional[RedisCache] = None):
        self.db = db
        self.cache = cache_backend or cache

    async def get_product(self, product_id: uuid.UUID) -> Product:
        """Live product row, bypassing the cache"""
        result = await self.db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def get_product_view(self, product_id: uuid.UUID) -> Dict[str, Any]:
        """
        Product as a JSON-safe dict, served from cache when present.

        Stock levels in a cached view may lag by up to CATALOG_CACHE_TTL
        if a writer skipped invalidation; order creation never reads it.
        """
        key = product_cache_key(product_id)
        cached_view = await self.cache.get(key)
        if cached_view is not None:
            return cached_view

        product = await self.get_product(product_id)
        view = self.to_view(product)
        await self.cache.set(key, view, expire=settings.CATALOG_CACHE_TTL)
        return view

    async def create_product(self, data: Dict[str, Any]) -> Product:
        """Create a product from validated fields"""
        if data.get("sku"):
            existing = await self.db.execute(select(Product.id).where(Product.sku == data["sku"]))
            if existing.scalar_one_or_none():
                raise BadRequestException("Product with this SKU already exists", error_code="DUPLICATE_SKU")

        product = Product(**data)
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)

        logger.info(f"Product created: {product.id} ({product.name})")
        return product

    async def update_product(self, product_id: uuid.UUID, changes: Dict[str, Any]) -> Product:
        """Apply field changes and drop the cached view"""
        product = await self.get_product(product_id)

        for field, value in changes.items():
            setattr(product, field, value)

        if product.discount_price is not None and product.discount_price > product.price:
            raise BadRequestException("Discount price cannot exceed price")

        await self.db.commit()
        await self.db.refresh(product)
        await self.invalidate(product_id)

        logger.info(f"Product updated: {product_id}")
        return product

    async def invalidate(self, product_id: uuid.UUID) -> None:
        await self.cache.delete(product_cache_key(product_id))

    async def invalidate_many(self, product_ids: Iterable[uuid.UUID]) -> None:
        keys = {product_cache_key(product_id) for product_id in product_ids}
        if keys:
            await self.cache.delete(*keys)

    @staticmethod
    def to_view(product: Product) -> Dict[str, Any]:
        view = product.to_dict()
        view["effective_price"] = str(product.effective_price)
        view["is_in_stock"] = product.is_in_stock
        return view
