"""Products API router"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from shopfront.core.database import get_db
from shopfront.core.security import require_admin
from shopfront.services.catalog import ProductCatalog
from .schemas import ProductCreate, ProductUpdate, ProductResponse

router = APIRouter()

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Get product details, served from the catalog cache when warm"""
    catalog = ProductCatalog(db)
    return await catalog.get_product_view(product_id)

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create product (Admin only)"""
    catalog = ProductCatalog(db)
    product = await catalog.create_product(product_data.model_dump())
    return ProductResponse.model_validate(product)

@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: uuid.UUID,
    product_data: ProductUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update product (Admin only)"""
    catalog = ProductCatalog(db)
    product = await catalog.update_product(product_id, product_data.model_dump(exclude_unset=True))
    return ProductResponse.model_validate(product)
