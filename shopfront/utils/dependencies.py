"""
Common dependencies for FastAPI
"""

from fastapi import Query, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shopfront.core.config import settings
from shopfront.core.database import get_db
from shopfront.core.exceptions import NotFoundException
from shopfront.core.security import get_current_user
from shopfront.models import User
from .pagination import PaginationParams

def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size")
) -> PaginationParams:
    """Get pagination parameters from query"""
    return PaginationParams(page=page, size=size)

async def get_current_active_user(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Current identity, checked against the user directory

    Raises:
        NotFoundException: If user not found or inactive
    """
    result = await db.execute(
        select(User.id).where(
            User.id == current_user["id"],
            User.is_active.is_(True)
        )
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundException("User not found or inactive")

    return current_user
