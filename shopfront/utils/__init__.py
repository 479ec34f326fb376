"""Utilities package"""

from .pagination import paginate, PaginationParams
from .dependencies import get_pagination_params, get_current_active_user

__all__ = [
    "paginate",
    "PaginationParams",
    "get_pagination_params",
    "get_current_active_user"
]
