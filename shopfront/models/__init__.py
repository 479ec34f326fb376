"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .product import Product
from .cart import Cart, CartItem
from .order import Order, OrderItem, OrderStatus, OrderStatusHistory

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderStatusHistory",
]
