"""API v1 routes aggregation"""

from fastapi import APIRouter

from .products.router import router as products_router
from .inventory.router import router as inventory_router
from .cart.router import router as cart_router
from .orders.router import router as orders_router
from .payments.router import router as payments_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(products_router, prefix="/products", tags=["Products"])
api_router.include_router(inventory_router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(payments_router, prefix="/payments", tags=["Payments"])

# Export router
router = api_router
