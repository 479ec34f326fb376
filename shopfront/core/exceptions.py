"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)

class ShopfrontException(HTTPException):
    """Base exception class for Shopfront application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(ShopfrontException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(ShopfrontException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(ShopfrontException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(ShopfrontException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class InternalServerException(ShopfrontException):
    """500 Internal Server Error"""

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class InsufficientStockException(BadRequestException):
    """Product stock insufficient"""

    def __init__(self, product_name: str, available: int):
        super().__init__(
            detail=f"Insufficient stock for product: {product_name}. Only {available} available.",
            error_code="INSUFFICIENT_STOCK"
        )
        self.product_name = product_name
        self.available = available

class StockConflictException(BadRequestException):
    """Stock changed between validation and reservation; safe to retry"""

    retryable = True

    def __init__(self, product_name: str):
        super().__init__(
            detail=f"Stock changed for product: {product_name}, please retry",
            error_code="STOCK_CHANGED"
        )
        self.product_name = product_name

class EmptyCartException(BadRequestException):
    """Checkout attempted with no cart items"""

    def __init__(self, detail: str = "Cart is empty"):
        super().__init__(detail=detail, error_code="EMPTY_CART")

class ProductUnavailableException(BadRequestException):
    """Product inactive or out of stock"""

    def __init__(self, detail: str = "Product is not available"):
        super().__init__(detail=detail, error_code="PRODUCT_UNAVAILABLE")

class InvalidPaymentException(BadRequestException):
    """Payment validation failed"""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="INVALID_PAYMENT"
        )

class OrderNotCancellableException(BadRequestException):
    """Order cannot be cancelled"""

    def __init__(self, detail: str = "Order cannot be cancelled in current status"):
        super().__init__(
            detail=detail,
            error_code="ORDER_NOT_CANCELLABLE"
        )

class InvalidStatusTransitionException(BadRequestException):
    """Requested status is not reachable from the current one"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            detail=f"Cannot transition order from {current} to {requested}",
            error_code="INVALID_STATUS_TRANSITION"
        )

def _error_body(request: Request, code: Optional[str], message: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "request_id": getattr(request.state, "request_id", None)
        }
    }

def register_exception_handlers(app: FastAPI) -> None:
    """Render every application error as a structured JSON body"""

    @app.exception_handler(ShopfrontException)
    async def shopfront_exception_handler(request: Request, exc: ShopfrontException):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code}: {exc.detail} on {request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.error_code, exc.detail),
            headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {str(exc)}")

        # Don't expose internal errors in production
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "INTERNAL_ERROR", detail)
        )
