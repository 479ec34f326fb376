"""
Main FastAPI application
"""

from fastapi import FastAPI

from shopfront.core.config import settings
from shopfront.core.events import lifespan
from shopfront.core.exceptions import register_exception_handlers
from shopfront.core.middleware import setup_middleware
from shopfront.core.monitoring import add_metrics_endpoint
from shopfront.api import health_router, v1_router

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Shopfront API - carts, orders and inventory",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
register_exception_handlers(app)
add_metrics_endpoint(app)

# Include API routes
app.include_router(health_router)
app.include_router(v1_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shopfront.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
