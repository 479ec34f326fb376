# Shopfront monitoring configuration
# Prometheus metrics and logging setup

import logging
import logging.handlers
import os

from fastapi import FastAPI, Response
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

from .config import settings

# Order workflow metrics
orders_created = Counter('orders_created_total', 'Orders created from carts')
orders_cancelled = Counter('orders_cancelled_total', 'Orders cancelled with stock restored')
orders_refunded = Counter('orders_refunded_total', 'Orders moved to refunded')
order_status_changes = Counter('order_status_changes_total', 'Order status transitions', ['status'])

# Inventory metrics
stock_reservation_conflicts = Counter(
    'stock_reservation_conflicts_total',
    'Reservations that lost a race for stock'
)

# Notification metrics
notification_failures = Counter('notification_failures_total', 'Failed notification dispatches', ['kind'])

def setup_logging():
    """Configure logging for the application"""

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    # File handler with rotation
    if settings.LOG_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        handlers=handlers
    )

    # Silence noisy loggers in production
    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

def add_metrics_endpoint(app: FastAPI):
    """Expose Prometheus metrics"""

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
