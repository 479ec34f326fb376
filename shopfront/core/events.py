"""
Application lifecycle events
Handles startup and shutdown tasks
"""

from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from .database import init_db, close_db
from .cache import cache
from .monitoring import setup_logging
from .config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME}...")

    try:
        # Tests create their own schema on a per-test database
        if not settings.is_test:
            await init_db()
            logger.info("Database initialized")

            await cache.connect()
            logger.info("Cache connected")

        logger.info(f"{settings.APP_NAME} started successfully")

        yield

    finally:
        logger.info(f"Shutting down {settings.APP_NAME}...")

        await close_db()
        await cache.disconnect()

        logger.info(f"{settings.APP_NAME} shutdown complete")
