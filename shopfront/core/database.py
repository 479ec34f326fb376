"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator
import logging

from .config import settings
from .exceptions import InternalServerException

logger = logging.getLogger(__name__)

def configure_sqlite(engine: AsyncEngine, busy_timeout: int = settings.SQLITE_BUSY_TIMEOUT) -> AsyncEngine:
    """
    Serialize SQLite write transactions.

    The driver's implicit BEGIN is disabled and every transaction opens with
    BEGIN IMMEDIATE, so the write lock is taken up front and competing
    transactions queue on the busy timeout instead of failing mid-flight.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {int(busy_timeout) * 1000}")
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine

def create_engine_for(url: str) -> AsyncEngine:
    """Create an async engine with dialect-appropriate pooling"""
    if url.startswith("sqlite"):
        # SQLite doesn't support connection pooling parameters
        engine = create_async_engine(
            url,
            echo=settings.DATABASE_ECHO,
            poolclass=NullPool,
        )
        return configure_sqlite(engine)

    # PostgreSQL and other databases support pooling
    return create_async_engine(
        url,
        echo=settings.DATABASE_ECHO,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
    )

engine = create_engine_for(settings.database_url_async)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Database dependency
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Ensures proper cleanup after use
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def commit_or_raise(session: AsyncSession, action: str) -> None:
    """Commit, or roll back and report a 500 naming the failed action"""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise InternalServerException(f"Failed to {action}")

async def init_db() -> None:
    """Initialize database tables"""
    from shopfront.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
