# app/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy import text
import logging

from .config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.database_url.startswith("sqlite")


def _engine_options() -> dict:
    if _is_sqlite:
        # aiosqlite connections are bound to the loop that opened them
        return {"poolclass": NullPool}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 60,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
        "connect_args": {
            "command_timeout": 60,
            "server_settings": {
                "application_name": "attendance_api",
                "idle_in_transaction_session_timeout": "60s",
                "lock_timeout": "30s",
            }
        },
    }


engine = create_async_engine(
    settings.database_url,
    echo=(settings.environment == 'development' and settings.log_level == 'debug'),
    **_engine_options()
)

# Celery sweeps call asyncio.run() per task, so pooled connections cannot be reused
background_engine = create_async_engine(
    settings.database_url,
    poolclass=NullPool,
    echo=False,
)

# Regular session factory for API requests
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)

# Background task session factory with separate engine
AsyncBackgroundSessionLocal = async_sessionmaker(
    background_engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()

async def init_models():
    """Create every table known to the metadata (dev and test databases)"""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")

async def health_check_db():
    """Fast health check"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False

# Cleanup function for application shutdown
async def close_db_connections():
    """Properly close all database connections"""
    await engine.dispose()
    await background_engine.dispose()
    logger.info("Database connections closed")
