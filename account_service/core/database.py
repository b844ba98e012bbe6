"""
Database engine and session management for the account service.
Uses async SQLAlchemy; the engine is created per application rather than at import.
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
import structlog

from .config import Settings
from ..models.base import Base

logger = structlog.get_logger()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine described by ``DATABASE_URL``."""
    connect_args = {}
    if settings.uses_sqlite:
        connect_args["check_same_thread"] = False
    
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,  # Validate connections before use
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create tables and indexes that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


class DatabaseHealthCheck:
    """Health check utilities for database connections."""
    
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
    
    async def check_connection(self) -> bool:
        """Check if database connection is healthy."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


async def close_db_connections(engine: AsyncEngine) -> None:
    """Close all database connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
