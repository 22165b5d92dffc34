"""Database session management."""

from collections.abc import AsyncGenerator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from src.core.config import settings
from src.core.infrastructure.health import DatabaseHealthResult, HealthStatus

async_engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG",
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session whose transaction commits when the endpoint returns.

    Depend on it with ``scope="function"`` so the commit runs before the
    response is sent and a failed commit reaches the exception handlers. An
    exception raised inside the request rolls the whole transaction back.
    """
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        async with session.begin():
            yield session


async def init_db() -> None:
    """Verify the database is reachable."""
    try:
        async with async_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established successfully")
    except SQLAlchemyError as e:
        logger.error(f"Failed to connect to database: {e}")
        raise


async def close_db() -> None:
    await async_engine.dispose()


async def check_db_health() -> DatabaseHealthResult:
    """Check database connectivity and report the server version."""
    try:
        async with async_engine.connect() as conn:
            result = await conn.execute(text("SELECT version()"))
            version = result.scalar()
            return DatabaseHealthResult(
                status=HealthStatus.OK,
                connected=True,
                version=version.split(",")[0] if version else "unknown",
            )
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return DatabaseHealthResult(
            status=HealthStatus.ERROR,
            connected=False,
            error=str(e),
        )
