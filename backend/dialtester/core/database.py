"""
Database connection and session management.
"""
from typing import Any, AsyncGenerator, Dict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy.orm import declarative_base

from dialtester.core.config import settings
from dialtester.core.logging import get_logger

logger = get_logger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Build engine keyword arguments for the configured backend."""
    if settings.is_sqlite:
        # aiosqlite connections are thread bound; open one per checkout
        return {
            "poolclass": NullPool,
            "echo": settings.DEBUG,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "echo": settings.DEBUG,
        "connect_args": {
            "command_timeout": 30,
            "server_settings": {
                "application_name": "dial_tester_backend",
            },
        },
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for database models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting a database session.

    Each request gets one session; it is committed when the handler
    returns and rolled back on any exception. Failed operations are not
    retried.
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def create_tables() -> None:
    """Create all tables registered on ``Base``."""
    # Import models so they register with the metadata
    import dialtester.models.database  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")
