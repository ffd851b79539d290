"""Database session configuration"""

import logging
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from chronos.config import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_POOL_RECYCLE,
)
from chronos.db.base import Base

logger = logging.getLogger(__name__)


def to_async_url(url: str) -> str:
    """
    Convert a database URL to an async driver URL.

    postgresql:// and postgresql+asyncpg:// become postgresql+psycopg://;
    sqlite:// becomes sqlite+aiosqlite://.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql+asyncpg://"):
        return url.replace("postgresql+asyncpg://", "postgresql+psycopg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if url.startswith(("postgresql+psycopg://", "sqlite+aiosqlite://")):
        return url
    raise ValueError(f"Unsupported database URL format: {url}")


ASYNC_DATABASE_URL = to_async_url(DATABASE_URL)
IS_SQLITE = ASYNC_DATABASE_URL.startswith("sqlite")

engine_options = {"pool_pre_ping": True, "echo": False}
if IS_SQLITE:
    # aiosqlite connections must not outlive the event loop that opened them
    engine_options["poolclass"] = NullPool
else:
    engine_options.update(
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_recycle=DB_POOL_RECYCLE,
    )

engine = create_async_engine(ASYNC_DATABASE_URL, **engine_options)

SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI routes.

    Usage:
        @router.get("/example")
        async def example(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_models() -> None:
    """Create missing tables"""
    # Register ORM models on the metadata
    import chronos.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


def get_pool_stats() -> dict:
    """
    Get current connection pool statistics.

    Returns:
        Dictionary with size, checked_in, checked_out, overflow and max_overflow.
        Pools that do not track a value report 0.
    """
    pool = engine.sync_engine.pool

    def _read(name: str, default: int = 0) -> int:
        attr = getattr(pool, name, None)
        try:
            value = attr() if callable(attr) else attr
            return int(value) if value is not None else default
        except Exception as e:
            logger.warning(f"Error reading pool stat '{name}': {e}")
            return default

    return {
        "size": _read("size", DB_POOL_SIZE if not IS_SQLITE else 0),
        "checked_in": _read("checkedin"),
        "checked_out": _read("checkedout"),
        "overflow": max(0, _read("overflow")),
        "max_overflow": _read("_max_overflow", DB_MAX_OVERFLOW if not IS_SQLITE else 0),
    }
