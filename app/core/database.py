"""
Database engine and session management
One async engine per process; services receive their session through get_db
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator
import logging

from .config import settings

logger = logging.getLogger(__name__)

def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on REFERENCES enforcement for every new SQLite connection"""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def build_engine(url: str, **options) -> AsyncEngine:
    """
    Create an async engine for the given URL

    SQLite gets no connection pool and enforced foreign keys; PostgreSQL
    gets the configured pool. Keyword options override the defaults.
    """
    is_sqlite = url.startswith("sqlite")

    if is_sqlite:
        defaults = {"poolclass": NullPool}
    else:
        defaults = {
            "pool_size": settings.DATABASE_POOL_SIZE,
            "max_overflow": settings.DATABASE_MAX_OVERFLOW,
            "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
            "pool_pre_ping": True,
        }
    defaults.update(options)

    engine = create_async_engine(url, echo=settings.DATABASE_ECHO, **defaults)
    if is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine

def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    # Objects stay readable after commit; services reload explicitly when needed
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

engine = build_engine(settings.database_url_async)
AsyncSessionLocal = build_session_factory(engine)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session

    Services commit their own units of work; anything left pending when
    the request ends is committed, and an error rolls it back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def init_db() -> None:
    """Create missing tables"""
    from app.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%s tables)", len(Base.metadata.tables))

async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
