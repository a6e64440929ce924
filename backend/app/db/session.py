"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support (asyncpg in production, aiosqlite
for local runs).
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite ships with foreign keys off; ON DELETE rules need them on."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **options) -> AsyncEngine:
    """
    Create the async engine for ``database_url``.

    SQLite connections get foreign key enforcement switched on, so cascades
    behave as they do on PostgreSQL. Extra keyword arguments are passed to
    ``create_async_engine``.
    """
    is_sqlite = database_url.startswith("sqlite")
    engine_options = {"echo": settings.db_echo, "future": True}
    # SQLite pools do not take size/overflow
    if not is_sqlite:
        engine_options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    engine_options.update(options)

    async_engine = create_async_engine(database_url, **engine_options)
    if is_sqlite:
        event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return async_engine


# Create async engine
engine = build_engine(settings.database_url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
