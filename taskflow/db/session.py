"""
Database engine and session configuration.

The engine (and its connection pool) is built by the application factory at
startup and kept on ``app.state``; nothing here holds a process-wide
connection.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskflow.core.config import Settings
from taskflow.db.base import Base

logger = logging.getLogger(__name__)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    SQLite's built-in ``lower()`` only folds ASCII, so on SQLite it is
    replaced per connection with one that folds like ``str.lower``.
    """
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,  # When DEBUG=True, SQL statements are logged
        future=True,
    )

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _register_unicode_lower(dbapi_connection, connection_record):
            dbapi_connection.create_function("lower", 1, _unicode_lower)

    return engine


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Keeps data accessible after commit
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all model tables that do not exist yet."""
    # Register the models on the metadata before creating
    import taskflow.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection(engine: AsyncEngine) -> bool:
    """Acquire one pooled connection and run a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Error acquiring database connection")
        return False
    logger.info("Successfully connected to the database")
    return True


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for one request.

    The session holds at most one pooled connection for the duration of the
    request. It is committed when the endpoint succeeds, rolled back when it
    raises, and always closed so the connection goes back to the pool.

    Usage in a FastAPI endpoint:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
