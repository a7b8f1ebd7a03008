"""
Database Session Management

Builds the async SQLAlchemy engine for the configured URL (SQLite by
default, any async driver otherwise) and the session factory shared by the
item repository and the database-backed store.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import settings
from .models import Base

logger = logging.getLogger("readtools.db")


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine with options suited to the backend.

    SQLite connections are shared across the event loop's tasks, so the
    same-thread check is disabled; server databases get a bounded pool.
    """
    options: Dict[str, Any] = {"echo": False, "pool_pre_ping": True}

    if make_url(database_url).get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = 5
        options["max_overflow"] = 10

    return create_async_engine(database_url, **options)


async_engine = build_engine(settings.database_url)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def create_all_tables() -> None:
    """Create every table that does not exist yet."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%s)", async_engine.url.get_backend_name())


async def dispose_engine() -> None:
    await async_engine.dispose()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session per request.

    The session is committed when the request succeeds and rolled back when
    the handler raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
