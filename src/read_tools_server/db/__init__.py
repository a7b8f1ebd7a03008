"""
Database Package

Provides SQLAlchemy async session management, model definitions and the
item repository.
"""

from .session import (
    get_async_session,
    async_engine,
    AsyncSessionLocal,
    create_all_tables,
    dispose_engine,
)
from .models import Base, ContentItem, ItemField, KeyValueEntry, RateLimitRecord
from .repository import ItemRepository

__all__ = [
    "get_async_session",
    "async_engine",
    "AsyncSessionLocal",
    "create_all_tables",
    "dispose_engine",
    "Base",
    "ContentItem",
    "ItemField",
    "KeyValueEntry",
    "RateLimitRecord",
    "ItemRepository",
]
