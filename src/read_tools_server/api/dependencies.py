from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..content.cache import TranscriptCache
from ..content.resolver import ContentResolver
from ..content.service import TranscriptService
from ..db import AsyncSessionLocal, ItemRepository, get_async_session
from ..rate_limiter import RateLimiter
from ..storage import InMemoryStore, KeyValueStore, SqlStore


@lru_cache
def get_store() -> KeyValueStore:
    # One shared store per process; the database backend lets several
    # processes share cache entries and counters.
    if settings.store_backend == "database":
        return SqlStore(AsyncSessionLocal)
    return InMemoryStore()


@lru_cache
def get_resolver() -> ContentResolver:
    return ContentResolver()


def get_rate_limiter(store: KeyValueStore = Depends(get_store)) -> RateLimiter:
    return RateLimiter(store)


def get_transcript_cache(store: KeyValueStore = Depends(get_store)) -> TranscriptCache:
    return TranscriptCache(store)


def get_item_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ItemRepository:
    return ItemRepository(session)


def get_transcript_service(
    items: ItemRepository = Depends(get_item_repository),
    cache: TranscriptCache = Depends(get_transcript_cache),
    resolver: ContentResolver = Depends(get_resolver),
) -> TranscriptService:
    return TranscriptService(
        items=items,
        cache=cache,
        resolver=resolver,
        frontend_extraction_enabled=settings.frontend_extraction_enabled,
    )
