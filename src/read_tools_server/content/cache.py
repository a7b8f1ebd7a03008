"""
Transcript Cache

Memoizes resolved transcripts keyed by item id and modification time. An
edit changes the modification time, so stale entries are never read again
and simply expire.
"""

from __future__ import annotations

from typing import Optional

from .models import ContentIdentity
from ..config import settings
from ..storage.base import KeyValueStore


KEY_PREFIX = "read_tools:"


def cache_key(identity: ContentIdentity) -> str:
    return f"{KEY_PREFIX}content_{identity.item_id}_{identity.modified}"


class TranscriptCache:
    """
    Thin typed layer over the key-value store.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: Optional[float] = None) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache_ttl_seconds

    async def get(self, identity: ContentIdentity) -> Optional[str]:
        return await self._store.get(cache_key(identity))

    async def put(
        self,
        identity: ContentIdentity,
        transcript: str,
        ttl: Optional[float] = None,
    ) -> None:
        await self._store.put(
            cache_key(identity),
            transcript,
            ttl=ttl if ttl is not None else self.ttl_seconds,
        )

    async def invalidate(self, identity: ContentIdentity) -> bool:
        """
        Drop the entry for `identity`.

        Only needed when two edits land within the same second and keep the
        same modification timestamp.
        """
        return await self._store.delete(cache_key(identity))
