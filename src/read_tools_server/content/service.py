"""
Transcript Service

Composes repository, cache and resolver into the lookup work of the fetch
endpoint. Request-level checks (rate limit, security token, id shape) happen
before this layer is reached.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from .cache import TranscriptCache
from .models import ContentIdentity, ItemSnapshot
from .resolver import ContentResolver, FRONTEND_EXTRACTION_SENTINEL
from ..core.errors import (
    ContentRetrievalError,
    EmptyContent,
    InvalidItemId,
    ItemNotAccessible,
)

logger = logging.getLogger("readtools.content")

ITEM_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class ItemSource(Protocol):
    """Read interface the service needs from an item repository."""

    async def get_identity(self, item_id: int) -> Optional[ContentIdentity]: ...

    async def get_snapshot(self, item_id: int) -> Optional[ItemSnapshot]: ...


def parse_item_id(raw: Any) -> int:
    """
    Validate a client-supplied item id.

    Accepts integers and decimal strings; anything else, or a non-positive
    value, is rejected.

    Raises
    ------
    InvalidItemId
    """
    if raw is None or raw == "":
        raise InvalidItemId("Error: Post ID not provided.")

    if isinstance(raw, bool):
        raise InvalidItemId()

    if isinstance(raw, int):
        item_id = raw
    elif isinstance(raw, str) and ITEM_ID_PATTERN.fullmatch(raw.strip()):
        item_id = int(raw.strip())
    else:
        raise InvalidItemId()

    if item_id <= 0:
        raise InvalidItemId()

    return item_id


class TranscriptService:
    """
    Cache-first transcript lookup for one item.
    """

    def __init__(
        self,
        items: ItemSource,
        cache: TranscriptCache,
        resolver: ContentResolver,
        frontend_extraction_enabled: bool = True,
    ) -> None:
        self._items = items
        self._cache = cache
        self._resolver = resolver
        self._frontend_extraction_enabled = frontend_extraction_enabled

    async def get_transcript(self, item_id: int) -> str:
        """
        Return the transcript for `item_id`, resolving and caching on a miss.

        Returns
        -------
        str
            The transcript, or the frontend-extraction sentinel when the item
            holds no usable text.

        Raises
        ------
        ItemNotAccessible
            Item missing or not publicly readable.
        EmptyContent
            Nothing usable and client-side extraction is disabled.
        ContentRetrievalError
            Storage or resolution fault.
        """
        try:
            identity = await self._items.get_identity(item_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load identity of item %d", item_id)
            raise ContentRetrievalError() from exc

        if identity is None:
            raise ItemNotAccessible()

        cached = await self._cache.get(identity)
        if cached is not None:
            logger.info("Serving cached content for item %d", item_id)
            return cached

        if not identity.is_public:
            raise ItemNotAccessible()

        try:
            snapshot = await self._items.get_snapshot(item_id)
            if snapshot is None:
                raise ItemNotAccessible()
            transcript = self._resolver.resolve(snapshot)
        except ItemNotAccessible:
            raise
        except Exception as exc:
            logger.exception("Failed to resolve content of item %d", item_id)
            raise ContentRetrievalError() from exc

        if not transcript:
            if not self._frontend_extraction_enabled:
                raise EmptyContent()
            logger.info("No server-side content for item %d; requesting frontend extraction", item_id)
            transcript = FRONTEND_EXTRACTION_SENTINEL

        await self._cache.put(identity, transcript)
        logger.info("Processed and cached content for item %d", item_id)
        return transcript
