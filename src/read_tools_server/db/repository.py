"""
Item Repository

Read access to content items and their auxiliary fields.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import ContentItem, unix_timestamp
from ..content.models import ContentIdentity, ItemSnapshot


class ItemRepository:
    """
    Loads items from the database and converts them into plain snapshots.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize with an async database session.

        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        """
        self._session = session

    async def get_identity(self, item_id: int) -> Optional[ContentIdentity]:
        """
        Return the item's identity (id, modification time, status).

        Only the columns needed to build a cache key are loaded, so this is
        cheap enough to run before every cache lookup.
        """
        result = await self._session.execute(
            select(ContentItem.id, ContentItem.modified_at, ContentItem.status)
            .where(ContentItem.id == item_id)
        )
        row = result.one_or_none()
        if row is None:
            return None

        return ContentIdentity(
            item_id=row.id,
            modified=unix_timestamp(row.modified_at),
            status=row.status,
        )

    async def get_snapshot(self, item_id: int) -> Optional[ItemSnapshot]:
        """
        Return the item body and all auxiliary fields, or None if missing.
        """
        result = await self._session.execute(
            select(ContentItem)
            .options(selectinload(ContentItem.fields))
            .where(ContentItem.id == item_id)
        )
        item = result.scalar_one_or_none()
        if item is None:
            return None

        return ItemSnapshot(
            item_id=item.id,
            body=item.body or "",
            fields=[(f.key, f.value) for f in item.fields],
        )
