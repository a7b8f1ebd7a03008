"""
Database Store

Key-value store persisted through SQLAlchemy, for deployments where several
server processes must share the transcript cache and rate-limit counters.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .base import KeyValueStore, WindowCount
from ..db.models import KeyValueEntry, RateLimitRecord


class SqlStore(KeyValueStore):
    """
    Database-backed store using the `kv_entry` and `rate_limit_record` tables.

    Every call runs in its own short transaction. Counter updates are a plain
    read-modify-write, so concurrent requests may undercount slightly; this
    matches the best-effort contract of the interface.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize with a session factory.

        Parameters
        ----------
        session_factory : async_sessionmaker[AsyncSession]
            Factory producing sessions bound to the target database.
        clock : Callable[[], float]
            Source of the current time in seconds.
        """
        self._session_factory = session_factory
        self._clock = clock

    async def get(self, key: str) -> Optional[str]:
        async with self._session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                return None

            if entry.expires_at is not None and entry.expires_at <= self._clock():
                await session.delete(entry)
                await session.commit()
                return None

            return entry.value

    async def put(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        async with self._session_factory() as session:
            await session.merge(KeyValueEntry(key=key, value=value, expires_at=expires_at))
            await session.commit()

    async def delete(self, key: str) -> bool:
        async with self._session_factory() as session:
            removed = 0
            for model in (KeyValueEntry, RateLimitRecord):
                result = await session.execute(delete(model).where(model.key == key))
                removed += result.rowcount or 0
            await session.commit()
            return removed > 0

    async def increment_with_window(
        self,
        key: str,
        window_seconds: float,
        ceiling: int,
    ) -> WindowCount:
        now = self._clock()
        async with self._session_factory() as session:
            result = await session.execute(
                select(RateLimitRecord).where(RateLimitRecord.key == key)
            )
            record = result.scalar_one_or_none()

            if record is None:
                session.add(RateLimitRecord(key=key, count=1, window_start=now))
                await session.commit()
                return WindowCount(count=1, window_start=now, accepted=True)

            if now - record.window_start >= window_seconds:
                record.count = 1
                record.window_start = now
                await session.commit()
                return WindowCount(count=1, window_start=now, accepted=True)

            if record.count >= ceiling:
                return WindowCount(
                    count=record.count,
                    window_start=record.window_start,
                    accepted=False,
                )

            record.count += 1
            record.window_start = now
            count = record.count
            await session.commit()
            return WindowCount(count=count, window_start=now, accepted=True)
