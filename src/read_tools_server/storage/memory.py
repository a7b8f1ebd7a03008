"""
In-Memory Store

Process-local implementation of the key-value store.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- Passive expiry: stale entries are dropped when they are next read.
- Thread-safe access using a re-entrant lock.
- Injectable clock so tests can move time forward deterministically.
"""

from __future__ import annotations

import time
from threading import RLock
from typing import Callable, Dict, Optional, Tuple

from .base import KeyValueStore, WindowCount


class InMemoryStore(KeyValueStore):
    """
    In-memory store mapping keys to values with optional expiry, plus
    windowed counters.

    Suitable for a single server process. For horizontally scaled setups,
    use the database-backed store, which exposes the same interface.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize a new InMemoryStore.

        Parameters
        ----------
        clock : Callable[[], float]
            Source of the current time in seconds. Defaults to `time.time`.
        """
        self._values: Dict[str, Tuple[str, Optional[float]]] = {}
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._lock = RLock()
        self._clock = clock

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._values.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._values[key]
                return None

            return value

    async def put(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        with self._lock:
            self._values[key] = (value, expires_at)

    async def delete(self, key: str) -> bool:
        with self._lock:
            removed_value = self._values.pop(key, None) is not None
            removed_counter = self._counters.pop(key, None) is not None
            return removed_value or removed_counter

    async def increment_with_window(
        self,
        key: str,
        window_seconds: float,
        ceiling: int,
    ) -> WindowCount:
        now = self._clock()
        with self._lock:
            record = self._counters.get(key)

            if record is None or now - record[1] >= window_seconds:
                self._counters[key] = (1, now)
                return WindowCount(count=1, window_start=now, accepted=True)

            count, window_start = record
            if count >= ceiling:
                return WindowCount(count=count, window_start=window_start, accepted=False)

            self._counters[key] = (count + 1, now)
            return WindowCount(count=count + 1, window_start=now, accepted=True)

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """
        Remove every value and counter.

        Intended primarily for test setup/teardown or administrative resets.
        """
        with self._lock:
            self._values.clear()
            self._counters.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values) + len(self._counters)
