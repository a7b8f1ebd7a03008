"""
Key-Value Store Interface

Minimal storage contract shared by the transcript cache and the rate limiter.
Implementations may keep data in process memory or in a database without the
calling code noticing the difference.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional


class WindowCount(NamedTuple):
    """Result of a windowed counter increment."""
    count: int
    window_start: float
    accepted: bool


class KeyValueStore(ABC):
    """
    Abstract async key-value store with expiring entries and windowed counters.

    Concurrency guarantees are best-effort: two writers racing on the same key
    may lose one update. Callers only store values for which a lost update is
    harmless.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or expired."""

    @abstractmethod
    async def put(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        """Store `value` under `key`, expiring after `ttl` seconds if given."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove `key`. Returns True if something was removed."""

    @abstractmethod
    async def increment_with_window(
        self,
        key: str,
        window_seconds: float,
        ceiling: int,
    ) -> WindowCount:
        """
        Increment the counter stored under `key` within a sliding time window.

        The window is measured from the last accepted increment.

        - No record, or the window has elapsed: the count restarts at 1 and
          a new window begins.
        - The count has reached `ceiling`: nothing is mutated and the result
          has `accepted=False`.
        - Otherwise the count is incremented and the window restarts now.
        """
