"""
Rate Limiter

Bounds content-fetch requests per client identity over a sliding time window.
Counters live in the shared key-value store, so any store implementation
(in-memory or database) can back the limiter.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Optional

from .config import settings
from .storage.base import KeyValueStore

logger = logging.getLogger("readtools.ratelimit")


KEY_PREFIX = "read_tools:rate_limit:"


class RateLimiter:
    """
    Windowed request counter keyed by client identity.

    Unknown identities are always allowed: availability is preferred over
    strict fairness when the client address cannot be determined.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_requests: Optional[int] = None,
        window_seconds: Optional[float] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        """
        Parameters
        ----------
        store : KeyValueStore
            Storage for the per-identity counters.
        max_requests : Optional[int]
            Requests allowed per window. Defaults to settings.
        window_seconds : Optional[float]
            Window length in seconds. Defaults to settings.
        enabled : Optional[bool]
            When False every request is allowed. Defaults to settings.
        """
        self._store = store
        self.max_requests = (
            max_requests if max_requests is not None else settings.rate_limit_max_requests
        )
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.rate_limit_window_seconds
        )
        self.enabled = enabled if enabled is not None else settings.rate_limiting_enabled

    @staticmethod
    def key_for(identity: str) -> str:
        digest = hashlib.sha256(identity.encode("utf-8")).hexdigest()
        return f"{KEY_PREFIX}{digest}"

    async def allow(self, identity: Optional[str]) -> bool:
        """
        Record one request for `identity` and report whether it may proceed.

        Parameters
        ----------
        identity : Optional[str]
            Client identity (best-effort IP). None or empty means unknown.

        Returns
        -------
        bool
            False if the identity has used up its window, True otherwise.
        """
        if not self.enabled:
            return True

        if not identity:
            logger.debug("Client identity unknown; skipping rate limit")
            return True

        result = await self._store.increment_with_window(
            self.key_for(identity),
            window_seconds=self.window_seconds,
            ceiling=self.max_requests,
        )

        if not result.accepted:
            logger.warning(
                "Rate limit exceeded for %s: %d/%d in window",
                identity,
                result.count,
                self.max_requests,
            )

        return result.accepted
